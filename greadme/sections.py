"""
sections.py

Responsibility: Pull the pieces of an existing README that the template needs
out of a parsed `MarkdownTree`.

Sections are found by matching normalized heading titles against keyword lists,
so "## 📥 Installation" and "## installation" both match "installation".
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from greadme.mdtree import KIND_CODE_BLOCK, MarkdownTree, Node

BADGE_RE = re.compile(r"!\[.*\]\(https://img\.shields\.io.*\)")
_LEADING_JUNK_RE = re.compile(r"^[^\w]+")
_ORDINAL_RE = re.compile(r"^\d+[.)]\s*")
_RULE_RE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")

SECTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "features": ("features",),
    "platforms": ("supported platforms", "platforms"),
    "quick_install": ("quick installation", "quick install", "quick start"),
    "homebrew": ("homebrew",),
    "build_from_source": ("build from source", "building from source"),
    "providers": ("supported providers", "providers"),
    "usage": ("usage",),
    "commands": ("available commands", "commands"),
    "env_vars": ("provider credentials", "credentials", "environment variables"),
    "dev_guide": ("development guide", "development", "developing"),
    "contribution": ("contribution", "contributing"),
    "license": ("license", "licence"),
    "acknowledgments": ("acknowledgments", "acknowledgements"),
}


@dataclass
class ReadmeContext:
    """Values extracted from an existing README, one list of lines per section."""

    project_name: str = ""
    description: str = ""
    badges: list[str] = field(default_factory=list)
    sections: dict[str, list[str]] = field(default_factory=dict)

    def section(self, name: str) -> list[str]:
        return self.sections.get(name, [])


def normalize_title(title: str) -> str:
    text = title.lower().strip()
    text = _LEADING_JUNK_RE.sub("", text)
    text = _ORDINAL_RE.sub("", text)
    return " ".join(text.split())


def find_section(tree: MarkdownTree, keywords: tuple[str, ...] | list[str]) -> Node | None:
    """
    First heading whose normalized title equals a keyword, else the first one
    that contains a keyword.
    """
    wanted = [k.lower() for k in keywords]
    headings = tree.headings()
    titles = [(node, normalize_title(node.title)) for node in headings]

    for node, title in titles:
        if title in wanted:
            return node
    for node, title in titles:
        if any(k in title for k in wanted):
            return node
    return None


def _trim_blank(lines: list[str]) -> list[str]:
    start, stop = 0, len(lines)
    while start < stop and not lines[start].strip():
        start += 1
    while stop > start and not lines[stop - 1].strip():
        stop -= 1
    return lines[start:stop]


def node_markdown(node: Node) -> list[str]:
    """
    A node's body as Markdown lines, with the consumed code fences put back.
    """
    out: list[str] = []
    pos = 0
    for fence in node.fences:
        out.extend(node.body[pos:fence.start])
        out.append("```" + fence.info)
        out.extend(node.body[fence.start:fence.stop])
        out.append("```")
        pos = fence.stop
    out.extend(node.body[pos:])
    return _trim_blank(out)


def extract_badges(tree: MarkdownTree) -> list[str]:
    badges: list[str] = []
    for node, _depth in tree.walk():
        for line, kind in zip(node.body, node.line_kinds):
            if kind != KIND_CODE_BLOCK and BADGE_RE.search(line):
                badges.append(line.strip())
    return badges


def _first_h1(tree: MarkdownTree) -> Node | None:
    return tree.find(lambda n: n.level == 1)


def extract_description(tree: MarkdownTree) -> str:
    """
    First plain paragraph under the first H1 (or the root, when there is no H1).
    """
    node = _first_h1(tree) or tree.root
    paragraph: list[str] = []
    for line, kind in zip(node.body, node.line_kinds):
        text = line.strip()
        skip = (
            kind == KIND_CODE_BLOCK
            or BADGE_RE.search(text) is not None
            or text.startswith(">")
            or text.startswith("<!--")
            or _RULE_RE.match(text) is not None
        )
        if not text or skip:
            if paragraph:
                break
            continue
        paragraph.append(text)
    return " ".join(paragraph)


def extract_readme_context(
    tree: MarkdownTree,
    keywords: Mapping[str, tuple[str, ...] | list[str]] | None = None,
) -> ReadmeContext:
    kw = dict(SECTION_KEYWORDS)
    if keywords:
        kw.update({k: tuple(v) for k, v in keywords.items()})

    h1 = _first_h1(tree)
    ctx = ReadmeContext(
        project_name=h1.title if h1 else "",
        description=extract_description(tree),
        badges=extract_badges(tree),
    )
    for name, words in kw.items():
        node = find_section(tree, words)
        ctx.sections[name] = node_markdown(node) if node is not None else []
    return ctx
