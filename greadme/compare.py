"""
compare.py

Responsibility: Compare a README against a reference README and produce an
improved version with TODO markers where the README falls short.

Both documents are parsed into trees first; headings are matched by normalized
title, so emoji prefixes and case do not matter. The template's first H1 is the
project title placeholder and is matched against the README's first H1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from greadme.mdtree import KIND_CODE_BLOCK, MarkdownTree, Node
from greadme.sections import BADGE_RE, extract_badges, node_markdown, normalize_title

logger = logging.getLogger(__name__)

TODO_MISSING_BADGE = "<!-- TODO: Insert missing badge -->"
TODO_REVIEW_SECTION = "<!-- TODO: Review and update this section -->"
TODO_MISSING_SECTION = "<!-- TODO: Add missing section -->"


@dataclass
class ComparisonReport:
    missing_badges: list[str] = field(default_factory=list)
    missing_sections: list[str] = field(default_factory=list)
    changed_sections: list[str] = field(default_factory=list)
    text: str = ""

    @property
    def is_complete(self) -> bool:
        return not (self.missing_badges or self.missing_sections or self.changed_sections)


def _section_body(node: Node) -> list[str]:
    # Badges are emitted once at the top, never inside sections.
    without_badges = Node(id=node.id, level=node.level, title=node.title, kind=node.kind)
    kept = 0
    fences = []
    offsets: list[int] = []
    for line, kind in zip(node.body, node.line_kinds):
        offsets.append(kept)
        if kind != KIND_CODE_BLOCK and BADGE_RE.search(line):
            continue
        without_badges.body.append(line)
        without_badges.line_kinds.append(kind)
        kept += 1
    offsets.append(kept)
    for fence in node.fences:
        fences.append(fence._replace(start=offsets[fence.start], stop=offsets[fence.stop]))
    without_badges.fences = fences
    return node_markdown(without_badges)


def _index_readme(tree: MarkdownTree) -> dict[str, Node]:
    index: dict[str, Node] = {}
    for node in tree.headings():
        index.setdefault(normalize_title(node.title), node)
    return index


def compare_readmes(template: MarkdownTree, readme: MarkdownTree) -> ComparisonReport:
    report = ComparisonReport()
    out: list[str] = []

    template_badges = extract_badges(template)
    readme_badges = extract_badges(readme)
    logger.info("Checking badges")
    for badge in template_badges:
        if badge in readme_badges:
            out.append(badge)
        else:
            logger.info("  Missing badge: %s", badge)
            report.missing_badges.append(badge)
            out.append(TODO_MISSING_BADGE)
            out.append(badge)
    out.extend(b for b in readme_badges if b not in template_badges)
    out.append("")

    readme_index = _index_readme(readme)
    template_h1 = template.find(lambda n: n.level == 1)
    readme_h1 = readme.find(lambda n: n.level == 1)

    logger.info("Checking sections")
    for node in template.headings():
        if node is template_h1 and readme_h1 is not None:
            match: Node | None = readme_h1
        else:
            match = readme_index.get(normalize_title(node.title))

        title = match.title if match is not None else node.title
        out.append(f"{'#' * node.level} {title}")
        out.append("")

        expected = _section_body(node)
        if match is None:
            logger.info("  Missing section: %s", node.title)
            report.missing_sections.append(node.title)
            out.append(TODO_MISSING_SECTION)
            out.extend(expected)
        else:
            actual = _section_body(match)
            if actual != expected:
                logger.info("  Section '%s' needs updates.", node.title)
                report.changed_sections.append(node.title)
                out.append(TODO_REVIEW_SECTION)
            out.extend(actual)
        out.append("")

    report.text = "\n".join(out).rstrip("\n") + "\n"
    return report
