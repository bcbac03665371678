"""
mdtree.py

Responsibility: Parse Markdown text into a heading-hierarchical tree.

The parser is a single pass over the document lines:
- A line starting with three backticks toggles the fenced-code state and is consumed.
- Inside a fence every line is stored verbatim on the current node.
- A heading line creates a node and attaches it under the nearest preceding heading
  with a strictly smaller level (see `find_parent`).
- Everything else is appended to the current node's body, tagged with the line kind.

Nodes live in an arena (`MarkdownTree.nodes`) and are addressed by integer id;
the root is always id 0 and heading ids follow encounter order.
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, NamedTuple, TextIO

logger = logging.getLogger(__name__)

KIND_TITLE = "title"
KIND_LIST = "list"
KIND_ORDERED_LIST = "ordered-list"
KIND_CODE_BLOCK = "code-block"
KIND_INLINE_CODE = "inline-code"
KIND_CONTENT = "content"

NODE_KINDS = (
    KIND_TITLE,
    KIND_LIST,
    KIND_ORDERED_LIST,
    KIND_CODE_BLOCK,
    KIND_INLINE_CODE,
    KIND_CONTENT,
)

ROOT_ID = 0


class MarkdownReadError(RuntimeError):
    """
    The Markdown source could not be opened or read.

    `partial` is None when the source could not be opened at all, otherwise it
    holds the tree built from the lines read before the failure.
    """

    def __init__(self, message: str, partial: MarkdownTree | None = None) -> None:
        super().__init__(message)
        self.partial = partial


class Fence(NamedTuple):
    """A fenced code block as a half-open range of body indexes."""

    start: int
    stop: int
    info: str


@dataclass
class Node:
    id: int
    level: int
    title: str
    kind: str
    parent_id: int | None = None
    body: list[str] = field(default_factory=list)
    line_kinds: list[str] = field(default_factory=list)
    fences: list[Fence] = field(default_factory=list)
    child_ids: list[int] = field(default_factory=list)
    closed: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def append(self, line: str, kind: str = KIND_CONTENT) -> None:
        if self.closed:
            raise RuntimeError(f"Node {self.id} ({self.title!r}) is closed; its body can no longer grow.")
        self.body.append(line)
        self.line_kinds.append(kind)


@dataclass
class MarkdownTree:
    """Arena of nodes produced by a single parse."""

    nodes: list[Node] = field(default_factory=list)

    @classmethod
    def empty(cls) -> MarkdownTree:
        return cls(nodes=[Node(id=ROOT_ID, level=0, title="", kind=KIND_CONTENT)])

    @property
    def root(self) -> Node:
        return self.nodes[ROOT_ID]

    def node(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def children(self, node: Node | int) -> list[Node]:
        n = self.nodes[node] if isinstance(node, int) else node
        return [self.nodes[i] for i in n.child_ids]

    def parent(self, node: Node | int) -> Node | None:
        n = self.nodes[node] if isinstance(node, int) else node
        return None if n.parent_id is None else self.nodes[n.parent_id]

    def walk(self, start: Node | None = None, depth: int = 0) -> Iterator[tuple[Node, int]]:
        """
        Pre-order traversal yielding (node, depth) pairs, depth 0 for `start`.
        """
        node = self.root if start is None else start
        yield node, depth
        for child_id in node.child_ids:
            yield from self.walk(self.nodes[child_id], depth + 1)

    def headings(self) -> list[Node]:
        """All non-root nodes in document order."""
        return self.nodes[1:]

    def find(self, predicate: Callable[[Node], bool]) -> Node | None:
        for node, _depth in self.walk():
            if predicate(node):
                return node
        return None


class LinePatterns:
    """
    The line-type patterns used by one builder.

    Patterns are compiled per instance so callers can substitute their own.
    """

    def __init__(
        self,
        *,
        title: str = r"^(#{1,6})\s+(.+)$",
        list_item: str = r"^\s*[-*+] (.+)$",
        ordered_item: str = r"^\s*\d+\.\s+(.+)$",
        code_fence: str = r"^```(.*?)$",
        inline_code: str = r"`([^`]+)`",
    ) -> None:
        self.title = re.compile(title)
        self.list_item = re.compile(list_item)
        self.ordered_item = re.compile(ordered_item)
        self.code_fence = re.compile(code_fence)
        self.inline_code = re.compile(inline_code)

    def matches(self, kind: str, line: str) -> bool:
        if kind == KIND_TITLE:
            return self.title.match(line) is not None
        if kind == KIND_LIST:
            return self.list_item.match(line) is not None
        if kind == KIND_ORDERED_LIST:
            return self.ordered_item.match(line) is not None
        if kind == KIND_CODE_BLOCK:
            return self.code_fence.match(line) is not None
        if kind == KIND_INLINE_CODE:
            return self.inline_code.search(line) is not None
        return False


DEFAULT_PRECEDENCE = (KIND_TITLE, KIND_LIST, KIND_ORDERED_LIST, KIND_CODE_BLOCK, KIND_INLINE_CODE)


@dataclass(frozen=True)
class ClassificationPolicy:
    """
    How a heading line's `kind` is picked among the patterns it matches.

    mode="first": the first kind in `precedence` whose pattern matches wins.
    mode="last": every match overwrites the previous one, so the last match wins.
    Neither matching gives KIND_CONTENT.
    """

    precedence: tuple[str, ...] = DEFAULT_PRECEDENCE
    mode: str = "first"

    def __post_init__(self) -> None:
        if self.mode not in ("first", "last"):
            raise ValueError(f"Unknown classification mode: {self.mode!r}")
        unknown = [k for k in self.precedence if k not in NODE_KINDS]
        if unknown:
            raise ValueError(f"Unknown node kinds in precedence: {unknown}")

    @classmethod
    def legacy(cls) -> ClassificationPolicy:
        """Sequential overwrites: inline code in a heading beats everything else."""
        return cls(precedence=DEFAULT_PRECEDENCE, mode="last")

    def classify(self, line: str, patterns: LinePatterns) -> str:
        kind = KIND_CONTENT
        for candidate in self.precedence:
            if patterns.matches(candidate, line):
                kind = candidate
                if self.mode == "first":
                    break
        return kind


def find_parent(tree: MarkdownTree, level: int, *, before: int | None = None) -> int:
    """
    Return the id of the node a new heading of `level` attaches to.

    Walks from the root along the last child at each step while that child's
    level is strictly smaller than `level`. The deepest such node wins; the
    root when there is none.

    `before` restricts the walk to nodes with id < before, i.e. the tree as it
    stood when node `before` was created.
    """
    current = tree.root
    while True:
        child_ids = current.child_ids
        if before is not None:
            child_ids = [i for i in child_ids if i < before]
        if not child_ids:
            return current.id
        last = tree.nodes[child_ids[-1]]
        if last.level >= level:
            return current.id
        current = last


class MarkdownTreeBuilder:
    """
    Stateful single-pass builder. Call `feed` for every line, then `finish`.
    """

    def __init__(self, patterns: LinePatterns | None = None, policy: ClassificationPolicy | None = None) -> None:
        self.patterns = patterns or LinePatterns()
        self.policy = policy or ClassificationPolicy()
        self.tree = MarkdownTree.empty()
        self.current = ROOT_ID
        self.code_block_active = False
        self._fence_start = 0
        self._fence_info = ""
        self._finished = False

    @property
    def current_node(self) -> Node:
        return self.tree.nodes[self.current]

    def feed(self, line: str) -> None:
        if self._finished:
            raise RuntimeError("Builder already finished.")

        fence = self.patterns.code_fence.match(line)
        if fence:
            self._toggle_fence(fence.group(1).strip())
            return

        node = self.current_node
        if self.code_block_active:
            node.append(line, KIND_CODE_BLOCK)
            return

        heading = self.patterns.title.match(line)
        if heading:
            self._open_heading(line, level=len(heading.group(1)), title=heading.group(2).strip())
            return

        if self.patterns.list_item.match(line):
            node.append(line, KIND_LIST)
        elif self.patterns.ordered_item.match(line):
            node.append(line, KIND_ORDERED_LIST)
        elif self.patterns.inline_code.search(line):
            node.append(line, KIND_INLINE_CODE)
        else:
            node.append(line, KIND_CONTENT)

    def finish(self) -> MarkdownTree:
        """
        Close the parse and return the tree. Safe to call more than once.
        """
        if not self._finished:
            if self.code_block_active:
                logger.warning("Document ended inside a fenced code block; remaining lines kept as code.")
                self._close_fence()
            self._finished = True
            logger.debug("Parsed markdown tree with %d heading(s).", len(self.tree.nodes) - 1)
        return self.tree

    def _toggle_fence(self, info: str) -> None:
        if self.code_block_active:
            self._close_fence()
        else:
            self.code_block_active = True
            self._fence_start = len(self.current_node.body)
            self._fence_info = info

    def _close_fence(self) -> None:
        node = self.current_node
        node.fences.append(Fence(self._fence_start, len(node.body), self._fence_info))
        self.code_block_active = False

    def _open_heading(self, line: str, *, level: int, title: str) -> None:
        tree = self.tree
        parent_id = find_parent(tree, level)
        node = Node(
            id=len(tree.nodes),
            level=level,
            title=title,
            kind=self.policy.classify(line, self.patterns),
            parent_id=parent_id,
        )
        tree.nodes.append(node)
        tree.nodes[parent_id].child_ids.append(node.id)
        self.current_node.closed = True
        self.current = node.id


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_lines(lines: Iterable[str], *, policy: ClassificationPolicy | None = None) -> MarkdownTree:
    builder = MarkdownTreeBuilder(policy=policy)
    for line in lines:
        builder.feed(line)
    return builder.finish()


def parse_markdown(text: str, *, policy: ClassificationPolicy | None = None) -> MarkdownTree:
    """
    Parse in-memory Markdown text. A trailing newline does not add an empty line.
    """
    return parse_lines(_split_lines(text), policy=policy)


def _iter_stream_lines(stream: TextIO) -> Iterator[str]:
    for raw in stream:
        line = raw[:-1] if raw.endswith("\n") else raw
        yield line[:-1] if line.endswith("\r") else line


def parse_markdown_file(
    path: str | Path,
    *,
    policy: ClassificationPolicy | None = None,
    encoding: str = "utf-8",
) -> MarkdownTree:
    """
    Parse a Markdown file.

    Raises MarkdownReadError if the file cannot be opened (no partial tree) or
    if reading fails part-way (the partial tree is attached).
    """
    p = Path(path)
    try:
        # Lines end at "\n" only; a trailing "\r" is stripped like parse_markdown does.
        f = p.open("r", encoding=encoding, newline="\n")
    except OSError as e:
        raise MarkdownReadError(f"Cannot open markdown file: {p}: {e}") from e

    builder = MarkdownTreeBuilder(policy=policy)
    with f:
        try:
            for line in _iter_stream_lines(f):
                builder.feed(line)
        except (OSError, UnicodeDecodeError) as e:
            raise MarkdownReadError(f"Failed reading markdown file: {p}: {e}", partial=builder.finish()) from e
    return builder.finish()


def format_tree(tree: MarkdownTree) -> str:
    """
    Render the tree as indented text:

        - [Root] (Level 0)
          * body line
          - [Child] (Level 1)
    """
    out: list[str] = []
    for node, depth in tree.walk():
        indent = "  " * depth
        title = "Root" if node.is_root else node.title
        out.append(f"{indent}- [{title}] (Level {node.level})")
        for line in node.body:
            out.append(f"{indent}  * {line}")
    return "\n".join(out) + "\n"


def print_tree(tree: MarkdownTree, file: TextIO | None = None) -> None:
    (file or sys.stdout).write(format_tree(tree))
