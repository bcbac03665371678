"""
greadme package

Parses Markdown READMEs into a heading tree and uses it to check and improve them.

Key responsibilities are split across modules:
- `mdtree.py`: single-pass Markdown -> heading tree parser
- `sections.py`: pick template sections, badges and description out of a tree
- `git_info.py` / `github_client.py`: project metadata from git and GitHub
- `renderer.py`: Jinja2 rendering of the README template
- `compare.py`: README vs reference comparison with TODO markers
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

from greadme.mdtree import (
    ClassificationPolicy,
    MarkdownReadError,
    MarkdownTree,
    Node,
    find_parent,
    format_tree,
    parse_markdown,
    parse_markdown_file,
)

__all__ = [
    "__version__",
    "ClassificationPolicy",
    "MarkdownReadError",
    "MarkdownTree",
    "Node",
    "find_parent",
    "format_tree",
    "parse_markdown",
    "parse_markdown_file",
]

__version__ = "0.1.0"
