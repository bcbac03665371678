"""
cli.py

Responsibility: CLI entrypoint for greadme.

Subcommands:
- `tree`: parse a README and print its heading tree
- `improve`: fill the README template from an existing README plus git metadata
- `check`: compare a README with a reference README and write an improved copy

This module orchestrates; parsing lives in `mdtree.py`, extraction in
`sections.py`, rendering in `renderer.py`, comparison in `compare.py`.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from greadme.compare import compare_readmes
from greadme.config import Config, ConfigError, load_config
from greadme.git_info import GitMetadata, GitMetadataError, read_git_metadata
from greadme.github_client import GitHubClient, GitHubError, RepoInfo
from greadme.mdtree import ClassificationPolicy, MarkdownReadError, parse_markdown_file, print_tree
from greadme.renderer import REFERENCE_README, RenderError, build_context, render_readme, write_readme
from greadme.sections import extract_readme_context

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


def _policy(cfg: Config) -> ClassificationPolicy | None:
    return ClassificationPolicy.legacy() if cfg.legacy_classification else None


def _apply_overrides(cfg: Config, args: argparse.Namespace) -> Config:
    overrides: dict[str, object] = {}
    for name in ("readme", "template", "reference", "output", "github"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    if getattr(args, "legacy_classification", False):
        overrides["legacy_classification"] = True
    return replace(cfg, **overrides)


def _git_metadata(repo_dir: Path) -> GitMetadata | None:
    try:
        meta = read_git_metadata(repo_dir)
    except GitMetadataError as e:
        logger.warning("No git metadata, using placeholders: %s", e)
        return None
    logger.info("Detected repository %s", meta.slug)
    return meta


def _github_repo(meta: GitMetadata | None) -> RepoInfo | None:
    if meta is None:
        raise CLIError("--github needs a git remote to know which repository to query")
    client = GitHubClient(os.environ.get("GITHUB_TOKEN"))
    return client.get_repo(meta.org, meta.repo)


def tree_cmd(args: argparse.Namespace, cfg: Config) -> int:
    tree = parse_markdown_file(args.readme_path or cfg.readme, policy=_policy(cfg))
    print_tree(tree)
    return 0


def improve_cmd(args: argparse.Namespace, cfg: Config) -> int:
    readme_tree = parse_markdown_file(cfg.readme, policy=_policy(cfg))
    readme_ctx = extract_readme_context(readme_tree, cfg.keywords)

    meta = _git_metadata(Path(args.repo_dir))
    repo_info = _github_repo(meta) if cfg.github else None

    context = build_context(readme_ctx, git=meta, repo_info=repo_info)
    text = render_readme(context, cfg.template)
    out = write_readme(text, cfg.output)
    logger.info("%s generated successfully", out)
    return 0


def check_cmd(args: argparse.Namespace, cfg: Config) -> int:
    template_path = cfg.reference or REFERENCE_README
    template_tree = parse_markdown_file(template_path, policy=_policy(cfg))
    readme_tree = parse_markdown_file(cfg.readme, policy=_policy(cfg))

    logger.info("Comparing %s with %s", cfg.readme, template_path)
    report = compare_readmes(template_tree, readme_tree)
    out = write_readme(report.text, cfg.output)
    logger.info("%s generated successfully", out)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="greadme", description="Parse, check and improve README files")
    p.add_argument("--config", default=None, help="Config file (default: .greadme.yml if present)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("tree", help="Print the heading tree of a markdown file")
    t.add_argument("readme_path", nargs="?", default=None, help="Markdown file (default: config readme)")
    t.add_argument(
        "--legacy-classification",
        action="store_true",
        help="Classify headings by last matching pattern (inline code wins)",
    )
    t.set_defaults(func=tree_cmd)

    i = sub.add_parser("improve", help="Fill the README template from an existing README and git metadata")
    i.add_argument("-r", "--readme", default=None, help="README to read (default: README.md)")
    i.add_argument("-t", "--template", default=None, help="Jinja2 README template (default: bundled)")
    i.add_argument("-o", "--output", default=None, help="Output file (default: IMPROVED_README.md)")
    i.add_argument("--repo-dir", default=".", help="Git repository to read the origin remote from")
    i.add_argument("--github", dest="github", action="store_true", default=None, help="Look up the repo on GitHub")
    i.add_argument("--no-github", dest="github", action="store_false", default=None, help="Stay offline")
    i.set_defaults(func=improve_cmd)

    c = sub.add_parser("check", help="Compare a README with a reference README")
    c.add_argument("-t", "--reference", "--template", dest="reference", default=None, help="Reference README (default: bundled)")
    c.add_argument("-r", "--readme", default=None, help="README file to check (default: README.md)")
    c.add_argument("-o", "--output", default=None, help="Output improved README (default: IMPROVED_README.md)")
    c.set_defaults(func=check_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = _apply_overrides(load_config(args.config), args)
        return int(args.func(args, cfg))
    except (CLIError, ConfigError, MarkdownReadError, RenderError, GitHubError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
