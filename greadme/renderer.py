"""
renderer.py

Responsibility: Render the README template from values extracted out of an
existing README plus project metadata.

Rules:
- The bundled template is used unless a template path is given.
- Rendering is strict: a template referencing an unknown name is an error.
- Output newlines are normalized to "\\n".

This module intentionally does NOT know about git, GitHub, or CLI parsing; it
takes already-collected values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined

from greadme.git_info import GitMetadata
from greadme.github_client import RepoInfo
from greadme.sections import SECTION_KEYWORDS, ReadmeContext

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = TEMPLATES_DIR / "README.md.j2"
REFERENCE_README = TEMPLATES_DIR / "reference_README.md"


class RenderError(RuntimeError):
    pass


def build_context(
    readme: ReadmeContext,
    git: GitMetadata | None = None,
    repo_info: RepoInfo | None = None,
) -> dict[str, Any]:
    """
    Merge README values, git metadata and (optional) GitHub data into template variables.

    Git metadata wins for org/repo/slug; the project name prefers the git repo
    name over the README's first H1.
    """
    description = readme.description or (repo_info.description if repo_info else "")
    context: dict[str, Any] = {
        "project_name": (git.repo if git else "") or readme.project_name,
        "org": git.org if git else "",
        "repo": git.repo if git else "",
        "slug": git.slug if git else "",
        "clone_url": git.clone_url if git else "",
        "description": description,
        "license_name": repo_info.license_name if repo_info else "",
        "badges": list(readme.badges),
    }
    for name in SECTION_KEYWORDS:
        context[name] = list(readme.section(name))
    return context


def render_readme(context: dict[str, Any], template_path: str | Path | None = None) -> str:
    tpl_path = Path(template_path) if template_path is not None else DEFAULT_TEMPLATE
    try:
        text = tpl_path.read_text(encoding="utf-8")
    except OSError as e:
        raise RenderError(f"Cannot read template: {tpl_path}") from e

    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    try:
        out = env.from_string(text).render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering template: {tpl_path}: {e}") from e
    return out.replace("\r\n", "\n")


def write_readme(text: str, output_path: str | Path) -> Path:
    out = Path(output_path)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise RenderError(f"Cannot write README: {out}") from e
    return out
