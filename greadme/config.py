"""
config.py

Responsibility: Load the optional `.greadme.yml` configuration into a typed model.

Example:

    readme: docs/README.md
    output: IMPROVED_README.md
    template: templates/README.md.j2   # Jinja2 template for `improve`
    reference: docs/reference.md      # reference README for `check`
    github: true
    keywords:
      usage: [usage, getting started]

CLI flags override anything set here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from greadme.sections import SECTION_KEYWORDS

DEFAULT_CONFIG_NAME = ".greadme.yml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Config:
    readme: str = "README.md"
    template: str | None = None
    reference: str | None = None
    output: str = "IMPROVED_README.md"
    github: bool = False
    legacy_classification: bool = False
    keywords: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(SECTION_KEYWORDS))


def _str_or_none(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return str(value).strip() or None


def _parse_keywords(raw: Any) -> dict[str, tuple[str, ...]]:
    keywords = dict(SECTION_KEYWORDS)
    if raw is None:
        return keywords
    if not isinstance(raw, dict):
        raise ConfigError("`keywords` must be an object/mapping when provided.")

    for name, words in raw.items():
        if name not in SECTION_KEYWORDS:
            known = ", ".join(sorted(SECTION_KEYWORDS))
            raise ConfigError(f"Unknown keyword section `{name}` (expected one of: {known}).")
        if isinstance(words, str):
            words = [words]
        if not isinstance(words, list):
            raise ConfigError(f"`keywords.{name}` must be a non-empty list of strings.")
        cleaned = tuple(str(w).strip().lower() for w in words if str(w).strip())
        if not cleaned:
            raise ConfigError(f"`keywords.{name}` must be a non-empty list of strings.")
        keywords[name] = cleaned
    return keywords


def load_config(path: str | Path | None = None) -> Config:
    """
    Load configuration from `path`, or from `.greadme.yml` in the working
    directory when no path is given. A missing default file yields defaults.
    """
    if path is None:
        cfg_path = Path(DEFAULT_CONFIG_NAME)
        if not cfg_path.exists():
            return Config()
    else:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise ConfigError(f"Config file does not exist: {cfg_path}")

    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file: {cfg_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {cfg_path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")

    defaults = Config()
    return Config(
        readme=_str_or_none(data, "readme") or defaults.readme,
        template=_str_or_none(data, "template"),
        reference=_str_or_none(data, "reference"),
        output=_str_or_none(data, "output") or defaults.output,
        github=bool(data.get("github", False)),
        legacy_classification=bool(data.get("legacy_classification", False)),
        keywords=_parse_keywords(data.get("keywords")),
    )
