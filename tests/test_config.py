"""Tests for .greadme.yml loading."""

import pytest

from greadme.config import Config, ConfigError, load_config
from greadme.sections import SECTION_KEYWORDS


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config()
    assert cfg == Config()
    assert cfg.keywords == SECTION_KEYWORDS


def test_default_file_is_picked_up(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".greadme.yml").write_text("readme: docs/README.md\ngithub: true\n", encoding="utf-8")
    cfg = load_config()
    assert cfg.readme == "docs/README.md"
    assert cfg.github is True
    assert cfg.output == "IMPROVED_README.md"


def test_explicit_file(tmp_path):
    path = tmp_path / "cfg.yml"
    path.write_text(
        "output: out.md\n"
        "template: tpl.j2\n"
        "legacy_classification: true\n"
        "keywords:\n"
        "  usage: [Usage, Getting Started]\n"
        "  license: licensing\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.output == "out.md"
    assert cfg.template == "tpl.j2"
    assert cfg.legacy_classification is True
    assert cfg.keywords["usage"] == ("usage", "getting started")
    assert cfg.keywords["license"] == ("licensing",)
    assert cfg.keywords["features"] == SECTION_KEYWORDS["features"]


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yml")


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "keywords: [usage]\n",
        "keywords:\n  unknown: [x]\n",
        "keywords:\n  usage: []\n",
        "keywords:\n  usage: [\"  \", \"\"]\n",
        "readme: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, text):
    path = tmp_path / "cfg.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_directory_is_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_undecodable_file(tmp_path):
    path = tmp_path / "cfg.yml"
    path.write_bytes(b"readme: \xff\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_template_and_reference_are_separate(tmp_path):
    path = tmp_path / "cfg.yml"
    path.write_text("template: my.j2\nreference: ref.md\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.template == "my.j2"
    assert cfg.reference == "ref.md"
