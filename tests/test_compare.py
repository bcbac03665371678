"""Tests for the README comparison."""

from greadme.compare import (
    TODO_MISSING_BADGE,
    TODO_MISSING_SECTION,
    TODO_REVIEW_SECTION,
    compare_readmes,
)
from greadme.mdtree import parse_markdown, parse_markdown_file
from greadme.renderer import REFERENCE_README

TEMPLATE = """# Project Name

![V](https://img.shields.io/v)
![L](https://img.shields.io/l)

Description.

## Features

- one

## Usage

```sh
run
```

## License

MIT
"""

README = """# mytool

![V](https://img.shields.io/v)

My tool.

## Features

- one

## Usage

Do stuff.
"""


def test_report_lists_findings():
    report = compare_readmes(parse_markdown(TEMPLATE), parse_markdown(README))

    assert report.missing_badges == ["![L](https://img.shields.io/l)"]
    assert report.missing_sections == ["License"]
    assert report.changed_sections == ["Project Name", "Usage"]
    assert not report.is_complete


def test_improved_text():
    report = compare_readmes(parse_markdown(TEMPLATE), parse_markdown(README))

    assert report.text == (
        "![V](https://img.shields.io/v)\n"
        f"{TODO_MISSING_BADGE}\n"
        "![L](https://img.shields.io/l)\n"
        "\n"
        "# mytool\n"
        "\n"
        f"{TODO_REVIEW_SECTION}\n"
        "My tool.\n"
        "\n"
        "## Features\n"
        "\n"
        "- one\n"
        "\n"
        "## Usage\n"
        "\n"
        f"{TODO_REVIEW_SECTION}\n"
        "Do stuff.\n"
        "\n"
        "## License\n"
        "\n"
        f"{TODO_MISSING_SECTION}\n"
        "MIT\n"
    )


def test_identical_readme_is_complete():
    report = compare_readmes(parse_markdown(TEMPLATE), parse_markdown(TEMPLATE))
    assert report.is_complete
    assert "TODO" not in report.text


def test_readme_only_badges_are_kept():
    readme = README.replace("![V](https://img.shields.io/v)", "![V](https://img.shields.io/v)\n![X](https://img.shields.io/x)")
    report = compare_readmes(parse_markdown(TEMPLATE), parse_markdown(readme))
    assert "![X](https://img.shields.io/x)" in report.text


def test_against_bundled_reference(sample_readme):
    report = compare_readmes(parse_markdown_file(REFERENCE_README), parse_markdown(sample_readme))

    assert any(t.endswith("Supported Providers") for t in report.missing_sections)
    assert "2. Homebrew" in report.missing_sections
    assert any(t.endswith("Features") for t in report.changed_sections)
    assert report.text.count("# mytool\n") == 1
    # The reference code fences survive into missing sections.
    assert "```sh\nbrew tap ORG/REPO\nbrew install PROJECT\n```" in report.text
