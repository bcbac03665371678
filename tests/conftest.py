"""Shared test fixtures for greadme tests."""

import pytest


@pytest.fixture
def sample_readme():
    """A README with badges, nested headings, lists and fenced code."""
    return """# mytool

![Version](https://img.shields.io/github/v/release/acme/mytool)
![License](https://img.shields.io/github/license/acme/mytool)

A small tool that does useful things.
It spans two lines.

## ✨ Features

- Fast
- Small

## 📥 Installation

### Supported Platforms

- Linux

### 1. Quick Installation

```sh
pip install mytool
# not a heading
```

## 🚀 Usage

Run `mytool --help` for options.

1. Install
2. Run

## 📜 License

Apache-2.0
"""


@pytest.fixture
def readme_file(tmp_path, sample_readme):
    path = tmp_path / "README.md"
    path.write_text(sample_readme, encoding="utf-8")
    return path
