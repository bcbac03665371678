"""Tests for README template rendering."""

import pytest

from greadme.git_info import GitMetadata
from greadme.github_client import RepoInfo
from greadme.mdtree import parse_markdown
from greadme.renderer import RenderError, build_context, render_readme, write_readme
from greadme.sections import ReadmeContext, extract_readme_context


@pytest.fixture
def sample_ctx(sample_readme):
    return extract_readme_context(parse_markdown(sample_readme))


def test_placeholders_without_readme_data():
    text = render_readme(build_context(ReadmeContext()))

    assert text.startswith("# Project Name\n")
    assert "![Version](https://img.shields.io/github/v/release/user/repo)" in text
    assert "A brief description of the project" in text
    assert "- ✅ Feature 1\n" in text
    assert "brew tap ORG/REPO\n" in text
    assert "This project is licensed under the [MIT License](LICENSE)." in text
    assert "{{" not in text and "{%" not in text


def test_readme_values_fill_template(sample_ctx):
    text = render_readme(build_context(sample_ctx))

    assert text.startswith("# mytool\n")
    assert "![License](https://img.shields.io/github/license/acme/mytool)\n" in text
    assert "shields.io/github/v/release/user/repo" not in text
    assert "A small tool that does useful things. It spans two lines." in text
    assert "Features\n\n- Fast\n- Small\n" in text
    assert "```sh\npip install mytool\n# not a heading\n```\n" in text
    assert "Apache-2.0\n" in text
    assert "- ✅ Feature 1" not in text


def test_git_metadata_wins(sample_ctx):
    meta = GitMetadata(org="acme", repo="other")
    context = build_context(sample_ctx, git=meta)

    assert context["project_name"] == "other"
    assert context["slug"] == "acme/other"
    text = render_readme(context)
    assert text.startswith("# other\n")
    assert "brew tap acme/other\n" in text
    assert "git clone https://github.com/acme/other.git\n" in text


def test_default_badges_use_slug():
    text = render_readme(build_context(ReadmeContext(), git=GitMetadata(org="acme", repo="tool")))
    assert "![License](https://img.shields.io/github/license/acme/tool)" in text


def test_repo_info_fills_gaps():
    info = RepoInfo(
        owner="acme",
        name="tool",
        description="From GitHub",
        html_url="h",
        clone_url="c",
        license_name="MIT License",
    )
    text = render_readme(build_context(ReadmeContext(), repo_info=info))
    assert "From GitHub" in text
    assert "licensed under the MIT License. See [LICENSE](LICENSE)." in text


def test_readme_description_beats_repo_info():
    info = RepoInfo(owner="a", name="b", description="remote", html_url="h", clone_url="c")
    context = build_context(ReadmeContext(description="local"), repo_info=info)
    assert context["description"] == "local"


def test_custom_template(tmp_path):
    tpl = tmp_path / "t.md.j2"
    tpl.write_text("{{ project_name }}!\n", encoding="utf-8")
    assert render_readme(build_context(ReadmeContext(project_name="x")), tpl) == "x!\n"


def test_undefined_variable_fails(tmp_path):
    tpl = tmp_path / "t.md.j2"
    tpl.write_text("{{ nope }}\n", encoding="utf-8")
    with pytest.raises(RenderError):
        render_readme(build_context(ReadmeContext()), tpl)


def test_missing_template(tmp_path):
    with pytest.raises(RenderError):
        render_readme({}, tmp_path / "missing.j2")


def test_write_readme(tmp_path):
    out = write_readme("hello\n", tmp_path / "sub" / "OUT.md")
    assert out.read_text(encoding="utf-8") == "hello\n"


def test_error_raised_inside_template_is_wrapped(tmp_path):
    tpl = tmp_path / "t.md.j2"
    tpl.write_text("{{ badges | join(1, 2, 3) }}\n", encoding="utf-8")
    with pytest.raises(RenderError):
        render_readme(build_context(ReadmeContext()), tpl)
