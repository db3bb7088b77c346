"""Tests for README discovery and atomic writes."""

from __future__ import annotations

from bdg.readme.files import read_readme, resolve_readme, write_readme_atomic


def test_resolve_readme_prefers_root_readme(project) -> None:
    project.write({"README.md": "# Root\n", "docs/README.md": "# Docs\n"})
    assert resolve_readme(project.path()) == project.path("README.md")


def test_resolve_readme_falls_back_to_docs(project) -> None:
    project.write({"docs/README.md": "# Docs\n"})
    assert resolve_readme(project.path()) == project.path("docs/README.md")


def test_resolve_readme_defaults_when_missing(project) -> None:
    assert resolve_readme(project.path()) == project.path("README.md")


def test_read_readme_missing_file_is_empty(project) -> None:
    assert read_readme(project.path("README.md")) == ""


def test_read_readme_keeps_crlf(project) -> None:
    path = project.write_raw("README.md", "# T\r\nBody")
    assert read_readme(path) == "# T\r\nBody"


def test_write_readme_atomic_replaces_content_verbatim(project) -> None:
    path = project.write_raw("README.md", "old\n")
    write_readme_atomic(path, "new\r\ncontent")
    assert project.read("README.md") == "new\r\ncontent"
    assert not list(project.path().glob("*.bdg.tmp"))
