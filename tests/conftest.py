from __future__ import annotations

import logging
from pathlib import Path

import pytest

from bdg.version import VersionOptions
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a git-rooted project directory under the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def default_options() -> VersionOptions:
    return VersionOptions(allow_yy_calver=False, year_min=2000, year_max=2199)


@pytest.fixture
def block_content():
    """Build a document whose managed block wraps the given lines."""

    def _build(lines, *, before: str = "", after: str = "") -> str:
        body = "".join(f"{line}\n" for line in lines)
        return f"{before}<!-- bdg:begin -->\n{body}<!-- bdg:end -->{after}"

    return _build


@pytest.fixture(autouse=True)
def reset_bdg_logger():
    """Undo CLI logging setup so handlers never outlive the test that made them."""
    logger = logging.getLogger("bdg")
    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
