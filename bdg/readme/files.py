"""README discovery and atomic file updates."""

from __future__ import annotations

import os
from pathlib import Path

from ..logging import get_logger

README_CANDIDATES = ("README.md", "docs/README.md")

logger = get_logger("readme")


def resolve_readme(root: Path) -> Path:
    """Return the first existing README under root, defaulting to README.md."""
    for candidate in README_CANDIDATES:
        path = root / candidate
        if path.exists():
            return path
    return root / README_CANDIDATES[0]


def read_readme(path: Path) -> str:
    """Read README text verbatim; a missing file reads as an empty document."""
    try:
        # newline="" keeps CRLF sequences intact for the marker engine.
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        logger.debug("README not found at %s, starting from an empty document", path)
        return ""


def write_readme_atomic(path: Path, content: str) -> None:
    """Write through a sibling temp file and rename it over the target."""
    tmp_path = path.with_name(f"{path.name}.bdg.tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d characters to %s", len(content), path)


__all__ = ["README_CANDIDATES", "read_readme", "resolve_readme", "write_readme_atomic"]
