"""Unified diff rendering for dry-run previews."""

from __future__ import annotations

import difflib
from pathlib import Path


def unified_diff(path: Path, original: str, updated: str) -> str:
    """Return a unified diff between two README versions, or "" when unchanged."""
    if original == updated:
        return ""
    name = path.name or "README.md"
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        updated.splitlines(keepends=True),
        fromfile=f"a/{name}",
        tofile=f"b/{name}",
    )
    lines = []
    for line in diff:
        if not line.endswith("\n"):
            # Last line without a newline; mirror git's marker.
            line = f"{line}\n\\ No newline at end of file\n"
        lines.append(line)
    return "".join(lines)


__all__ = ["unified_diff"]
