"""Managed marker block utilities for README badges."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

BDG_BEGIN = "<!-- bdg:begin -->"
BDG_END = "<!-- bdg:end -->"

_FENCE = "```"


class MarkerBlockError(RuntimeError):
    """Raised when the managed block cannot be edited safely."""


class MarkerCountError(MarkerBlockError):
    """Raised when zero or several begin/end sentinels are present."""

    def __init__(self, message: str = "marker block missing or duplicated") -> None:
        super().__init__(message)


class MarkerOrderError(MarkerBlockError):
    """Raised when the end sentinel does not follow the begin sentinel."""

    def __init__(self, message: str = "invalid marker block") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Document:
    """A README split into lines with the newline conventions it was read with."""

    lines: Tuple[str, ...]
    newline: str = "\n"
    trailing_newline: bool = False

    @classmethod
    def parse(cls, content: str) -> "Document":
        newline = "\r\n" if "\r\n" in content else "\n"
        trailing = content.endswith(newline)
        body = content[: -len(newline)] if trailing else content
        if not body and not trailing:
            return cls(lines=(), newline=newline, trailing_newline=False)
        return cls(lines=tuple(body.split(newline)), newline=newline, trailing_newline=trailing)

    @property
    def newline_label(self) -> str:
        return "CRLF" if self.newline == "\r\n" else "LF"

    def with_lines(self, lines: Sequence[str]) -> "Document":
        return replace(self, lines=tuple(lines))

    def render(self) -> str:
        if not self.lines:
            return ""
        output = self.newline.join(self.lines)
        if self.trailing_newline:
            output += self.newline
        return output


@dataclass(frozen=True)
class MarkerScan:
    """Sentinel positions found outside fenced code."""

    begins: Tuple[int, ...]
    ends: Tuple[int, ...]

    @property
    def is_single_pair(self) -> bool:
        return len(self.begins) == 1 and len(self.ends) == 1

    def require_block(self) -> Tuple[int, int]:
        """Return the (begin, end) indices or raise when the block is unusable."""
        if not self.is_single_pair:
            raise MarkerCountError()
        begin, end = self.begins[0], self.ends[0]
        if begin >= end:
            raise MarkerOrderError()
        return begin, end


def is_code_fence(line: str) -> bool:
    """Return True when the line opens or closes a fenced code region."""
    return line.lstrip().startswith(_FENCE)


def scan_markers(lines: Sequence[str]) -> MarkerScan:
    begins: List[int] = []
    ends: List[int] = []
    in_fence = False
    for index, line in enumerate(lines):
        if is_code_fence(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if line == BDG_BEGIN:
            begins.append(index)
        elif line == BDG_END:
            ends.append(index)
    return MarkerScan(begins=tuple(begins), ends=tuple(ends))


def ensure_marker_block(content: str) -> str:
    """Insert an empty managed block unless exactly one begin/end pair exists.

    The pair goes right after the first level-1 heading outside fenced code,
    or at the very top of the document when there is no such heading.
    """
    document = Document.parse(content)
    if scan_markers(document.lines).is_single_pair:
        return content

    lines = list(document.lines)
    insert_at = 0
    in_fence = False
    for index, line in enumerate(lines):
        if is_code_fence(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if line.startswith("# "):
            insert_at = index + 1
            break
    lines[insert_at:insert_at] = [BDG_BEGIN, BDG_END]
    return document.with_lines(lines).render()


def extract_managed_block(content: str) -> List[str]:
    """Return non-blank lines inside the managed block, or [] when it is unusable."""
    document = Document.parse(content)
    try:
        begin, end = scan_markers(document.lines).require_block()
    except MarkerBlockError:
        return []
    return [line for line in document.lines[begin + 1 : end] if line.strip()]


def extract_marker_block_lines(content: str) -> List[str]:
    """Return every line inside the managed block, blank lines included."""
    document = Document.parse(content)
    begin, end = scan_markers(document.lines).require_block()
    return list(document.lines[begin + 1 : end])


def rewrite_marker_block(content: str, badges: Sequence[str]) -> str:
    """Replace the managed block body with rendered badge Markdown lines."""
    return _replace_body(content, badges)


def rewrite_marker_block_lines(content: str, lines: Sequence[str]) -> str:
    """Replace the managed block body with already-filtered block lines."""
    return _replace_body(content, lines)


def remove_marker_block(content: str) -> str:
    """Drop the begin sentinel, the end sentinel and everything between them."""
    document = Document.parse(content)
    begin, end = scan_markers(document.lines).require_block()
    remaining = document.lines[:begin] + document.lines[end + 1 :]
    return document.with_lines(remaining).render()


def marker_count(content: str) -> int:
    """Number of begin sentinels outside fenced code."""
    return len(scan_markers(Document.parse(content).lines).begins)


def readme_newline_info(content: str) -> Tuple[str, bool]:
    """Return the newline label (LF or CRLF) and the trailing-newline flag."""
    document = Document.parse(content)
    return document.newline_label, document.trailing_newline


def _replace_body(content: str, body: Sequence[str]) -> str:
    document = Document.parse(content)
    begin, end = scan_markers(document.lines).require_block()
    updated = document.lines[: begin + 1] + tuple(body) + document.lines[end:]
    return document.with_lines(updated).render()


__all__ = [
    "BDG_BEGIN",
    "BDG_END",
    "Document",
    "MarkerBlockError",
    "MarkerCountError",
    "MarkerOrderError",
    "MarkerScan",
    "ensure_marker_block",
    "extract_managed_block",
    "extract_marker_block_lines",
    "is_code_fence",
    "marker_count",
    "readme_newline_info",
    "remove_marker_block",
    "rewrite_marker_block",
    "rewrite_marker_block_lines",
    "scan_markers",
]
