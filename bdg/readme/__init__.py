"""README managed-block editing."""

from .files import read_readme, resolve_readme, write_readme_atomic
from .markers import (
    BDG_BEGIN,
    BDG_END,
    MarkerBlockError,
    MarkerCountError,
    MarkerOrderError,
    ensure_marker_block,
    extract_managed_block,
    extract_marker_block_lines,
    is_code_fence,
    marker_count,
    readme_newline_info,
    remove_marker_block,
    rewrite_marker_block,
    rewrite_marker_block_lines,
)
from .parser import ParsedBadge, parse_badge_line, parse_badge_line_optional
from .removal import BadgeNotFoundError, RemovalOutcome, remove_block_lines_by_id_kind

__all__ = [
    "BDG_BEGIN",
    "BDG_END",
    "BadgeNotFoundError",
    "MarkerBlockError",
    "MarkerCountError",
    "MarkerOrderError",
    "ParsedBadge",
    "RemovalOutcome",
    "ensure_marker_block",
    "extract_managed_block",
    "extract_marker_block_lines",
    "is_code_fence",
    "marker_count",
    "parse_badge_line",
    "parse_badge_line_optional",
    "read_readme",
    "readme_newline_info",
    "remove_block_lines_by_id_kind",
    "remove_marker_block",
    "resolve_readme",
    "rewrite_marker_block",
    "rewrite_marker_block_lines",
    "write_readme_atomic",
]
