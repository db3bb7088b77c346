"""Remove badge lines from the managed block by id or kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .markers import extract_marker_block_lines, is_code_fence
from .parser import parse_badge_line_optional, unknown_id


class BadgeNotFoundError(RuntimeError):
    """Raised in strict mode when none of the requested ids matched."""

    def __init__(self, missing_ids: Iterable[str]) -> None:
        self.missing_ids = list(missing_ids)
        super().__init__("id_not_found")


@dataclass
class RemovalOutcome:
    """Block lines left after a removal pass plus what was taken out."""

    remaining: List[str]
    removed: int = 0
    id_hits: int = 0
    removed_ids: List[str] = field(default_factory=list)
    removed_kinds: Dict[str, int] = field(default_factory=dict)
    missing_ids: List[str] = field(default_factory=list)


def remove_block_lines_by_id_kind(
    content: str,
    ids: Iterable[str],
    kinds: Iterable[str],
    *,
    strict: bool = False,
) -> RemovalOutcome:
    """Filter the managed block lines, dropping badges whose id or kind was requested.

    Fence lines and anything inside a fence are kept verbatim. Lines that are
    not badge markup are treated as ``unknown`` with a content-hash id, so
    they can still be targeted explicitly.
    """
    lines = extract_marker_block_lines(content)
    wanted_ids = _normalise(ids)
    wanted_kinds = set(_normalise(kinds))

    outcome = RemovalOutcome(remaining=[])
    in_fence = False
    for line in lines:
        if is_code_fence(line):
            in_fence = not in_fence
            outcome.remaining.append(line)
            continue
        if in_fence:
            outcome.remaining.append(line)
            continue

        parsed = parse_badge_line_optional(line)
        badge_id = parsed.id if parsed is not None else unknown_id(line)
        kind = parsed.kind if parsed is not None else "unknown"

        by_id = badge_id in wanted_ids
        by_kind = kind in wanted_kinds
        if not (by_id or by_kind):
            outcome.remaining.append(line)
            continue
        if by_id:
            outcome.id_hits += 1
        outcome.removed += 1
        outcome.removed_ids.append(badge_id)
        outcome.removed_kinds[kind] = outcome.removed_kinds.get(kind, 0) + 1

    outcome.missing_ids = [
        badge_id for badge_id in wanted_ids if badge_id not in outcome.removed_ids
    ]
    if strict and wanted_ids and outcome.id_hits == 0:
        raise BadgeNotFoundError(outcome.missing_ids)
    return outcome


def _normalise(values: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        cleaned = value.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


__all__ = ["BadgeNotFoundError", "RemovalOutcome", "remove_block_lines_by_id_kind"]
