"""JSON report payloads emitted by ``bdg list --json`` and ``--dry-run --json``."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .readme.markers import is_code_fence
from .readme.parser import parse_badge_line
from .readme.removal import RemovalOutcome

LIST_SCHEMA = "bdg.list/v1"
DRY_RUN_SCHEMA = "bdg.dryrun/v1"


class WarningEntry(BaseModel):
    code: str
    message: str
    meta: Optional[Dict[str, Any]] = None


class ConfigVersionReport(BaseModel):
    allow_yy_calver: bool
    year_min: int
    year_max: int


class ConfigReport(BaseModel):
    path: Optional[str] = None
    version: ConfigVersionReport


class MarkerReport(BaseModel):
    present: bool
    count: int


class ReadmeReport(BaseModel):
    path: str
    newline: str
    trailing_newline: bool
    markers: MarkerReport


class BadgeReport(BaseModel):
    id: str
    kind: str
    label: str
    image: str
    link: Optional[str] = None
    source: str = "readme"
    meta: Optional[Dict[str, Any]] = None
    raw: str


class ReadmeBlockReport(BaseModel):
    raw: str
    badges: List[BadgeReport] = Field(default_factory=list)


class ListReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_id: str = Field(default=LIST_SCHEMA, alias="schema")
    config: Optional[ConfigReport] = None
    readme: ReadmeReport
    readme_block: ReadmeBlockReport
    warnings: List[WarningEntry] = Field(default_factory=list)


class DryRunReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_id: str = Field(default=DRY_RUN_SCHEMA, alias="schema")
    path: str
    diff: str
    removed_ids: Optional[List[str]] = None
    missing_ids: Optional[List[str]] = None
    removed_kinds: Optional[Dict[str, int]] = None
    warnings: List[WarningEntry] = Field(default_factory=list)


def build_readme_block(lines: Sequence[str]) -> ReadmeBlockReport:
    """Summarise managed block lines, skipping fenced example content."""
    raw = "\n".join(lines) + "\n" if lines else ""
    badges: List[BadgeReport] = []
    in_fence = False
    for line in lines:
        if is_code_fence(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        badges.append(BadgeReport(**parse_badge_line(line).to_dict()))
    return ReadmeBlockReport(raw=raw, badges=badges)


def removal_warnings(removal: Optional[RemovalOutcome]) -> List[WarningEntry]:
    if removal is None:
        return []
    return [
        WarningEntry(
            code="ID_NOT_FOUND",
            message="badge id not found in readme_block",
            meta={"id": missing},
        )
        for missing in removal.missing_ids
    ]


def to_json(report: BaseModel) -> str:
    return report.model_dump_json(by_alias=True, indent=2)


__all__ = [
    "BadgeReport",
    "ConfigReport",
    "ConfigVersionReport",
    "DRY_RUN_SCHEMA",
    "DryRunReport",
    "LIST_SCHEMA",
    "ListReport",
    "MarkerReport",
    "ReadmeBlockReport",
    "ReadmeReport",
    "WarningEntry",
    "build_readme_block",
    "removal_warnings",
    "to_json",
]
