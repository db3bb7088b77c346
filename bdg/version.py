"""Heuristic semver / calver classification of version strings.

Calendar and semantic versions overlap lexically (``2.6.1`` could be read as
``YYYY.MM.MICRO`` with an unbounded year), so the order of checks below is
the disambiguation rule:

1. split off a trailing alphabetic modifier (``-rc1``, ``beta``);
2. cores carrying ``+`` or both ``.`` and ``-`` are semver-shaped and skip
   the calendar checks;
3. calendar schemes are tried in a fixed priority, 4-digit years gated by
   ``year_min``/``year_max``, 2-digit years only when explicitly allowed;
4. anything left is parsed as a strict SemVer 2.0.0 string.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import semver

SEMVER = "semver"
CALVER = "calver"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class VersionOptions:
    """Disambiguation knobs; callers supply all three on every call."""

    allow_yy_calver: bool
    year_min: int
    year_max: int

    def year_in_range(self, year: int) -> bool:
        return self.year_min <= year <= self.year_max


@dataclass(frozen=True)
class CalverParts:
    year: int
    month: int
    day: Optional[int] = None
    micro: Optional[int] = None

    def to_dict(self) -> Dict[str, int]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class SemverParts:
    major: int
    minor: int
    patch: int
    pre: Optional[str] = None
    build: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VersionInfo:
    """Classification result for a single version string."""

    raw: str
    version_format: str
    calver_scheme: Optional[str] = None
    calver_parts: Optional[CalverParts] = None
    modifier: Optional[str] = None
    semver_parts: Optional[SemverParts] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "version_format": self.version_format,
            "calver_scheme": self.calver_scheme,
            "calver_parts": self.calver_parts.to_dict() if self.calver_parts else None,
            "modifier": self.modifier,
            "semver_parts": self.semver_parts.to_dict() if self.semver_parts else None,
        }


def classify_version(raw: str, options: VersionOptions) -> VersionInfo:
    """Classify ``raw`` as semver, calver or unknown."""
    trimmed = raw.strip()
    core, modifier = split_modifier(trimmed)
    if "+" in core or ("." in core and "-" in core):
        return _semver_or_unknown(trimmed)
    calver = _classify_calver(core, modifier, options)
    if calver is not None:
        return calver
    return _semver_or_unknown(trimmed)


def split_modifier(value: str) -> Tuple[str, Optional[str]]:
    """Split a trailing alphabetic qualifier off a version string."""
    dash = value.rfind("-")
    if dash != -1:
        suffix = value[dash + 1 :]
        if suffix and _has_alpha(suffix):
            return value[:dash], suffix

    last_digit = -1
    for index, char in enumerate(value):
        if _is_digit(char):
            last_digit = index
    if last_digit != -1:
        tail = value[last_digit + 1 :]
        if tail and _has_alpha(tail):
            return value[: last_digit + 1], tail
    return value, None


def parse_semver(value: str) -> Optional[SemverParts]:
    """Strict SemVer 2.0.0 parse; ``None`` for anything else, non-ASCII digits included."""
    if not value.isascii():
        return None
    try:
        version = semver.Version.parse(value)
    except ValueError:
        return None
    return SemverParts(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        pre=version.prerelease,
        build=version.build,
    )


def _semver_or_unknown(value: str) -> VersionInfo:
    parts = parse_semver(value)
    if parts is None:
        return VersionInfo(raw=value, version_format=UNKNOWN)
    return VersionInfo(raw=value, version_format=SEMVER, semver_parts=parts)


def _classify_calver(
    core: str, modifier: Optional[str], options: VersionOptions
) -> Optional[VersionInfo]:
    matchers: List[Callable[[str, VersionOptions], Optional[Tuple[str, CalverParts]]]] = [
        _yyyy_mm,
        _yyyy_mm_micro,
        _yyyy_mm_dd,
        _yyyymmdd,
    ]
    if options.allow_yy_calver:
        matchers.extend([_yy_mm, _yy_mm_micro])
    for matcher in matchers:
        matched = matcher(core, options)
        if matched is not None:
            scheme, parts = matched
            return VersionInfo(
                raw=core,
                version_format=CALVER,
                calver_scheme=scheme,
                calver_parts=parts,
                modifier=modifier,
            )
    return None


def _yyyy_mm(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    fields = _numeric_fields(core, ".", count=2, year_width=4)
    if fields is None:
        return None
    year, month = fields
    if not options.year_in_range(year) or not _valid_month(month):
        return None
    return "YYYY.MM", CalverParts(year=year, month=month)


def _yyyy_mm_micro(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    fields = _numeric_fields(core, ".", count=3, year_width=4)
    if fields is None:
        return None
    year, month, micro = fields
    if not options.year_in_range(year) or not _valid_month(month):
        return None
    return "YYYY.MM.MICRO", CalverParts(year=year, month=month, micro=micro)


def _yyyy_mm_dd(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    fields = _numeric_fields(core, "-", count=3, year_width=4)
    if fields is None:
        return None
    year, month, day = fields
    if not options.year_in_range(year) or not _valid_month(month) or not _valid_day(day):
        return None
    return "YYYY-MM-DD", CalverParts(year=year, month=month, day=day)


def _yyyymmdd(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    date, dot, micro_text = core.partition(".")
    if len(date) != 8 or not all(_is_digit(char) for char in date):
        return None
    year, month, day = int(date[0:4]), int(date[4:6]), int(date[6:8])
    if not options.year_in_range(year) or not _valid_month(month) or not _valid_day(day):
        return None
    if not dot:
        return "YYYYMMDD", CalverParts(year=year, month=month, day=day)
    micro = _parse_uint(micro_text)
    if micro is None:
        return None
    return "YYYYMMDD.MICRO", CalverParts(year=year, month=month, day=day, micro=micro)


# Two-digit years are not checked against year_min/year_max.
def _yy_mm(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    fields = _numeric_fields(core, ".", count=2, year_width=2)
    if fields is None:
        return None
    year, month = fields
    if not _valid_month(month):
        return None
    return "YY.MM", CalverParts(year=2000 + year, month=month)


def _yy_mm_micro(core: str, options: VersionOptions) -> Optional[Tuple[str, CalverParts]]:
    fields = _numeric_fields(core, ".", count=3, year_width=2)
    if fields is None:
        return None
    year, month, micro = fields
    if not _valid_month(month):
        return None
    return "YY.MM.MICRO", CalverParts(year=2000 + year, month=month, micro=micro)


def _numeric_fields(
    core: str, separator: str, *, count: int, year_width: int
) -> Optional[Sequence[int]]:
    parts = core.split(separator)
    if len(parts) != count or len(parts[0]) != year_width:
        return None
    values: List[int] = []
    for part in parts:
        value = _parse_uint(part)
        if value is None:
            return None
        values.append(value)
    return values


def _parse_uint(text: str) -> Optional[int]:
    if not text or not all(_is_digit(char) for char in text):
        return None
    return int(text)


def _valid_month(month: int) -> bool:
    return 1 <= month <= 12


def _valid_day(day: int) -> bool:
    return 1 <= day <= 31


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _has_alpha(text: str) -> bool:
    return any(("a" <= char <= "z") or ("A" <= char <= "Z") for char in text)


__all__ = [
    "CALVER",
    "SEMVER",
    "UNKNOWN",
    "CalverParts",
    "SemverParts",
    "VersionInfo",
    "VersionOptions",
    "classify_version",
    "parse_semver",
    "split_modifier",
]
