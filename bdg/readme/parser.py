"""Parse Markdown badge lines into structured records."""

from __future__ import annotations

import hashlib
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

_SHIELDS = "img.shields.io/"

# (kind, id, meta)
_Inference = Tuple[str, str, Optional[Dict[str, Any]]]


@dataclass(frozen=True)
class ParsedBadge:
    """A badge line recovered from the managed block."""

    id: str
    kind: str
    label: str
    image: str
    link: Optional[str]
    source: str
    meta: Optional[Dict[str, Any]]
    raw: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def hash_line(line: str) -> str:
    """Stable content hash used for ids of unrecognised lines."""
    return hashlib.sha256(line.encode("utf-8")).hexdigest()[:16]


def unknown_id(line: str) -> str:
    return f"unknown:{hash_line(line)}"


def parse_badge_line(line: str) -> ParsedBadge:
    """Parse a line, degrading to an ``unknown`` record when no badge shape matches."""
    parsed = parse_badge_line_optional(line)
    if parsed is not None:
        return parsed
    return ParsedBadge(
        id=unknown_id(line),
        kind="unknown",
        label="",
        image="",
        link=None,
        source="readme",
        meta=None,
        raw=line,
    )


def parse_badge_line_optional(line: str) -> Optional[ParsedBadge]:
    """Parse a line, returning None when it is not badge markup at all."""
    linked = _parse_linked_image(line)
    if linked is not None:
        label, image, link = linked
        return _build_badge(line, label, image, link)
    bare = _parse_image(line)
    if bare is not None:
        label, image = bare
        return _build_badge(line, label, image, None)
    return None


def _build_badge(raw: str, label: str, image: str, link: Optional[str]) -> ParsedBadge:
    kind, badge_id, meta = infer_kind(image, raw)
    return ParsedBadge(
        id=badge_id,
        kind=kind,
        label=label,
        image=image,
        link=link,
        source="readme",
        meta=meta,
        raw=raw,
    )


def _parse_linked_image(line: str) -> Optional[Tuple[str, str, str]]:
    """Match ``[![Label](Image)](Link)``."""
    trimmed = line.strip()
    if not trimmed.startswith("[![") or not trimmed.endswith(")"):
        return None
    start_label = 3
    end_label = trimmed.find("](", start_label)
    if end_label == -1:
        return None
    label = trimmed[start_label:end_label]

    start_image = end_label + 2
    end_image = trimmed.find(")]", start_image)
    if end_image == -1:
        return None
    image = trimmed[start_image:end_image].strip()

    open_link = trimmed.find("(", end_image + 2)
    if open_link == -1:
        return None
    start_link = open_link + 1
    end_link = trimmed.find(")", start_link)
    if end_link == -1:
        return None
    link = trimmed[start_link:end_link].strip()
    if not image:
        return None
    return label, image, link


def _parse_image(line: str) -> Optional[Tuple[str, str]]:
    """Match ``![Label](Image)``."""
    trimmed = line.strip()
    if not trimmed.startswith("![") or not trimmed.endswith(")"):
        return None
    start_label = 2
    end_label = trimmed.find("](", start_label)
    if end_label == -1:
        return None
    label = trimmed[start_label:end_label]
    start_image = end_label + 2
    end_image = trimmed.find(")", start_image)
    if end_image == -1:
        return None
    image = trimmed[start_image:end_image].strip()
    if not image:
        return None
    return label, image


def infer_kind(image: str, raw: str) -> _Inference:
    """Classify an image URL; the first matching rule wins."""
    url = image.strip()
    if url.startswith(("http://", "https://")):
        for rule in _RULES:
            inferred = rule(url, raw)
            if inferred is not None:
                return inferred
    return "unknown", unknown_id(raw), None


def _github_actions(url: str, raw: str) -> Optional[_Inference]:
    marker = "/actions/workflows/"
    if marker not in url or "/badge.svg" not in url:
        return None
    workflow_file = url.split(marker, 1)[1].split("/", 1)[0]
    if not workflow_file:
        return "github_actions", unknown_id(raw), None
    return "github_actions", f"ci:{workflow_file}", {"workflow_file": workflow_file}


def _npm_version(url: str, raw: str) -> Optional[_Inference]:
    package = _after_prefix(url, _SHIELDS + "npm/v/")
    if package is None:
        return None
    return "npm_version", f"npm:{package}", {"package": package}


def _npm_downloads(url: str, raw: str) -> Optional[_Inference]:
    for period in ("dw", "dm", "dt"):
        package = _after_prefix(url, f"{_SHIELDS}npm/{period}/")
        if package is not None:
            return "npm_downloads", f"npm_downloads:{package}", {"package": package}
    return None


def _crates_version(url: str, raw: str) -> Optional[_Inference]:
    crate = _after_prefix(url, _SHIELDS + "crates/v/")
    if crate is None:
        return None
    return "crates_version", f"crates:{crate}", {"crate": crate}


def _crates_downloads(url: str, raw: str) -> Optional[_Inference]:
    crate = _after_prefix(url, _SHIELDS + "crates/d/")
    if crate is None:
        return None
    return "crates_downloads", f"crates_downloads:{crate}", {"crate": crate}


def _license(url: str, raw: str) -> Optional[_Inference]:
    if _SHIELDS + "github/license/" in url:
        return "license", "license:github", None
    return None


def _release(url: str, raw: str) -> Optional[_Inference]:
    if _SHIELDS + "github/v/release/" in url:
        return "github_release", "release:github", None
    return None


def _codecov(url: str, raw: str) -> Optional[_Inference]:
    remainder = _remainder(url, _SHIELDS + "codecov/c/github/")
    if remainder is None:
        return None
    parts = remainder.split("/")
    if len(parts) < 2:
        return None
    owner, repo = parts[0], _strip_svg(parts[1])
    if not owner or not repo:
        return None
    return "coverage", "coverage:codecov", {"owner": owner, "repo": repo}


def _docs(url: str, raw: str) -> Optional[_Inference]:
    remainder = _remainder(url, _SHIELDS + "badge/")
    if remainder is None:
        return None
    parts = remainder.split("-")
    label = parts[0]
    message = parts[1] if len(parts) > 1 else ""
    if not label or label.lower() != "docs":
        return None
    return "docs", "docs:custom", {"label": label, "message": message}


_RULES: Sequence[Callable[[str, str], Optional[_Inference]]] = (
    _github_actions,
    _npm_version,
    _npm_downloads,
    _crates_version,
    _crates_downloads,
    _license,
    _release,
    _codecov,
    _docs,
)


def _remainder(url: str, prefix: str) -> Optional[str]:
    position = url.find(prefix)
    if position == -1:
        return None
    return url[position + len(prefix) :].split("?", 1)[0]


def _after_prefix(url: str, prefix: str) -> Optional[str]:
    remainder = _remainder(url, prefix)
    if remainder is None:
        return None
    segment = _strip_svg(remainder)
    return segment or None


def _strip_svg(value: str) -> str:
    while value.endswith(".svg"):
        value = value[: -len(".svg")]
    return value


__all__ = [
    "ParsedBadge",
    "hash_line",
    "infer_kind",
    "parse_badge_line",
    "parse_badge_line_optional",
    "unknown_id",
]
