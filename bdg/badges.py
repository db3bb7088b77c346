"""Badge records rendered into the managed README block."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence


class BadgeKind(str, Enum):
    """Categories used by ``--only`` filters and preselection."""

    VERSION = "version"
    CI = "ci"
    LICENSE = "license"
    RELEASE = "release"
    DOCS = "docs"
    DOWNLOADS = "downloads"


@dataclass(frozen=True)
class Badge:
    """A badge ready to be rendered as a single Markdown line."""

    kind: BadgeKind
    label: str
    image_url: str
    link_url: Optional[str] = None

    def render_markdown(self) -> str:
        if self.link_url:
            return f"[![{self.label}]({self.image_url})]({self.link_url})"
        return f"![{self.label}]({self.image_url})"


def badge_for_npm(package: str) -> Badge:
    return Badge(
        kind=BadgeKind.VERSION,
        label="npm",
        image_url=f"https://img.shields.io/npm/v/{package}.svg",
        link_url=f"https://www.npmjs.com/package/{package}",
    )


def badge_for_npm_downloads(package: str, period: str = "dm") -> Badge:
    return Badge(
        kind=BadgeKind.DOWNLOADS,
        label="downloads",
        image_url=f"https://img.shields.io/npm/{period}/{package}.svg",
        link_url=f"https://www.npmjs.com/package/{package}",
    )


def badge_for_crates(crate: str) -> Badge:
    return Badge(
        kind=BadgeKind.VERSION,
        label="crates.io",
        image_url=f"https://img.shields.io/crates/v/{crate}.svg",
        link_url=f"https://crates.io/crates/{crate}",
    )


def badge_for_license(owner: str, repo: str) -> Badge:
    return Badge(
        kind=BadgeKind.LICENSE,
        label="license",
        image_url=f"https://img.shields.io/github/license/{owner}/{repo}.svg",
        link_url=f"https://github.com/{owner}/{repo}",
    )


def badge_for_release(owner: str, repo: str) -> Badge:
    return Badge(
        kind=BadgeKind.RELEASE,
        label="release",
        image_url=f"https://img.shields.io/github/v/release/{owner}/{repo}.svg",
        link_url=f"https://github.com/{owner}/{repo}/releases",
    )


def badge_for_workflow(owner: str, repo: str, workflow_file: str) -> Badge:
    """CI status badge; ``workflow_file`` is the file name under .github/workflows."""
    base = f"https://github.com/{owner}/{repo}/actions/workflows/{workflow_file}"
    return Badge(
        kind=BadgeKind.CI,
        label="CI",
        image_url=f"{base}/badge.svg",
        link_url=base,
    )


def badge_for_docs(url: str, message: str = "latest") -> Badge:
    return Badge(
        kind=BadgeKind.DOCS,
        label="docs",
        image_url=f"https://img.shields.io/badge/docs-{message}-blue",
        link_url=url,
    )


def filter_badges(badges: Iterable[Badge], only: Sequence[str]) -> List[Badge]:
    """Keep badges whose category is listed in ``only``; an empty filter keeps all."""
    wanted = {value.strip().lower() for value in only if value.strip()}
    if not wanted:
        return list(badges)
    return [badge for badge in badges if badge.kind.value in wanted]


def recommended_indices(badges: Sequence[Badge]) -> List[int]:
    """Indices preselected by default: the first CI badge, version badges, the first license."""
    selected: List[int] = []
    first_ci = next((i for i, badge in enumerate(badges) if badge.kind is BadgeKind.CI), None)
    if first_ci is not None:
        selected.append(first_ci)
    selected.extend(i for i, badge in enumerate(badges) if badge.kind is BadgeKind.VERSION)
    first_license = next(
        (i for i, badge in enumerate(badges) if badge.kind is BadgeKind.LICENSE), None
    )
    if first_license is not None:
        selected.append(first_license)
    return sorted(set(selected))


__all__ = [
    "Badge",
    "BadgeKind",
    "badge_for_crates",
    "badge_for_docs",
    "badge_for_license",
    "badge_for_npm",
    "badge_for_npm_downloads",
    "badge_for_release",
    "badge_for_workflow",
    "filter_badges",
    "recommended_indices",
]
