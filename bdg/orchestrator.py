"""Add, list and remove flows against a README on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .badges import Badge, filter_badges
from .config import BdgConfig, find_project_root, load_config
from .diff import unified_diff
from .logging import get_logger
from .readme.files import read_readme, resolve_readme, write_readme_atomic
from .readme.markers import (
    Document,
    ensure_marker_block,
    extract_managed_block,
    marker_count,
    remove_marker_block,
    rewrite_marker_block,
    rewrite_marker_block_lines,
    scan_markers,
)
from .readme.removal import RemovalOutcome, remove_block_lines_by_id_kind
from .reports import (
    ConfigReport,
    ConfigVersionReport,
    ListReport,
    MarkerReport,
    ReadmeReport,
    build_readme_block,
)
from .version import VersionInfo, classify_version


@dataclass
class EditOutcome:
    """Result of a README edit, written or previewed."""

    path: Path
    original: str
    updated: str
    diff: str
    dry_run: bool
    removal: Optional[RemovalOutcome] = None
    remaining: int = 0

    @property
    def changed(self) -> bool:
        return self.original != self.updated


class Orchestrator:
    """Coordinates README badge edits for a project directory."""

    def __init__(self, config: BdgConfig | None = None) -> None:
        self._config = config
        self.logger = get_logger("orchestrator")

    def config_for(self, path: Path) -> BdgConfig:
        if self._config is None:
            self._config = load_config(path, find_project_root(path))
        return self._config

    def readme_path(self, path: str | Path) -> Path:
        target = Path(path).expanduser().resolve()
        if target.is_file() or target.suffix.lower() == ".md":
            return target
        return resolve_readme(find_project_root(target))

    def run_add(
        self,
        path: str | Path,
        badges: Sequence[Badge] = (),
        *,
        markdown: Sequence[str] = (),
        only: Sequence[str] = (),
        dry_run: bool = False,
    ) -> EditOutcome:
        """Replace the managed block with the selected badges."""
        readme_path = self.readme_path(path)
        original = read_readme(readme_path)
        selected = filter_badges(badges, only)
        lines = [badge.render_markdown() for badge in selected]
        lines.extend(line for line in markdown if line.strip())
        self.logger.info("Installing %d badges into %s", len(lines), readme_path)

        ensured = ensure_marker_block(original)
        updated = rewrite_marker_block(ensured, lines)
        return self._finish(readme_path, original, updated, dry_run=dry_run, remaining=len(lines))

    def run_list(self, path: str | Path) -> ListReport:
        """Describe the README and the badges currently in its managed block."""
        readme_path = self.readme_path(path)
        original = read_readme(readme_path)
        content = ensure_marker_block(original)
        lines = extract_managed_block(content)

        document = Document.parse(original)
        scan = scan_markers(document.lines)
        config = self.config_for(readme_path.parent)
        return ListReport(
            config=ConfigReport(
                path=str(config.path) if config.path else None,
                version=ConfigVersionReport(
                    allow_yy_calver=config.version.allow_yy_calver,
                    year_min=config.version.year_min,
                    year_max=config.version.year_max,
                ),
            ),
            readme=ReadmeReport(
                path=str(readme_path),
                newline=document.newline_label,
                trailing_newline=document.trailing_newline,
                markers=MarkerReport(
                    present=bool(scan.begins) and bool(scan.ends),
                    count=marker_count(original),
                ),
            ),
            readme_block=build_readme_block(lines),
        )

    def run_remove(
        self,
        path: str | Path,
        *,
        remove_all: bool = False,
        ids: Sequence[str] = (),
        kinds: Sequence[str] = (),
        strict: bool = False,
        dry_run: bool = False,
    ) -> Optional[EditOutcome]:
        """Remove badges by id or kind, or the whole block with ``remove_all``.

        Returns None when the managed block holds nothing to remove.
        """
        if remove_all and (ids or kinds):
            raise ValueError("--all cannot be combined with --id or --kind")
        if not remove_all and not ids and not kinds:
            raise ValueError("nothing to remove: pass --all, --id or --kind")

        readme_path = self.readme_path(path)
        original = read_readme(readme_path)
        content = ensure_marker_block(original)
        if not extract_managed_block(content):
            self.logger.info("Managed block in %s is empty; nothing to remove", readme_path)
            return None

        removal: Optional[RemovalOutcome] = None
        remaining: List[str] = []
        if not remove_all:
            removal = remove_block_lines_by_id_kind(content, ids, kinds, strict=strict)
            remaining = removal.remaining
            self.logger.info(
                "Removing %d badges from %s (%d id hits)",
                removal.removed,
                readme_path,
                removal.id_hits,
            )
            for missing in removal.missing_ids:
                self.logger.warning("Badge id not found in managed block: %s", missing)

        if any(line.strip() for line in remaining):
            updated = rewrite_marker_block_lines(content, remaining)
        else:
            updated = remove_marker_block(content)
        outcome = self._finish(
            readme_path,
            original,
            updated,
            dry_run=dry_run,
            remaining=sum(1 for line in remaining if line.strip()),
        )
        outcome.removal = removal
        return outcome

    def classify(self, version: str, *, allow_yy_calver: Optional[bool] = None) -> VersionInfo:
        config = self.config_for(Path.cwd())
        options = config.version.to_options(allow_yy_calver=allow_yy_calver)
        return classify_version(version, options)

    def _finish(
        self,
        readme_path: Path,
        original: str,
        updated: str,
        *,
        dry_run: bool,
        remaining: int,
    ) -> EditOutcome:
        diff = unified_diff(readme_path, original, updated)
        if dry_run:
            self.logger.debug("Dry run; leaving %s untouched", readme_path)
        elif original != updated:
            write_readme_atomic(readme_path, updated)
            self.logger.info("Updated %s", readme_path)
        else:
            self.logger.info("%s already up to date", readme_path)
        return EditOutcome(
            path=readme_path,
            original=original,
            updated=updated,
            diff=diff,
            dry_run=dry_run,
            remaining=remaining,
        )


__all__ = ["EditOutcome", "Orchestrator"]
