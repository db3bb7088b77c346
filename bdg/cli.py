"""CLI entrypoints for bdg commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .badges import (
    Badge,
    badge_for_crates,
    badge_for_docs,
    badge_for_license,
    badge_for_npm,
    badge_for_release,
    badge_for_workflow,
)
from .config import ConfigError
from .logging import configure_logging
from .orchestrator import EditOutcome, Orchestrator
from .readme.markers import MarkerBlockError
from .readme.removal import BadgeNotFoundError, RemovalOutcome
from .reports import DryRunReport, removal_warnings, to_json

EXIT_DIFF = 2


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        metavar="PATH",
        help="Also write debug-level logs to PATH.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="README file or project directory (defaults to current directory).",
    )


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the README diff without writing; exits 2 when changes are pending.",
    )
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bdg",
        description="Maintain the managed badge block in a project README.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show badges in the managed block.")
    _add_verbose_option(list_parser, suppress_default=True)
    _add_path_argument(list_parser)
    list_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")
    list_parser.add_argument(
        "-q", "--quiet", action="store_true", help="Print badge lines only."
    )

    add_parser = subparsers.add_parser(
        "add", help="Write badges into the managed block, replacing its contents."
    )
    _add_verbose_option(add_parser, suppress_default=True)
    _add_path_argument(add_parser)
    _add_output_options(add_parser)
    add_parser.add_argument(
        "--badge",
        action="append",
        default=[],
        metavar="MARKDOWN",
        help="Pre-rendered badge Markdown line (repeatable).",
    )
    add_parser.add_argument("--npm", metavar="PACKAGE", help="Add an npm version badge.")
    add_parser.add_argument("--crate", metavar="CRATE", help="Add a crates.io version badge.")
    add_parser.add_argument(
        "--github",
        metavar="OWNER/REPO",
        help="GitHub repository used for license, release and workflow badges.",
    )
    add_parser.add_argument(
        "--workflow",
        action="append",
        default=[],
        metavar="FILE",
        help="Workflow file under .github/workflows for a CI badge (needs --github).",
    )
    add_parser.add_argument(
        "--release", action="store_true", help="Add a GitHub release badge (needs --github)."
    )
    add_parser.add_argument("--docs", metavar="URL", help="Add a docs badge linking to URL.")
    add_parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="KIND",
        help="Restrict generated badges to categories: ci, version, license, release, docs, downloads.",
    )

    remove_parser = subparsers.add_parser("remove", help="Remove badges from the managed block.")
    _add_verbose_option(remove_parser, suppress_default=True)
    _add_path_argument(remove_parser)
    _add_output_options(remove_parser)
    remove_parser.add_argument(
        "--all", dest="remove_all", action="store_true", help="Remove the whole managed block."
    )
    remove_parser.add_argument(
        "--id", dest="ids", action="append", default=[], help="Badge id to remove (repeatable)."
    )
    remove_parser.add_argument(
        "--kind", dest="kinds", action="append", default=[], help="Badge kind to remove (repeatable)."
    )
    remove_parser.add_argument(
        "--strict", action="store_true", help="Fail when none of the requested ids exist."
    )
    remove_parser.add_argument("-q", "--quiet", action="store_true", help="Suppress the summary.")

    classify_parser = subparsers.add_parser(
        "classify", help="Classify a version string as semver, calver or unknown."
    )
    _add_verbose_option(classify_parser, suppress_default=True)
    classify_parser.add_argument("version", help="Version string to classify.")
    classify_parser.add_argument(
        "--allow-yy-calver",
        action="store_true",
        default=None,
        help="Accept two-digit-year calendar versions (YY.MM, YY.MM.MICRO).",
    )
    classify_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for bdg commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(getattr(args, "json", False) or getattr(args, "quiet", False)),
        log_file=args.log_file,
    )

    orchestrator = Orchestrator()

    try:
        if args.command == "list":
            _run_list(orchestrator, args)
        elif args.command == "add":
            badges = _badges_from_args(parser, args)
            outcome = orchestrator.run_add(
                args.path,
                badges,
                markdown=args.badge,
                only=args.only,
                dry_run=args.dry_run,
            )
            _report_edit(parser, outcome, args)
        elif args.command == "remove":
            outcome = orchestrator.run_remove(
                args.path,
                remove_all=args.remove_all,
                ids=args.ids,
                kinds=args.kinds,
                strict=args.strict,
                dry_run=args.dry_run,
            )
            if outcome is None:
                if not args.json:
                    print("Managed block is empty; nothing to remove")
                return
            if outcome.removal is not None and not args.json and not args.quiet:
                _print_remove_summary(outcome, outcome.removal)
            _report_edit(parser, outcome, args)
        elif args.command == "classify":
            info = orchestrator.classify(args.version, allow_yy_calver=args.allow_yy_calver)
            if args.json:
                print(json.dumps(info.to_dict(), indent=2))
            else:
                scheme = f" ({info.calver_scheme})" if info.calver_scheme else ""
                print(f"{info.raw}: {info.version_format}{scheme}")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except BadgeNotFoundError as exc:
        missing = ", ".join(exc.missing_ids)
        parser.exit(1, f"bdg {args.command} failed: badge id not found: {missing}\n")
    except (MarkerBlockError, ConfigError, ValueError) as exc:
        parser.exit(1, f"bdg {args.command} failed: {exc}\n")


def _run_list(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    report = orchestrator.run_list(args.path)
    if args.json:
        print(to_json(report))
        return
    if not args.quiet:
        readme = report.readme
        print(
            f"README: {_relativize(Path(readme.path))} ({readme.newline}, "
            f"trailing newline: {'yes' if readme.trailing_newline else 'no'})"
        )
        print(f"Marker block: {'present' if readme.markers.present else 'missing'}")
        print(f"Badges: {len(report.readme_block.badges)}")
    for badge in report.readme_block.badges:
        if args.quiet:
            print(badge.raw)
        else:
            print(f"- {badge.kind} [{badge.id}] {badge.raw}")


def _badges_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> List[Badge]:
    badges: List[Badge] = []
    owner = repo = None
    if args.github:
        owner, _, repo = args.github.partition("/")
        if not owner or not repo:
            parser.exit(1, "--github expects OWNER/REPO\n")
    if (args.workflow or args.release) and owner is None:
        parser.exit(1, "--workflow and --release require --github OWNER/REPO\n")

    for workflow_file in args.workflow:
        badges.append(badge_for_workflow(owner, repo, workflow_file))
    if args.npm:
        badges.append(badge_for_npm(args.npm))
    if args.crate:
        badges.append(badge_for_crates(args.crate))
    if owner and repo:
        badges.append(badge_for_license(owner, repo))
    if args.release:
        badges.append(badge_for_release(owner, repo))
    if args.docs:
        badges.append(badge_for_docs(args.docs))
    return badges


def _report_edit(
    parser: argparse.ArgumentParser, outcome: EditOutcome, args: argparse.Namespace
) -> None:
    if outcome.dry_run:
        if args.json:
            removal = outcome.removal
            report = DryRunReport(
                path=str(outcome.path),
                diff=outcome.diff,
                removed_ids=removal.removed_ids if removal else None,
                missing_ids=removal.missing_ids if removal else None,
                removed_kinds=removal.removed_kinds if removal else None,
                warnings=removal_warnings(removal),
            )
            print(to_json(report))
        elif outcome.diff:
            sys.stdout.write(outcome.diff)
        if outcome.diff:
            parser.exit(EXIT_DIFF)
        return
    if not args.json:
        if outcome.changed:
            print(f"README updated at {_relativize(outcome.path)}")
        else:
            print("README already up to date")


def _print_remove_summary(outcome: EditOutcome, removal: RemovalOutcome) -> None:
    print(f"Removed {removal.removed} badges from {_relativize(outcome.path)}")
    if removal.removed_ids:
        print(f"- ids: {_summarize(removal.removed_ids, 20)}")
    if removal.removed_kinds:
        pairs = sorted(f"{kind}={count}" for kind, count in removal.removed_kinds.items())
        print(f"- kinds: {', '.join(pairs)}")
    print(f"Remaining: {outcome.remaining}")


def _summarize(items: List[str], limit: int) -> str:
    if len(items) <= limit:
        return ", ".join(items)
    return f"{', '.join(items[:limit])} ...+{len(items) - limit}"


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
