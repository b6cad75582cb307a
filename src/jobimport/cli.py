"""CLI for jobimport - copy jobs and folders from a remote Jenkins."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.ports import Transport
from .errors import JobImportError
from .importer.discovery import query
from .importer.report import (
    items_to_dicts,
    save_items_json,
    save_report_csv,
    save_report_json,
)
from .runtime import build_runtime


def _query_site(args: argparse.Namespace, rt: Any):
    site = rt.config.find_site(args.site)
    credentials = rt.credentials.resolve(site.default_credentials_id)
    failures: dict[str, str] = {}
    items = query(site, args.folder, credentials, args.recursive, rt.transport, failures)
    for url, message in failures.items():
        print(f"Warning: could not list {url}: {message}", file=sys.stderr)
    return site, items, failures


def cmd_sites(args: argparse.Namespace, rt: Any) -> int:
    """List configured remote sites."""
    if args.json:
        print(json.dumps([
            {"name": s.name, "url": s.url, "default_credentials_id": s.default_credentials_id}
            for s in rt.config.sites
        ], indent=2))
        return 0

    for site in rt.config.sites:
        print(f"{site.name}\t{site.url}")
    return 0


def cmd_query(args: argparse.Namespace, rt: Any) -> int:
    """List the jobs and folders of a remote site."""
    _, items, failures = _query_site(args, rt)

    if args.map:
        save_items_json(items, Path(args.map))
        if not args.quiet:
            print(f"Saved item list to: {args.map}", file=sys.stderr)

    if args.json:
        print(json.dumps(items_to_dicts(items), indent=2, ensure_ascii=False))
    elif not args.quiet:
        for item in items:
            kind = "folder" if item.is_folder else "job"
            print(f"{item.full_name}\t{kind}\t{item.url}")

    return 1 if failures else 0


def cmd_import(args: argparse.Namespace, rt: Any) -> int:
    """Import selected remote items into the local store."""
    site, items, _ = _query_site(args, rt)

    report = rt.engine.run(
        job_urls=args.job,
        local_path=args.local_folder,
        credential_id=site.default_credentials_id,
        install_plugins=args.plugins,
        update=args.update,
        disable_urls=args.disable,
        discovered=items,
    )

    if args.report:
        save_report_json(report, Path(args.report))
    if args.csv:
        save_report_csv(report, Path(args.csv))

    if args.json:
        print(json.dumps([
            {
                "full_name": item.full_name,
                "status": status.status,
                "missing_plugins": item.missing_plugins or {},
            }
            for item, status in report.items()
        ], indent=2, ensure_ascii=False))
    elif not args.quiet:
        for item, status in report.items():
            print(f"{item.full_name}\t{status.status}")
            for name, version in (item.missing_plugins or {}).items():
                print(f"  missing plugin: {name}@{version}")

        print("\nImport Summary:")
        print(f"  Total items: {len(report)}")
        print(f"  Succeeded: {len(report.succeeded)}")
        print(f"  Failed: {len(report.failed)}")

    return 1 if report.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobimport", description="Import jobs and folders from a remote Jenkins"
    )
    parser.add_argument(
        "--version", action="version", version=f"jobimport {__version__}"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/jobimport.toml, root/jobimport.toml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Local store root directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="More logging (-v info, -vv debug)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # sites command
    subparsers.add_parser("sites", help="List configured remote sites")

    def add_remote_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--site", required=True, help="Configured site name")
        p.add_argument(
            "--folder", default=None,
            help="Remote folder to start from, e.g. team/tools (default: server root)"
        )
        p.add_argument(
            "--recursive", action="store_true",
            help="Walk into remote sub-folders"
        )

    # query command
    parser_query = subparsers.add_parser("query", help="List remote jobs and folders")
    add_remote_args(parser_query)
    parser_query.add_argument(
        "--map", help="Output path for item list JSON file"
    )

    # import command
    parser_import = subparsers.add_parser("import", help="Import remote jobs and folders")
    add_remote_args(parser_import)
    parser_import.add_argument(
        "--job", action="append", required=True, metavar="URL",
        help="Remote item URL to import (repeatable)"
    )
    parser_import.add_argument(
        "--local-folder", default=None,
        help="Local folder to import into (default: mirror the remote folders)"
    )
    parser_import.add_argument(
        "--plugins", action="store_true",
        help="Prevalidate plugins referenced by imported configurations"
    )
    parser_import.add_argument(
        "--update", action="store_true",
        help="Update existing local items instead of reporting duplicates"
    )
    parser_import.add_argument(
        "--disable", action="append", default=[], metavar="URL",
        help="Disable the job imported from URL (repeatable)"
    )
    parser_import.add_argument(
        "--report", help="Output path for import report JSON file"
    )
    parser_import.add_argument(
        "--csv", help="Output path for import report CSV file"
    )

    return parser


def run(argv: list[str] | None = None, transport: Transport | None = None) -> int:
    """Parse arguments, dispatch, and return the exit code."""
    args = build_parser().parse_args(argv)

    try:
        rt = build_runtime(
            root_path=args.root,
            config_path=args.config,
            transport=transport,
        )
    except JobImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    level = rt.config.logging.level
    if args.verbose == 1:
        level = "INFO"
    elif args.verbose > 1:
        level = "DEBUG"
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "sites": cmd_sites,
        "query": cmd_query,
        "import": cmd_import,
    }
    handler = handlers[args.cmd]

    try:
        return handler(args, rt)
    except (JobImportError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
