"""
CLI interface for site_auditor.

Provides the command-line interface for auditing a site directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from site_auditor import __version__
from site_auditor.config import DEFAULT_CONFIG, get_config_template, load_config
from site_auditor.errors import AuditError
from site_auditor.models import ALL_CHECKS, Check, ScanRequest
from site_auditor.reports import write_json, write_pdf, write_text, write_xlsx
from site_auditor.rules import RuleRegistry, UnknownCheck
from site_auditor.scanner import SiteScanner

if TYPE_CHECKING:
    from typing import Any

    from site_auditor.models import Finding

logger = logging.getLogger(__name__)

FORMATS = ("json", "text", "xlsx", "pdf")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="site-audit",
        description="Audit a static site / PHP project for common content problems",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
QUICK START
  site-audit ./public                          # All checks, JSON to stdout
  site-audit ./public --check missing-alt      # One check
  site-audit ./public --files index.html,about/team.php
  site-audit ./public --format xlsx -o report.xlsx

NOTE
  The missing-index-files check CREATES index.php in every directory that
  lacks one. Pass --read-only to audit without touching the tree.
        """,
    )

    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Site directory to audit (default: current directory)",
    )
    parser.add_argument(
        "--files",
        metavar="NAMES",
        help="Comma-separated file names to check instead of the whole project "
             "(matched against the end of each path)",
    )
    parser.add_argument(
        "--check",
        default=ALL_CHECKS,
        choices=[ALL_CHECKS] + [check.value for check in Check],
        help="Check to run (default: all)",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Never write to the audited tree (skips missing-index-files)",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout; required for xlsx/pdf)",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="json",
        help="Report format (default: json)",
    )
    parser.add_argument(
        "--list-checks",
        action="store_true",
        help="List available checks and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--config",
        metavar="FILE",
        help="Load config from YAML file (ignored dirs, globals, domains, ...)",
    )
    config_group.add_argument(
        "--init-config",
        action="store_true",
        help="Print a starter config file and exit",
    )

    return parser


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI. Returns the process exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.init_config:
        print(get_config_template(), end="")
        return 0

    if args.list_checks:
        for check in RuleRegistry.list_checks():
            print(check.value)
        return 0

    if args.format in ("xlsx", "pdf") and not args.output:
        print(f"Error: --format {args.format} requires --output", file=sys.stderr)
        return 2

    try:
        config = load_settings(args.config, args.verbose)
        findings = run_scan(args, config)
    except (AuditError, UnknownCheck) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_report(findings, args.format, args.output)
    if args.output and args.verbose:
        print(f"Report written to: {args.output}", file=sys.stderr)
    return 0


def load_settings(config_file: str | None, verbose: bool) -> dict[str, Any]:
    """Defaults, or defaults with the YAML file merged over them."""
    if not config_file:
        return DEFAULT_CONFIG
    config = load_config(Path(config_file))
    if verbose:
        exclude_dirs = config.get("exclude", {}).get("directories") or []
        names = config.get("global_variables", {}).get("names") or []
        domains = config.get("deprecated_domains", {}).get("domains") or []
        print(f"Loaded config: {config_file}", file=sys.stderr)
        print(f"  exclude: {len(exclude_dirs)} dirs", file=sys.stderr)
        print(f"  global variables: {len(names)}", file=sys.stderr)
        print(f"  deprecated domains: {len(domains)}", file=sys.stderr)
    return config


def run_scan(args: argparse.Namespace, config: dict[str, Any]) -> list[Finding]:
    """Build the request from CLI arguments and scan."""
    files = None
    if args.files is not None:
        files = tuple(name.strip() for name in args.files.split(","))

    request = ScanRequest(
        root=Path(args.path),
        files=files,
        checks=(args.check,),
        read_only=args.read_only,
    )
    if args.verbose:
        print(f"Scanning: {Path(args.path).resolve()}", file=sys.stderr)
    return SiteScanner(config=config).scan(request)


def write_report(findings: list[Finding], fmt: str, output: str | None) -> None:
    """Write findings in the requested format to a file or stdout."""
    if fmt == "xlsx":
        write_xlsx(findings, output)
    elif fmt == "pdf":
        write_pdf(findings, output)
    else:
        writer = write_json if fmt == "json" else write_text
        if output:
            with open(output, "w", encoding="utf-8") as f:
                writer(findings, f)
        else:
            writer(findings, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
