"""
Command-line interface for linesentry.

Provides a user-friendly CLI for running scans, listing rules,
recording ignores, and creating a configuration file.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from linesentry import __version__
from linesentry.config import CONFIG_FILE_NAMES, ScanConfig, create_default_config, find_config, load_scan_config
from linesentry.core.corpus import load_corpus
from linesentry.core.engine import ScanEngine
from linesentry.core.findings import Category, Issue, Severity
from linesentry.core.ignore import IGNORE_FILENAME, IgnoreEntry, append_ignore_entry, load_ignore_file
from linesentry.formatters import get_formatter

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="linesentry",
        description="Rule-based security scanner for source code.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  linesentry scan ./src                         # Scan a directory
  linesentry scan app.ts                        # Scan a single file
  linesentry scan . --format json               # Output as JSON
  linesentry scan . --format sarif -o out.sarif # SARIF output to file
  linesentry scan . --severity warning          # Only warnings and errors
  cat app.kt | linesentry scan --stdin-filename app.kt
  linesentry list-rules --category secrets-credentials
  linesentry ignore CRED005 src/fixtures.ts:12 --reason "test data"
  linesentry init                               # Create config file
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan code for security issues")
    scan_parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Target file or directory to scan (default: current directory)",
    )
    scan_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )
    scan_parser.add_argument(
        "-f", "--format",
        choices=["text", "json", "sarif"],
        help="Output format (default: text, or the configured format)",
    )
    scan_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    scan_parser.add_argument(
        "-s", "--severity",
        choices=[s.value for s in Severity],
        help="Minimum severity to report (default: info)",
    )
    scan_parser.add_argument(
        "--include",
        action="append",
        help="Include patterns (can be specified multiple times)",
    )
    scan_parser.add_argument(
        "--exclude",
        action="append",
        help="Exclude patterns (can be specified multiple times)",
    )
    scan_parser.add_argument(
        "--rules",
        action="append",
        metavar="FILE",
        help="Additional YAML/JSON rule file (can be specified multiple times)",
    )
    scan_parser.add_argument(
        "--disable",
        action="append",
        metavar="CODE",
        help="Disable a rule code or prefix ending in * (can be specified multiple times)",
    )
    scan_parser.add_argument(
        "--stdin-filename",
        metavar="PATH",
        help="Read the document from stdin and analyze it as PATH",
    )
    scan_parser.add_argument(
        "--no-ignore-file",
        action="store_true",
        help=f"Do not apply {IGNORE_FILENAME} entries",
    )
    scan_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output and debug logging",
    )
    scan_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    scan_parser.add_argument(
        "--no-suggestions",
        action="store_true",
        help="Hide fix suggestions in text output",
    )
    scan_parser.add_argument(
        "-j", "--jobs",
        type=int,
        help="Number of parallel workers (default: 4)",
    )

    # List-rules command
    rules_parser = subparsers.add_parser("list-rules", help="List available rules")
    rules_parser.add_argument(
        "--category",
        choices=[c.value for c in Category],
        help="Only list rules in this category",
    )
    rules_parser.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    rules_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file (applies disabled rules and overrides)",
    )
    rules_parser.add_argument(
        "--rules",
        action="append",
        metavar="FILE",
        help="Additional YAML/JSON rule file",
    )
    rules_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    # Ignore command
    ignore_parser = subparsers.add_parser("ignore", help=f"Record an ignore entry in {IGNORE_FILENAME}")
    ignore_parser.add_argument("code", help="Rule code to ignore")
    ignore_parser.add_argument("location", help="File path relative to the workspace root, optionally with :LINE")
    ignore_parser.add_argument(
        "-r", "--reason",
        help="Why the issue is ignored",
    )
    ignore_parser.add_argument(
        "--root",
        default=".",
        help="Workspace root holding the ignore file (default: current directory)",
    )

    # Init command
    init_parser = subparsers.add_parser("init", help="Create a configuration file")
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing config file",
    )

    return parser


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def exit_code_for(issues: List[Issue]) -> int:
    """2 when any error-level issue remains, 1 for warnings, 0 otherwise."""
    severities = {issue.severity for issue in issues}
    if Severity.ERROR in severities:
        return 2
    if Severity.WARNING in severities:
        return 1
    return 0


def _apply_overrides(config: ScanConfig, args: argparse.Namespace) -> ScanConfig:
    if args.severity:
        config.severity_threshold = args.severity
    if args.jobs:
        config.max_workers = args.jobs
    if args.include:
        config.include_patterns = args.include
    if args.exclude:
        config.exclude_patterns = config.exclude_patterns + args.exclude
    if args.rules:
        config.rules.extra_rule_files = config.rules.extra_rule_files + args.rules
    if args.disable:
        config.rules.disabled = config.rules.disabled + args.disable
    if args.no_ignore_file:
        config.use_ignore_file = False
    return config


def _write_output(output: str, path: Optional[str], announce: bool) -> None:
    if path:
        with open(path, "w", encoding="utf-8") as f:
            f.write(output)
            f.write("\n")
        if announce:
            print(f"Results written to {path}")
    else:
        print(output)


def _stdin_ignore_entries(
    args: argparse.Namespace, config: ScanConfig, start_dir: str
) -> Tuple[str, List[IgnoreEntry]]:
    """Workspace root for stdin input (the config file's directory, else cwd) and its ignore entries."""
    config_path = args.config or find_config(start_dir)
    root = os.path.dirname(os.path.abspath(config_path)) if config_path else os.getcwd()
    if not config.use_ignore_file:
        return root, []
    return root, load_ignore_file(root)


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute the scan command."""
    if args.stdin_filename:
        start_dir = os.path.dirname(args.stdin_filename) or "."
    else:
        start_dir = args.target
    config = _apply_overrides(load_scan_config(args.config, start_dir=start_dir), args)

    engine = ScanEngine(config.to_engine_config())

    output_format = args.format or config.output.format
    formatter = get_formatter(
        output_format,
        use_color=config.output.color and not args.no_color,
        verbose=args.verbose or config.output.verbose,
        show_suggestions=config.output.show_suggestions and not args.no_suggestions,
    )

    if args.stdin_filename:
        root, ignore_entries = _stdin_ignore_entries(args, config, start_dir)
        relative = os.path.relpath(os.path.abspath(args.stdin_filename), root)
        report = engine.scan_content(sys.stdin.read(), args.stdin_filename, relative, ignore_entries)
        output = formatter.format_issues(report.issues, args.stdin_filename)
        _write_output(output, args.output or config.output.output_file, output_format == "text")
        return exit_code_for(report.issues)

    if not os.path.exists(args.target):
        print(f"Error: {args.target} does not exist", file=sys.stderr)
        return 1

    logger.info("Scanning %s", os.path.abspath(args.target))
    result = engine.scan(args.target)

    output = formatter.format_result(result)
    _write_output(output, args.output or config.output.output_file, output_format == "text")

    return exit_code_for(result.issues)


def cmd_list_rules(args: argparse.Namespace) -> int:
    """Execute the list-rules command."""
    config = load_scan_config(args.config)
    corpus = load_corpus(config.rules.extra_rule_files + (args.rules or []))
    corpus = corpus.configured(
        disabled=config.rules.disabled,
        disabled_categories=config.rules.disabled_categories,
        severity_overrides=config.rules.severity_overrides,
    )

    rules = corpus.by_category(args.category) if args.category else corpus.all_rules()

    if args.format == "json":
        print(get_formatter("json").format_rules(rules))
        return 0

    formatter = get_formatter("text", use_color=not args.no_color)
    print(formatter.format_rules(rules))
    print(f"\nTotal: {len(rules)} rules")
    if corpus.rejected:
        print(f"Rejected: {len(corpus.rejected)}", file=sys.stderr)
        for rejected in corpus.rejected:
            print(f"  {rejected}", file=sys.stderr)

    return 0


def cmd_ignore(args: argparse.Namespace) -> int:
    """Execute the ignore command."""
    file_path, line = args.location, None
    head, sep, tail = args.location.rpartition(":")
    if sep and tail.isdigit():
        file_path, line = head, int(tail)
        if line < 1:
            print("Error: line numbers start at 1", file=sys.stderr)
            return 1

    entry = IgnoreEntry(rule_code=args.code, file_path=file_path, line=line, reason=args.reason)
    path = append_ignore_entry(args.root, entry)
    print(f"Added to {path}: {entry.to_line()}")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute the init command."""
    config_file = CONFIG_FILE_NAMES[0]

    if os.path.exists(config_file) and not args.force:
        print(f"Configuration file {config_file} already exists.")
        print("Use --force to overwrite.")
        return 1

    content = create_default_config()

    with open(config_file, "w", encoding="utf-8") as f:
        f.write(content)

    print(f"Created configuration file: {config_file}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(getattr(args, "verbose", False))

    try:
        if args.command == "scan":
            return cmd_scan(args)
        elif args.command == "list-rules":
            return cmd_list_rules(args)
        elif args.command == "ignore":
            return cmd_ignore(args)
        elif args.command == "init":
            return cmd_init(args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\nScan interrupted.")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if os.environ.get("DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
