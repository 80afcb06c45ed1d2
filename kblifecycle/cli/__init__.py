"""CLI commands for kb-lifecycle."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from kblifecycle.cli.check_command import CheckCommand
from kblifecycle.cli.config_command import ConfigCommand
from kblifecycle.cli.meta_command import MetaCommand
from kblifecycle.config import get_config
from kblifecycle.core.exceptions import LifecycleError
from kblifecycle.core.models import InactiveUserMsgStatus, InstallStatus
from kblifecycle.logging.structured_logger import configure_logging

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", use_json: bool = False):
    """Configure logging for CLI."""
    configure_logging(use_json=use_json, level=getattr(logging, level.upper()))


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="kb-lifecycle",
        description="kb-lifecycle - workspace config migration and engagement checks",
        epilog="""
Command Categories:

  Activation:
    check              Record an activation and list the notices that are due

  Workspace Config:
    backfill           Add missing default keys to dendron.yml
    deprecated         List (or remove) deprecated keys in dendron.yml
    effective          Print dendron.yml merged with local overrides

  Usage Metadata:
    meta               Show or edit the usage metadata
    lookup             Record a note lookup
    survey             Record the answer to the inactive user survey

For detailed help on any command: kb-lifecycle <command> --help
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: from settings, INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit logs as JSON lines on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Record an activation and list the notices that are due",
        epilog="""
Examples:
  # Activation check for a workspace
  kb-lifecycle check ~/notes

  # Pretend this build is 0.2.0
  kb-lifecycle check ~/notes --version 0.2.0
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    check_parser.add_argument("ws_root", type=Path, help="Workspace root (directory with dendron.yml)")
    check_parser.add_argument(
        "--version",
        type=str,
        help="Version of this activation (default: extension_version setting)",
    )
    check_parser.add_argument(
        "--install-status",
        choices=[s.value for s in InstallStatus],
        help="Use this install status instead of comparing versions",
    )

    # Backfill command
    backfill_parser = subparsers.add_parser(
        "backfill",
        help="Add missing default keys to dendron.yml",
    )
    backfill_parser.add_argument("ws_root", type=Path, help="Workspace root")
    backfill_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the keys that would be added without writing the file",
    )

    # Deprecated command
    deprecated_parser = subparsers.add_parser(
        "deprecated",
        help="List (or remove) deprecated keys in dendron.yml",
    )
    deprecated_parser.add_argument("ws_root", type=Path, help="Workspace root")
    deprecated_parser.add_argument(
        "--remove",
        action="store_true",
        help="Remove the deprecated keys from dendron.yml",
    )

    # Effective command
    effective_parser = subparsers.add_parser(
        "effective",
        help="Print dendron.yml merged with local overrides",
    )
    effective_parser.add_argument("ws_root", type=Path, help="Workspace root")

    # Meta command
    meta_parser = subparsers.add_parser("meta", help="Show or edit the usage metadata")
    meta_subparsers = meta_parser.add_subparsers(dest="meta_command", help="Metadata commands")
    meta_subparsers.add_parser("show", help="Show all metadata fields")
    meta_set_parser = meta_subparsers.add_parser("set", help="Set one metadata field")
    meta_set_parser.add_argument("field", help="Field name (camelCase or snake_case)")
    meta_set_parser.add_argument("value", help="Value (parsed as JSON when possible)")
    meta_unset_parser = meta_subparsers.add_parser("unset", help="Unset one metadata field")
    meta_unset_parser.add_argument("field", help="Field name (camelCase or snake_case)")

    # Lookup command
    subparsers.add_parser("lookup", help="Record a note lookup")

    # Survey command
    survey_parser = subparsers.add_parser(
        "survey",
        help="Record the answer to the inactive user survey",
    )
    survey_parser.add_argument(
        "status",
        choices=[s.value for s in InactiveUserMsgStatus],
        help="User's answer",
    )

    return parser


def run_command(args: argparse.Namespace, console: Console = None) -> int:
    """Dispatch parsed arguments to a command. Returns the exit code."""
    settings = get_config()
    console = console or Console()

    if args.command == "check":
        return CheckCommand(settings, console).run(args)
    elif args.command == "backfill":
        return ConfigCommand(settings, console).backfill(args)
    elif args.command == "deprecated":
        return ConfigCommand(settings, console).deprecated(args)
    elif args.command == "effective":
        return ConfigCommand(settings, console).effective(args)
    elif args.command == "meta":
        cmd = MetaCommand(settings, console)
        if args.meta_command == "set":
            return cmd.set_field(args)
        elif args.meta_command == "unset":
            return cmd.unset_field(args)
        return cmd.show(args)
    elif args.command == "lookup":
        return MetaCommand(settings, console).lookup(args)
    elif args.command == "survey":
        return MetaCommand(settings, console).survey(args)
    else:
        print("No command specified. Use --help for usage information.")
        return 1


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_config()
    except LifecycleError as e:
        Console(stderr=True).print(f"✗ {e}", style="red", markup=False, highlight=False)
        sys.exit(1)

    setup_logging(
        args.log_level or settings.log_level,
        use_json=settings.json_logs if args.json_logs is None else args.json_logs,
    )

    try:
        exit_code = run_command(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)
    except LifecycleError as e:
        Console(stderr=True).print(f"✗ {e}", style="red", markup=False, highlight=False)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
