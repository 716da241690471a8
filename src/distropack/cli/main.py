"""
Command-line interface for the DistroPack build service client.

This module provides the main CLI entry point, handling command-line
arguments, logging setup and the translation of errors into process exit
codes.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..orchestration import DEFAULT_POLL_INTERVAL
from ..validation import (
    BUILD_TARGETS,
    DistroPackError,
    handle_cli_error,
)
from .commands import (
    build_command,
    config_set_base_url_command,
    config_set_token_command,
    config_show_command,
    upload_command,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the upload, build and config subcommands."""
    parser = argparse.ArgumentParser(
        prog="distropack-cli",
        description="DistroPack CLI - Automate Linux package builds from CI/CD pipelines",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)

    upload = subparsers.add_parser("upload", help="Upload a file to a package by reference ID")
    upload.add_argument("--package-id", required=True, help="Package ID")
    upload.add_argument("--ref-id", required=True, help="File reference ID (access name)")
    upload.add_argument("--file", required=True, help="Path to file to upload")
    upload.set_defaults(handler=upload_command)

    build = subparsers.add_parser("build", help="Trigger package build(s)")
    build.add_argument("--package-id", required=True, help="Package ID")
    build.add_argument("--version", required=True, help="Version string")
    build.add_argument(
        "--target",
        help=f"Target distribution ({', '.join(BUILD_TARGETS)}). Omit to build all enabled targets.",
    )
    build.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help=f"Seconds between status checks. Defaults to {DEFAULT_POLL_INTERVAL:g}.",
    )
    build.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds of polling. Waits indefinitely by default.",
    )
    build.add_argument(
        "--no-wait",
        action="store_true",
        help="Exit right after the build is triggered instead of polling job status.",
    )
    build.set_defaults(handler=build_command)

    config = subparsers.add_parser("config", help="Manage configuration")
    config_sub = config.add_subparsers(dest="config_command", metavar="<action>", required=True)

    set_token = config_sub.add_parser("set-token", help="Set API token")
    set_token.add_argument("token", help="API token value")
    set_token.set_defaults(handler=config_set_token_command)

    set_base_url = config_sub.add_parser("set-base-url", help="Set API base URL")
    set_base_url.add_argument("url", help="Base URL (e.g., https://distropack.dev)")
    set_base_url.set_defaults(handler=config_set_base_url_command)

    show = config_sub.add_parser("show", help="Show current configuration")
    show.set_defaults(handler=config_show_command)

    return parser


def _configure_verbosity(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger("distropack").setLevel(logging.DEBUG)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for distropack-cli.

    Parses arguments, runs the selected subcommand and exits with a
    non-zero status on failure: 1 for failed jobs and other errors, 130
    when interrupted.

    Raises:
        SystemExit: On any failure, and from argparse on usage errors.
    """
    args = build_parser().parse_args(argv)
    _configure_verbosity(args.verbose)

    try:
        result = args.handler(args)
        if asyncio.iscoroutine(result):
            asyncio.run(result)
    except DistroPackError as e:
        handle_cli_error(e, context=args.command, exit_code=EXIT_FAILURE, logger=logger)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        handle_cli_error(
            e,
            context=f"{args.command} (unexpected {type(e).__name__})",
            exit_code=EXIT_FAILURE,
            include_traceback=True,
            logger=logger,
        )


if __name__ == "__main__":
    main_cli()
