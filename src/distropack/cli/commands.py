"""
Handlers for the distropack-cli subcommands.

Each handler validates its arguments, performs the operation and prints
user-facing results. Errors propagate to ``main_cli``, which maps them to
exit codes.
"""

import argparse
import logging

from ..api.client import ApiClient
from ..config import describe_config, set_base_url, set_token
from ..models.build import BuildOutcome
from ..orchestration import BuildOrchestrator
from ..validation import (
    validate_build_target,
    validate_non_empty,
    validate_package_id,
    validate_positive_float,
)

logger = logging.getLogger(__name__)


async def upload_command(args: argparse.Namespace) -> None:
    """Upload a file to a package slot."""
    package_id = validate_package_id(args.package_id, field_name="--package-id")
    ref_id = validate_non_empty(args.ref_id, field_name="--ref-id")
    file_path = validate_non_empty(args.file, field_name="--file")

    async with ApiClient.from_config() as client:
        print(f"Uploading file {file_path} to package {package_id} (ref: {ref_id})...")
        await client.upload_file(package_id, ref_id, file_path)
    print("File uploaded successfully!")


async def build_command(args: argparse.Namespace) -> BuildOutcome:
    """Trigger a build and, unless --no-wait was given, follow it to completion."""
    package_id = validate_package_id(args.package_id, field_name="--package-id")
    version = validate_non_empty(args.version, field_name="--version")
    target = validate_build_target(args.target, field_name="--target")
    poll_interval = validate_positive_float(
        args.poll_interval, min_value=0.1, field_name="--poll-interval"
    )
    timeout = None
    if args.timeout is not None:
        timeout = validate_positive_float(args.timeout, min_value=0.0, field_name="--timeout")

    async with ApiClient.from_config() as client:
        orchestrator = BuildOrchestrator(client, poll_interval=poll_interval, timeout=timeout)
        outcome = await orchestrator.run(package_id, version, target, wait=not args.no_wait)

    logger.info(f"Build for package {package_id} done after {outcome.polls} poll(s)")
    return outcome


def config_set_token_command(args: argparse.Namespace) -> None:
    config_path = set_token(args.token)
    print("API token saved successfully!")
    logger.info(f"Token stored in {config_path}")


def config_set_base_url_command(args: argparse.Namespace) -> None:
    url = set_base_url(args.url)
    print(f"Base URL set to: {url}")


def config_show_command(args: argparse.Namespace) -> None:
    summary = describe_config()
    print("Configuration:")
    print(f"  Config file: {summary.config_path}")
    print(f"  Base URL: {summary.base_url} ({summary.base_url_source})")
    if summary.masked_token is not None:
        print(f"  API Token: {summary.masked_token} ({summary.token_source})")
    else:
        print("  API Token: Not set")
