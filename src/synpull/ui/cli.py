from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from synpull.app import create_site, get_site_status, pull_site, reset_site_status
from synpull.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_FATAL = 1
EXIT_USAGE = 2
EXIT_PULL_FAILED = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pull syndicated posts into the local store")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    pull = subparsers.add_parser("pull", help="Pull and reconcile the posts of a site")
    pull.add_argument(
        "--site-id",
        type=int,
        required=True,
        help="Id of the site to pull",
    )
    policy = pull.add_mutually_exclusive_group()
    policy.add_argument(
        "--best-effort",
        dest="fail_fast",
        action="store_false",
        default=None,
        help="Keep reconciling remaining posts when one fails",
    )
    policy.add_argument(
        "--fail-fast",
        dest="fail_fast",
        action="store_true",
        help="Stop at the first post that fails (defaults to config)",
    )

    site = subparsers.add_parser("site", help="Site management commands")
    site_sub = site.add_subparsers(dest="site_command", required=True)

    site_create = site_sub.add_parser("create", help="Create a site")
    site_create.add_argument(
        "--name",
        type=str,
        required=True,
        help="Display name for the site",
    )
    site_create.add_argument(
        "--transport",
        type=str,
        required=True,
        help="Transport type used to pull the site (e.g. rss)",
    )
    site_create.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra site option, repeatable (e.g. syn_feed_url=https://...)",
    )

    site_status = site_sub.add_parser("status", help="Show the stored status of a site")
    site_status.add_argument("--site-id", type=int, required=True)

    site_reset = site_sub.add_parser("reset", help="Force a site back to idle")
    site_reset.add_argument("--site-id", type=int, required=True)

    return parser.parse_args(list(argv))


def _parse_options(values: Sequence[str]) -> dict[str, str]:
    options: dict[str, str] = {}
    for raw in values:
        key, separator, value = raw.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"Invalid option (expected KEY=VALUE): {raw}")
        options[key.strip()] = value.strip()
    return options


def _validate_site_id(site_id: int) -> int:
    if site_id <= 0:
        raise ValueError(f"Site id must be positive, got {site_id}")
    return site_id


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    options: dict[str, str] = {}
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        if getattr(parsed_args, "site_id", None) is not None:
            _validate_site_id(parsed_args.site_id)
        if parsed_args.command == "site" and parsed_args.site_command == "create":
            options = _parse_options(parsed_args.option)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        if parsed_args.command == "pull":
            result = pull_site(parsed_args.site_id, fail_fast=parsed_args.fail_fast)
            if not result.ok:
                log.error("Pull for site %s failed: %s", parsed_args.site_id, result.failure)
                sys.exit(EXIT_PULL_FAILED)
        elif parsed_args.command == "site" and parsed_args.site_command == "create":
            site_id = create_site(
                name=parsed_args.name,
                transport_type=parsed_args.transport,
                options=options,
            )
            log.info("Created site %s", site_id)
        elif parsed_args.command == "site" and parsed_args.site_command == "status":
            status = get_site_status(parsed_args.site_id)
            if status is None:
                raise ValueError(f"Unknown site: {parsed_args.site_id}")  # noqa: TRY301
            log.info("Site %s status: %s", parsed_args.site_id, status or "idle (unset)")
        elif parsed_args.command == "site" and parsed_args.site_command == "reset":
            if not reset_site_status(parsed_args.site_id):
                raise ValueError(f"Unknown site: {parsed_args.site_id}")  # noqa: TRY301
            log.info("Site %s reset to idle", parsed_args.site_id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during pull")
        sys.exit(EXIT_FATAL)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
