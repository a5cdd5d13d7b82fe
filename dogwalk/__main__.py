"""CLI entry point for dogwalk."""

import argparse
import asyncio
import json
import logging
import sys
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from .config import Config, load_config
from .logs import BathroomActivity, WalkLog, WalkQuality
from .storage import SQLiteSettingsStore
from .sync import WalkLogRemote, WalkLogService

QUALITY_CHOICES = [quality.value for quality in WalkQuality]
BATHROOM_CHOICES = [activity.value for activity in BathroomActivity]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            log_data["message"] = str(log_data["message"])
            if "exception" in log_data:
                log_data["exception"] = str(log_data["exception"])
            return json.dumps(log_data)


def setup_logging(verbose: bool = False, log_level: str | None = None, json_output: bool = False) -> None:
    """Configure logging.

    Args:
        verbose: Enable debug logging (ignored if log_level is set).
        log_level: Explicit log level (warning, info, debug).
        json_output: Output logs as JSON lines for machine parsing.
    """
    if log_level:
        level_map = {
            "warning": logging.WARNING,
            "info": logging.INFO,
            "debug": logging.DEBUG,
        }
        level = level_map.get(log_level, logging.WARNING)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


@asynccontextmanager
async def open_service(config: Config) -> AsyncIterator[WalkLogService]:
    """Build the sync service and wait for its initial fetch.

    In-flight remote calls are awaited before the store is closed.
    """
    store = SQLiteSettingsStore(config.storage.db_path)
    store.connect()
    remote = WalkLogRemote(
        base_url=config.remote.url,
        api_key=config.remote.api_key,
        table=config.remote.table,
        timeout=config.remote.timeout,
    )
    service = WalkLogService(store, remote, default_user_name=config.user.default_name)
    try:
        await service.wait_idle()
        yield service
    finally:
        await service.close()
        store.close()


def _short_id(log: WalkLog) -> str:
    return (log.id or "--------")[:8]


def _lookup(service: WalkLogService, log_id: str) -> WalkLog | None:
    log = service.find(log_id)
    if log is None:
        print(f"No unique walk log matches '{log_id}'", file=sys.stderr)
    return log


async def cmd_log(args: argparse.Namespace) -> int:
    """Record a new walk."""
    async with open_service(load_config(args.config)) as service:
        log = WalkLog.create(
            quality=WalkQuality(args.quality),
            bathroom=BathroomActivity(args.bathroom),
            notes=args.notes,
            user_name=args.user or service.get_user_name(),
        )
        service.add(log)
        print(f"Logged {log.quality.label} ({log.bathroom.label}) [{_short_id(log)}]")
    return 0


async def cmd_history(args: argparse.Namespace) -> int:
    """List logged walks, newest first."""
    async with open_service(load_config(args.config)) as service:
        quality = WalkQuality(args.quality) if args.quality else None
        logs = service.filtered(quality)

        if args.json:
            print(json.dumps([log.to_dict() for log in logs], indent=2))
            return 0

        if not service.entries:
            print("No walks logged yet")
            return 0

        print(service.stats().summary())
        if not logs:
            print("No walks match your filter")
            return 0

        for log in logs:
            print()
            print(f"[{_short_id(log)}]")
            print(log.summary())
    return 0


async def cmd_stats(args: argparse.Namespace) -> int:
    """Show walk counts by quality."""
    async with open_service(load_config(args.config)) as service:
        stats = service.stats()
        if args.json:
            print(json.dumps(stats.to_dict(), indent=2))
        else:
            print(stats.summary())
    return 0


async def cmd_edit(args: argparse.Namespace) -> int:
    """Change the ratings or notes of a walk."""
    async with open_service(load_config(args.config)) as service:
        log = _lookup(service, args.id)
        if log is None:
            return 1

        changes = {}
        if args.quality:
            changes["quality"] = WalkQuality(args.quality)
        if args.bathroom:
            changes["bathroom"] = BathroomActivity(args.bathroom)
        if args.notes is not None:
            changes["notes"] = args.notes

        if not changes:
            print("Nothing to change", file=sys.stderr)
            return 1

        service.update(log.with_changes(**changes))
        print(f"Updated [{_short_id(log)}]")
    return 0


async def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a walk."""
    async with open_service(load_config(args.config)) as service:
        log = _lookup(service, args.id)
        if log is None:
            return 1

        service.delete(log)
        print(f"Deleted [{_short_id(log)}]")
    return 0


async def cmd_sync(args: argparse.Namespace) -> int:
    """Refresh local logs from the remote table."""
    async with open_service(load_config(args.config)) as service:
        task = service.fetch(force=True)
        result = await task if task is not None else None

        if result is None or not result.ok:
            error = result.error if result else "no event loop"
            print(f"Sync failed: {error}", file=sys.stderr)
            print(f"Keeping {len(service.entries)} local walk logs")
            return 1

        print(f"Synced {len(service.entries)} walk logs")
    return 0


async def cmd_settings(args: argparse.Namespace) -> int:
    """Show or change the display name."""
    async with open_service(load_config(args.config)) as service:
        if args.name is not None:
            name = args.name.strip()
            if not name:
                print("Name cannot be empty", file=sys.stderr)
                return 1
            service.save_settings(name)
        print(f"Name: {service.get_user_name()}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="dogwalk",
        description="Log dog walks locally and sync them to a REST backend",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: built-in defaults)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["warning", "info", "debug"],
        default=None,
        help="Set log level explicitly (overrides -v/--verbose)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON for machine parsing",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # log
    log_parser = subparsers.add_parser("log", help="Record a walk")
    log_parser.add_argument(
        "-q", "--quality",
        choices=QUALITY_CHOICES,
        required=True,
        help="How the walk went",
    )
    log_parser.add_argument(
        "-b", "--bathroom",
        choices=BATHROOM_CHOICES,
        required=True,
        help="Bathroom activity",
    )
    log_parser.add_argument("-n", "--notes", default=None, help="Optional notes")
    log_parser.add_argument(
        "--user",
        default=None,
        help="Author name (default: saved setting)",
    )
    log_parser.set_defaults(func=cmd_log)

    # history
    history_parser = subparsers.add_parser("history", help="List walks")
    history_parser.add_argument(
        "-q", "--quality",
        choices=QUALITY_CHOICES,
        default=None,
        help="Only show walks of this quality",
    )
    history_parser.add_argument("--json", action="store_true", help="Output as JSON")
    history_parser.set_defaults(func=cmd_history)

    # stats
    stats_parser = subparsers.add_parser("stats", help="Show walk counts")
    stats_parser.add_argument("--json", action="store_true", help="Output as JSON")
    stats_parser.set_defaults(func=cmd_stats)

    # edit
    edit_parser = subparsers.add_parser("edit", help="Edit a walk")
    edit_parser.add_argument("id", help="Walk id or unique prefix")
    edit_parser.add_argument("-q", "--quality", choices=QUALITY_CHOICES, default=None)
    edit_parser.add_argument("-b", "--bathroom", choices=BATHROOM_CHOICES, default=None)
    edit_parser.add_argument(
        "-n", "--notes",
        default=None,
        help="New notes (empty string clears them)",
    )
    edit_parser.set_defaults(func=cmd_edit)

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete a walk")
    delete_parser.add_argument("id", help="Walk id or unique prefix")
    delete_parser.set_defaults(func=cmd_delete)

    # sync
    sync_parser = subparsers.add_parser("sync", help="Refresh walks from the remote")
    sync_parser.set_defaults(func=cmd_sync)

    # settings
    settings_parser = subparsers.add_parser("settings", help="Show or set your name")
    settings_parser.add_argument("--name", default=None, help="New display name")
    settings_parser.set_defaults(func=cmd_settings)

    args = parser.parse_args()

    setup_logging(args.verbose, args.log_level, args.json_logs)

    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
