"""Command line entry point.

Usage:
    python -m pay_equity_engine serve [--host H] [--port P]
    python -m pay_equity_engine init-db
    python -m pay_equity_engine deadline 2025 [--as-of 2025-01-20]
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date

import uvicorn

from pay_equity_engine.analysis.deadlines import deadline_info, next_reminder
from pay_equity_engine.config import configure_logging, get_settings
from pay_equity_engine.database import create_schema, get_engine


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="pay-equity-engine",
        description="Pay equity compliance engine",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)
    serve.add_argument("--reload", action="store_true", default=settings.debug)

    subparsers.add_parser("init-db", help="Create all tables in DATABASE_URL")

    deadline = subparsers.add_parser(
        "deadline", help="Show the submission deadline position of a reporting year"
    )
    deadline.add_argument("report_year", type=int)
    deadline.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Evaluate as of this day (YYYY-MM-DD), default today",
    )
    return parser


async def _init_db() -> None:
    engine = get_engine()
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()


def _print_deadline(report_year: int, as_of: date | None) -> None:
    today = as_of or date.today()
    info = deadline_info(report_year, today, tz=get_settings().deadline_tz)
    reminder = next_reminder(report_year, today)
    print(f"Deadline:  {info.formatted_deadline}")
    print(f"Status:    {info.status.value}")
    if info.is_overdue:
        print(f"Overdue:   {info.days_overdue} days ({info.overdue_severity.value})")
    else:
        print(f"Remaining: {info.days_until_due} days")
    print(f"Reminder:  {reminder.value if reminder else '-'}")


def main(argv: list[str] | None = None) -> int:
    """Run a command and return the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.command == "serve":
        uvicorn.run(
            "pay_equity_engine.api.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=settings.log_level.lower(),
        )
    elif args.command == "init-db":
        configure_logging(settings)
        asyncio.run(_init_db())
        print("Schema created")
    elif args.command == "deadline":
        _print_deadline(args.report_year, args.as_of)
    return 0


if __name__ == "__main__":
    sys.exit(main())
