#!/usr/bin/env python3
"""CLI Entrypoint - コマンドラインから実行

使い方:
    python -m lawcal.entrypoints.cli agenda --view week --date 2026-01-10
    python -m lawcal.entrypoints.cli create --title "Deposition prep" --case 3
    python -m lawcal.entrypoints.cli update 12 --status confirmed
    python -m lawcal.entrypoints.cli delete 12
    python -m lawcal.entrypoints.cli remind 12
    python -m lawcal.entrypoints.cli cases

環境変数:
    LAWCAL_API_URL: APIのベースURL（必須）
    LAWCAL_TOKEN / LAWCAL_SESSION_FILE: Bearerトークンの取得元
    LOG_LEVEL / LOG_FORMAT: ログ設定
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from datetime import date, datetime, time

from lawcal.domain.errors import LawCalError
from lawcal.domain.models import Event, EventFilters, EventStatus, EventType, Priority, ViewMode
from lawcal.entrypoints.factory import create_session
from lawcal.logging_config import setup_logging
from lawcal.services.calendar_session import CalendarSession
from lawcal.services.event_form import EventForm
from lawcal.services.view_model import (
    display_location,
    event_type_style,
    format_clock,
    format_event_time,
)

logger = logging.getLogger(__name__)

# CLIオプション名 → 下書きのフィールド名
_FIELD_OPTIONS = {
    "title": "title",
    "case": "case_id",
    "description": "description",
    "type": "event_type",
    "status": "status",
    "priority": "priority",
    "start": "start_time",
    "end": "end_time",
    "all_day": "all_day",
    "location": "location",
    "meeting_link": "meeting_link",
    "address": "address",
    "assigned_to": "assigned_to_user_id",
    "invite_client": "client_invited",
    "reminder_minutes": "reminder_minutes_before",
    "recurrence": "recurrence_pattern",
}


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (YYYY-MM-DD): {value}")


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid datetime (YYYY-MM-DDTHH:MM): {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lawcal", description="Attorney calendar and event scheduling"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    agenda = sub.add_parser("agenda", help="Show events for a day, week or month")
    agenda.add_argument(
        "--view", choices=[m.value for m in ViewMode], default=ViewMode.MONTH.value
    )
    agenda.add_argument("--date", type=_parse_date, default=None, help="YYYY-MM-DD")
    agenda.add_argument("--status", choices=[s.value for s in EventStatus], default="")
    agenda.add_argument("--type", choices=[t.value for t in EventType], default="")
    agenda.add_argument("--assigned-to", default="", help="User ID")
    agenda.add_argument("--case", default="", help="Case ID")
    agenda.add_argument("--search", default="")
    agenda.add_argument("--upcoming", type=int, default=5, help="Upcoming list size")

    create = sub.add_parser("create", help="Create an event")
    create.add_argument("--title", default="")
    create.add_argument("--case", type=int, default=0, help="Case ID")
    _add_event_options(create)

    update = sub.add_parser("update", help="Update an event")
    update.add_argument("event_id", type=int)
    update.add_argument("--title", default=None)
    _add_event_options(update)

    delete = sub.add_parser("delete", help="Delete an event")
    delete.add_argument("event_id", type=int)

    remind = sub.add_parser("remind", help="Send a reminder for an event")
    remind.add_argument("event_id", type=int)

    sub.add_parser("cases", help="List cases")
    return parser


def _add_event_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", default=None)
    parser.add_argument("--type", choices=[t.value for t in EventType], default=None)
    parser.add_argument("--status", choices=[s.value for s in EventStatus], default=None)
    parser.add_argument("--priority", choices=[p.value for p in Priority], default=None)
    parser.add_argument("--start", type=_parse_datetime, default=None)
    parser.add_argument("--end", type=_parse_datetime, default=None)
    parser.add_argument("--all-day", action="store_true", default=None)
    parser.add_argument("--location", default=None)
    parser.add_argument("--meeting-link", default=None)
    parser.add_argument("--address", default=None)
    parser.add_argument("--assigned-to", type=int, default=None, help="User ID")
    parser.add_argument("--invite-client", action="store_true", default=None)
    parser.add_argument("--reminder-minutes", type=int, default=None)
    parser.add_argument("--recurrence", default=None, help="Recurrence pattern")


def _apply_options(form: EventForm, args: argparse.Namespace) -> None:
    """指定されたオプションだけを下書きに反映する"""
    for option, field_name in _FIELD_OPTIONS.items():
        value = getattr(args, option, None)
        if value is None:
            continue
        if field_name == "event_type":
            value = EventType(value)
        elif field_name == "status":
            value = EventStatus(value)
        elif field_name == "priority":
            value = Priority(value)
        form.set_field(field_name, value)
    if getattr(args, "recurrence", None):
        form.set_field("is_recurring", True)


def _format_line(event: Event) -> str:
    style = event_type_style(event.event_type)
    parts = [
        f"#{event.id}",
        format_event_time(event.start_time, event.end_time, event.all_day),
        f"[{style.label}]",
        event.title,
        f"({event.status.value}, {event.priority.value})",
    ]
    if event.case_number:
        parts.append(f"Case: {event.case_number} - {event.case_title or ''}".rstrip(" -"))
    location = display_location(event)
    if location:
        parts.append(f"@ {location}")
    if event.assigned_to_name:
        parts.append(f"Assigned to: {event.assigned_to_name}")
    return " ".join(parts)


def _long_date(day: date, weekday: bool = False) -> str:
    """例: "January 10, 2026" / "Saturday, January 10, 2026" """
    text = f"{day:%B} {day.day}, {day.year}"
    return f"{day:%A}, {text}" if weekday else text


def _print_agenda(session: CalendarSession, upcoming_limit: int) -> None:
    day = session.selected_date
    if session.view_mode == ViewMode.DAY:
        print(_long_date(day, weekday=True))
        for hour, events in session.day_slots().items():
            label = format_clock(datetime.combine(day, time(hour)))
            print(f"  {label:>8}  " + ("; ".join(_format_line(e) for e in events) or "-"))
    elif session.view_mode == ViewMode.WEEK:
        cells = session.week_grid()
        first, last = cells[0].day, cells[-1].day
        print(f"{first:%b} {first.day} - {last:%b} {last.day}, {last.year}")
        for cell in cells:
            print(f"  {cell.day:%a} {cell.day.day}")
            for event in cell.events:
                print(f"    {_format_line(event)}")
            if cell.overflow:
                print(f"    +{cell.overflow} more")
    else:
        print(f"Events for {_long_date(day)}")
        todays = session.todays_events()
        if not todays:
            print("  No events scheduled for this date")
        for event in todays:
            print(f"  {_format_line(event)}")

    stats = session.stats()
    print(
        f"Total: {stats.total}  Court Events: {stats.court_events}  "
        f"Deadlines: {stats.deadlines}  Meetings: {stats.meetings}  "
        f"Consultations: {stats.consultations}"
    )
    print("Upcoming:")
    for event in session.upcoming_events(upcoming_limit):
        start = event.start_time
        when = f"{start:%b} {start.day}, {start.year} at {format_clock(start)}"
        print(f"  #{event.id} {event.title} - {when}")


def run(args: argparse.Namespace, session: CalendarSession) -> None:
    """サブコマンドを実行する"""
    if args.command == "agenda":
        session.selected_date = args.date or session.selected_date
        session.view_mode = ViewMode(args.view)
        session.filters = EventFilters(
            status=args.status,
            event_type=args.type,
            assigned_to=args.assigned_to,
            case_id=args.case,
            search=args.search,
        )
        session.refresh()
        _print_agenda(session, args.upcoming)

    elif args.command == "create":
        form = EventForm(session)
        form.open_create(args.start or session.now())
        _apply_options(form, args)
        created = form.submit()
        print(f"Event created successfully: {_format_line(created)}")

    elif args.command == "update":
        form = EventForm(session)
        form.open_edit(session.store.get_event(args.event_id))
        _apply_options(form, args)
        updated = form.submit()
        print(f"Event updated successfully: {_format_line(updated)}")

    elif args.command == "delete":
        session.delete(args.event_id)
        print("Event deleted successfully")

    elif args.command == "remind":
        session.remind(args.event_id)
        print("Reminder sent successfully")

    elif args.command == "cases":
        for case in session.load_cases():
            client = f" ({case.client_name})" if case.client_name else ""
            print(f"{case.id}\t{case.label}{client}")


def main(
    argv: list[str] | None = None,
    session_factory: Callable[[], CalendarSession] = create_session,
) -> None:
    """メインエントリーポイント"""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        session = session_factory()
        run(args, session)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except LawCalError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
