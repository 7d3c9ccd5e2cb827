"""Report window resolution: --date / --since / --until in an IANA time zone."""

from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from intern_daily.analysis.models import TimeWindow

DEFAULT_TZ = "Australia/Sydney"


class TimeWindowError(ValueError):
    """Raised for unparseable dates, unknown zones, or an inverted range."""


def _zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimeWindowError(f"Unknown time zone: {tz}") from e


def _parse_iso(value: str, zone: ZoneInfo) -> datetime:
    """Parse ISO-8601; naive values are taken as local to zone, aware ones converted to it."""
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        try:
            dt = datetime.combine(date.fromisoformat(value), time.min)
        except ValueError as e:
            raise TimeWindowError(f"Cannot parse time: {value}") from e
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def _start_of_day(day: date, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone)


def _end_of_day(day: date, zone: ZoneInfo) -> datetime:
    return datetime.combine(day, time(23, 59, 59), tzinfo=zone)


def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat()


def resolve_time_window(
    date_str: str | None = None,
    since: str | None = None,
    until: str | None = None,
    tz: str | None = None,
    now: datetime | None = None,
) -> TimeWindow:
    """
    Resolve the report window.

    since/until take precedence over date_str; a missing bound defaults to the
    start or end of today in tz. The date label is the since date.
    """
    tz = tz or DEFAULT_TZ
    zone = _zone(tz)
    current = (now or datetime.now(tz=zone)).astimezone(zone)

    if since or until:
        since_dt = _parse_iso(since, zone) if since else _start_of_day(current.date(), zone)
        until_dt = _parse_iso(until, zone) if until else _end_of_day(current.date(), zone)
        if until_dt < since_dt:
            raise TimeWindowError("Invalid range: until is earlier than since")
        return TimeWindow(
            since=_iso(since_dt),
            until=_iso(until_dt),
            date_label=since_dt.date().isoformat(),
            tz=tz,
        )

    if date_str:
        try:
            day = date.fromisoformat(date_str)
        except ValueError as e:
            raise TimeWindowError(f"Cannot parse date: {date_str}") from e
    else:
        day = current.date()

    return TimeWindow(
        since=_iso(_start_of_day(day, zone)),
        until=_iso(_end_of_day(day, zone)),
        date_label=day.isoformat(),
        tz=tz,
    )
