"""
Parsing and formatting of milestone due dates.
"""

from __future__ import annotations

import datetime as dt
from typing import Final

from .exceptions import ArgumentError

DUE_DATE_FORMAT: Final[str] = "%m/%d/%Y"
# GitHub stores a full timestamp; all milestones are due at 08:00 UTC.
DUE_TIME: Final[dt.time] = dt.time(8, 0, tzinfo=dt.UTC)


def parse_due_date(text: str) -> dt.datetime:
    """Parse a ``M/D/YYYY`` date into the normalized due timestamp.

    Raises:
        ArgumentError: If the text is not a valid date in that format
    """
    try:
        date = dt.datetime.strptime(text.strip(), DUE_DATE_FORMAT).date()  # noqa: DTZ007
    except ValueError as e:
        msg = f"Malformed date '{text}'; please use M/D/YYYY format (e.g. 1/13/2019)"
        raise ArgumentError(msg) from e
    return normalize_due_date(date)


def normalize_due_date(date: dt.date) -> dt.datetime:
    """Return the due timestamp for a calendar date."""
    return dt.datetime.combine(date, DUE_TIME)


def format_due_date(due_on: dt.datetime | None) -> str:
    """Format a due date as e.g. ``Mon Jul  1 2019`` (day padded to two columns)."""
    if due_on is None:
        return "none"
    return f"{due_on:%a %b} {due_on.day:>2} {due_on.year}"


def format_timestamp(due_on: dt.datetime | None) -> str:
    """Format a due timestamp for change reports."""
    if due_on is None:
        return "none"
    return due_on.isoformat(sep=" ", timespec="seconds").replace("+00:00", "Z")
