"""Calendar date helpers used by the checklist engine."""
from datetime import date, datetime, timedelta
from typing import Union

from eventdesk.errors import InvalidDateError
from eventdesk.models.enums import DeadlineDirection

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO 8601 string to a calendar date.

    Time-of-day is discarded. Raises InvalidDateError for anything that
    does not describe a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def shift_date(
    base_date: DateLike,
    relative_days: int,
    direction: Union[DeadlineDirection, str],
) -> date:
    """
    Return the date `relative_days` whole days before ("antes") or after
    ("depois") `base_date`.

    Any direction other than "antes" counts as "depois".
    """
    if relative_days < 0:
        raise ValueError(f"relative_days must be non-negative, got {relative_days}")

    anchor = parse_date(base_date)
    shift = timedelta(days=relative_days)

    if direction == DeadlineDirection.ANTES:
        return anchor - shift
    return anchor + shift
