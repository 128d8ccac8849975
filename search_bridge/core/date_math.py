"""
Date-math resolution.

Resolves Elasticsearch style expressions such as `now-1d/d` or
`2014-11-18||+1M` to epoch milliseconds, in a given time zone.
"""

import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

from dateutil import tz
from dateutil.parser import parse as dtparse
from dateutil.relativedelta import relativedelta

from search_bridge.errors import InvalidDateMath, UnknownTimeZone

EPOCH = datetime(1970, 1, 1, tzinfo=tz.UTC)

# Bare digit strings at least this long are epoch milliseconds rather than years.
_EPOCH_MILLIS_MIN_DIGITS = 9

_OFFSET_RE = re.compile(r"^([+-])(\d{1,2})(?::?(\d{2}))?$")

# Calendar units are applied on the wall clock, fixed units on the timeline.
_CALENDAR_UNITS = {
    "y": lambda n: relativedelta(years=n),
    "M": lambda n: relativedelta(months=n),
    "w": lambda n: relativedelta(weeks=n),
    "d": lambda n: relativedelta(days=n),
}
_FIXED_UNITS = {
    "h": lambda n: timedelta(hours=n),
    "H": lambda n: timedelta(hours=n),
    "m": lambda n: timedelta(minutes=n),
    "s": lambda n: timedelta(seconds=n),
}


def resolve_time_zone(name: Optional[str]):
    """
    Resolve a time zone identifier.

    Accepts `UTC`/`Z`, fixed offsets (`+05:00`, `-0800`, `+5`) and IANA names.

    Args:
        name: Time zone identifier; `None` or empty means UTC

    Returns:
        A tzinfo instance

    Raises:
        UnknownTimeZone: If the identifier cannot be resolved
    """
    if not name or name.upper() in ("UTC", "Z", "GMT"):
        return tz.UTC

    match = _OFFSET_RE.match(name.strip())
    if match:
        sign, hours, minutes = match.groups()
        seconds = int(hours) * 3600 + int(minutes or 0) * 60
        if sign == "-":
            seconds = -seconds
        return tz.tzoffset(name, seconds)

    zone = tz.gettz(name)
    if zone is None:
        raise UnknownTimeZone(name)
    return zone


def to_epoch_millis(value: datetime) -> int:
    """Convert an aware datetime (naive means UTC) to epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz.UTC)
    return (value - EPOCH) // timedelta(milliseconds=1)


class DateMathParser:
    """
    Parses date-math expressions against an anchor instant.

    An expression is either `now` or an absolute date, optionally followed
    (after `||` for absolute dates) by operations: `+N<unit>`, `-N<unit>`
    and `/<unit>` for rounding. Units: y, M, w, d, h, H, m, s.
    """

    def __init__(self, time_zone: Optional[str] = None):
        self.time_zone = time_zone
        self._zone = resolve_time_zone(time_zone)

    def parse(
        self,
        expression: str,
        now: datetime,
        round_up: bool = False,
        time_zone: Optional[str] = None,
    ) -> int:
        """
        Resolve an expression to epoch milliseconds.

        Args:
            expression: Date-math expression
            now: Instant that `now` refers to
            round_up: Round to the last millisecond of the unit instead of the first
            time_zone: Overrides the parser's time zone for this call

        Returns:
            Epoch milliseconds

        Raises:
            InvalidDateMath: If the expression cannot be parsed
        """
        zone = resolve_time_zone(time_zone) if time_zone else self._zone
        text = expression.strip()
        if not text:
            raise InvalidDateMath(expression, "empty expression")

        if text.startswith("now"):
            anchor = self._localize(now, zone)
            math = text[3:]
        else:
            date_part, _, math = text.partition("||")
            anchor = self._parse_date(expression, date_part.strip(), zone)

        return to_epoch_millis(self._apply(expression, anchor, math, round_up))

    @staticmethod
    def _localize(value: datetime, zone) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz.UTC)
        return value.astimezone(zone)

    @staticmethod
    def _parse_date(expression: str, text: str, zone) -> datetime:
        if text.isdigit() and len(text) >= _EPOCH_MILLIS_MIN_DIGITS:
            return (EPOCH + timedelta(milliseconds=int(text))).astimezone(zone)
        try:
            parsed = dtparse(text, default=datetime(1970, 1, 1))
        except (ValueError, OverflowError) as exc:
            raise InvalidDateMath(expression, str(exc)) from exc
        if parsed.tzinfo is None:
            return tz.resolve_imaginary(parsed.replace(tzinfo=zone))
        return parsed.astimezone(zone)

    def _apply(self, expression: str, anchor: datetime, math: str, round_up: bool) -> datetime:
        position = 0
        while position < len(math):
            operator = math[position]
            position += 1
            if operator not in "+-/":
                raise InvalidDateMath(expression, f"unexpected operator '{operator}'")

            amount, position = self._read_amount(math, position)
            if position >= len(math):
                raise InvalidDateMath(expression, "missing unit")
            unit = math[position]
            position += 1

            if operator == "/":
                if amount is not None:
                    raise InvalidDateMath(expression, "rounding does not take an amount")
                anchor = self._round(expression, anchor, unit, round_up)
            else:
                step = amount if amount is not None else 1
                if operator == "-":
                    step = -step
                anchor = self._add(expression, anchor, step, unit)
        return anchor

    @staticmethod
    def _read_amount(math: str, position: int) -> Tuple[Optional[int], int]:
        start = position
        while position < len(math) and math[position].isdigit():
            position += 1
        if position == start:
            return None, position
        return int(math[start:position]), position

    @staticmethod
    def _add(expression: str, anchor: datetime, amount: int, unit: str) -> datetime:
        if unit in _CALENDAR_UNITS:
            return tz.resolve_imaginary(anchor + _CALENDAR_UNITS[unit](amount))
        if unit in _FIXED_UNITS:
            zone = anchor.tzinfo
            shifted = anchor.astimezone(tz.UTC) + _FIXED_UNITS[unit](amount)
            return shifted.astimezone(zone)
        raise InvalidDateMath(expression, f"unknown unit '{unit}'")

    def _round(self, expression: str, anchor: datetime, unit: str, round_up: bool) -> datetime:
        if unit == "y":
            floor = anchor.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        elif unit == "M":
            floor = anchor.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        elif unit == "w":
            day = anchor - timedelta(days=anchor.weekday())
            floor = day.replace(hour=0, minute=0, second=0, microsecond=0)
        elif unit == "d":
            floor = anchor.replace(hour=0, minute=0, second=0, microsecond=0)
        elif unit in ("h", "H"):
            floor = anchor.replace(minute=0, second=0, microsecond=0)
        elif unit == "m":
            floor = anchor.replace(second=0, microsecond=0)
        elif unit == "s":
            floor = anchor.replace(microsecond=0)
        else:
            raise InvalidDateMath(expression, f"unknown unit '{unit}'")

        floor = tz.resolve_imaginary(floor)
        if not round_up:
            return floor
        ceiling = self._add(expression, floor, 1, unit)
        return ceiling.astimezone(tz.UTC) - timedelta(milliseconds=1)
