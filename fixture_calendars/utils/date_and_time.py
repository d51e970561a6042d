import re
import zoneinfo
from datetime import date, datetime

import structlog

from fixture_calendars.models import UNRESOLVED, AllDay, ResolvedTime, Timed

logger = structlog.get_logger(__name__)

DEFAULT_HOME_ZONE = "Europe/Madrid"

# Ordered: the first pattern that yields valid calendar values wins.
# Anything around the match (weekday prefix, "GMT+1" suffix) is ignored.
_DMY_TIME = re.compile(
    r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})(?!\d)\D{1,8}?(\d{1,2}):(\d{2})(?!\d)"
)
_ISO_TIME = re.compile(
    r"(?<!\d)(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2}))?"
)
_DMY = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})(?!\d)")
_ISO = re.compile(r"(?<!\d)(\d{4})-(\d{2})-(\d{2})(?!\d)")

# Separators seen between the two boundary dates of a round header.
_RANGE_SEPARATOR = r"\s*(?:&nbsp;|&mdash;|&ndash;|–|—|-|\bal\b|\bto\b)?\s*"
_ROUND_RANGE = re.compile(
    r"(\d{1,2}/\d{1,2}/(?:\d{4}|\d{2}))(?!\d)"
    + _RANGE_SEPARATOR
    + r"(\d{1,2}/\d{1,2}/(?:\d{4}|\d{2}))(?!\d)"
)


def expand_two_digit_year(year: str) -> int:
    """Expands a 2-digit year: 70-99 map to the 1900s, the rest to the 2000s.

    Args:
        year: The year as written, 2 or 4 digits.

    Returns:
        The 4-digit year.
    """
    value = int(year)
    if len(year) > 2:
        return value
    return 1900 + value if value >= 70 else 2000 + value


def _dmy_to_date(day: str, month: str, year: str) -> date | None:
    try:
        return date(expand_two_digit_year(year), int(month), int(day))
    except ValueError:
        return None


def parse_date_time(text: str) -> tuple[date, tuple[int, int, int] | None] | None:
    """Parses the first accepted date (and time, if any) out of a raw string.

    Accepted, in order: ``dd/mm/yyyy HH:MM``, ``yyyy-mm-dd[T ]HH:MM[:SS]``,
    ``dd/mm/yyyy`` and ``yyyy-mm-dd``. Two-digit years are accepted in the
    day-first forms.

    Args:
        text: The raw date/time string.

    Returns:
        A tuple of (date, (hour, minute, second) or None), or None when no
        pattern yields a valid date.
    """
    if not text:
        return None

    m = _DMY_TIME.search(text)
    if m:
        day = _dmy_to_date(m.group(1), m.group(2), m.group(3))
        hour, minute = int(m.group(4)), int(m.group(5))
        if day and hour < 24 and minute < 60:
            return day, (hour, minute, 0)

    m = _ISO_TIME.search(text)
    if m:
        try:
            day = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
            hms = (int(m.group(4)), int(m.group(5)), int(m.group(6) or 0))
            if hms[0] < 24 and hms[1] < 60 and hms[2] < 60:
                return day, hms
        except ValueError:
            pass

    m = _DMY.search(text)
    if m:
        day = _dmy_to_date(m.group(1), m.group(2), m.group(3))
        if day:
            return day, None

    m = _ISO.search(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3))), None
        except ValueError:
            pass

    return None


def parse_round_range(text: str) -> tuple[date, date] | None:
    """Extracts the two boundary dates of a round ("jornada") header.

    Example: "(21/11/25 – 23/11/25)" -> (2025-11-21, 2025-11-23)

    A header with a single date is a zero-span round. A range whose end
    precedes its start is rejected.

    Args:
        text: The round header text.

    Returns:
        (start, end) inclusive, or None if no usable range is found.
    """
    if not text:
        return None

    m = _ROUND_RANGE.search(text)
    if m:
        start_m = _DMY.search(m.group(1))
        end_m = _DMY.search(m.group(2))
        start = _dmy_to_date(*start_m.groups()) if start_m else None
        end = _dmy_to_date(*end_m.groups()) if end_m else None
    else:
        single = _DMY.search(text)
        if not single:
            return None
        start = end = _dmy_to_date(*single.groups())

    if start is None or end is None:
        return None
    if end < start:
        logger.debug("round_range_inverted", text=text)
        return None
    return start, end


class DateTimeResolver:
    """Turns raw listing date text into a Timed, AllDay or UNRESOLVED outcome.

    Wall-clock values are interpreted in a fixed named zone, never the host
    zone, and the zone's rule at the event's own date applies.
    """

    def __init__(self, home_zone: str = DEFAULT_HOME_ZONE) -> None:
        self.home_zone = home_zone
        self.tz = zoneinfo.ZoneInfo(home_zone)

    def localize(self, day: date, hms: tuple[int, int, int]) -> datetime:
        return datetime(day.year, day.month, day.day, *hms, tzinfo=self.tz)

    def resolve(self, raw_datetime: str, round_range_text: str = "") -> ResolvedTime:
        """Resolves a row's temporal information.

        Precedence: exact date+time, then the round window, then a bare date
        as a single all-day entry.

        Args:
            raw_datetime: Raw date/time text of the row (may be empty).
            round_range_text: Round window text shared by the round (may be empty).

        Returns:
            Timed, AllDay or UNRESOLVED. Never raises.
        """
        parsed = parse_date_time(raw_datetime)
        if parsed and parsed[1] is not None:
            return Timed(self.localize(parsed[0], parsed[1]))

        round_range = parse_round_range(round_range_text)
        if round_range:
            return AllDay(*round_range)

        if parsed:
            return AllDay(parsed[0], parsed[0])

        return UNRESOLVED
