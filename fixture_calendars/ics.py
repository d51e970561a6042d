"""RFC 5545 rendering of team calendars.

The output is a small subset: a VCALENDAR header and one VEVENT per match.
No DTSTAMP or generated UIDs are emitted; the same input renders the same
bytes.

Timed entries carry a TZID reference instead of a baked-in UTC offset, which
keeps the wall-clock time right on both sides of a DST change. All-day
entries use an exclusive DTEND, one day after the inclusive last day.
"""

from datetime import date, datetime, timedelta

from fixture_calendars.models import AllDay, Event, TeamCalendar

CRLF = "\r\n"
DEFAULT_PRODID = "-//Las Flores//Calendarios {competition}//ES"


def ics_escape(text: str) -> str:
    # Escape per RFC5545 for TEXT values
    text = text.replace("\\", "\\\\")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\n", "\\n")
    text = text.replace(";", r"\;")
    text = text.replace(",", r"\,")
    return text


def fold_ics_line(line: str) -> list[str]:
    """RFC5545 line folding at 75 octets.

    Splits on UTF-8 octet boundaries without cutting a multi-byte character;
    continuation lines start with a single space.
    """
    if len(line.encode("utf-8")) <= 75:
        return [line]

    out: list[str] = []
    current = ""
    for char in line:
        if len((current + char).encode("utf-8")) > 75:
            out.append(current)
            current = " "
        current += char
    out.append(current)
    return out


def format_date(day: date) -> str:
    return day.strftime("%Y%m%d")


def format_local_datetime(instant: datetime) -> str:
    # DTSTART;TZID=Europe/Madrid:YYYYMMDDTHHMMSS
    return instant.strftime("%Y%m%dT%H%M%S")


def exclusive_end(end_date: date) -> date:
    """Converts an inclusive last day into the exclusive DTEND value."""
    return end_date + timedelta(days=1)


def event_lines(event: Event, tz_name: str) -> list[str]:
    lines = [
        "BEGIN:VEVENT",
        f"SUMMARY:{ics_escape(event.summary)}",
        f"LOCATION:{ics_escape(event.location)}",
    ]
    if isinstance(event.time, AllDay):
        lines.append(f"DTSTART;VALUE=DATE:{format_date(event.time.start_date)}")
        lines.append(
            f"DTEND;VALUE=DATE:{format_date(exclusive_end(event.time.end_date))}"
        )
    else:
        # Wall clock in the event's own zone; the TZID tells clients the rule
        local = event.time.instant
        lines.append(f"DTSTART;TZID={tz_name}:{format_local_datetime(local)}")
    lines.append(f"DESCRIPTION:{ics_escape(event.description)}")
    lines.append("END:VEVENT")
    return lines


def calendar_header(prodid: str) -> list[str]:
    return [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"PRODID:{prodid}",
    ]


def serialize_calendar(
    calendar: TeamCalendar,
    tz_name: str,
    prodid: str | None = None,
) -> str:
    """Renders a team calendar as an RFC 5545 document.

    Args:
        calendar: The calendar, events already in their final order.
        tz_name: IANA name of the home zone used for TZID references.
        prodid: Product identifier; defaults to one naming the competition.

    Returns:
        The document text with CRLF line endings.
    """
    if prodid is None:
        prodid = DEFAULT_PRODID.format(competition=calendar.competition.capitalize())

    lines = calendar_header(prodid)
    for event in calendar.events:
        lines.extend(event_lines(event, tz_name))
    lines.append("END:VCALENDAR")

    folded: list[str] = []
    for ln in lines:
        folded.extend(fold_ics_line(ln))
    return CRLF.join(folded) + CRLF
