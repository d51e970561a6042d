from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from fixture_calendars.ics import (
    CRLF,
    exclusive_end,
    fold_ics_line,
    ics_escape,
    serialize_calendar,
)
from fixture_calendars.models import AllDay, CanonicalTeam, Event, TeamCalendar, Timed

MADRID = ZoneInfo("Europe/Madrid")
TEAM = CanonicalTeam("LAS FLORES MORADO", "las_flores_morado", "INFANTIL", True)


def _calendar(*events: Event) -> TeamCalendar:
    return TeamCalendar(team=TEAM, competition="federado", events=list(events))


def test_timed_event_document() -> None:
    event = Event(
        summary="C.D. EXAMPLE A vs C.D. LAS FLORES SEVILLA MORADO",
        location="SPORTS HALL X",
        description="",
        time=Timed(datetime(2025, 10, 18, 10, 0, tzinfo=MADRID)),
    )
    document = serialize_calendar(_calendar(event), "Europe/Madrid")

    assert document == CRLF.join(
        [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "PRODID:-//Las Flores//Calendarios Federado//ES",
            "BEGIN:VEVENT",
            "SUMMARY:C.D. EXAMPLE A vs C.D. LAS FLORES SEVILLA MORADO",
            "LOCATION:SPORTS HALL X",
            "DTSTART;TZID=Europe/Madrid:20251018T100000",
            "DESCRIPTION:",
            "END:VEVENT",
            "END:VCALENDAR",
            "",
        ]
    )


def test_all_day_event_has_exclusive_end() -> None:
    event = Event(
        summary="LAS FLORES ALBERO vs CV TOMARES",
        location="To be confirmed",
        description="",
        time=AllDay(date(2025, 11, 21), date(2025, 11, 23)),
    )
    lines = serialize_calendar(_calendar(event), "Europe/Madrid").split(CRLF)

    assert "DTSTART;VALUE=DATE:20251121" in lines
    assert "DTEND;VALUE=DATE:20251124" in lines
    assert not any(line.startswith("DTSTART;TZID") for line in lines)


def test_exclusive_end_round_trip() -> None:
    """Reading DTEND back and subtracting a day gives the last day of the round."""
    span = AllDay(date(2025, 12, 30), date(2025, 12, 31))
    event = Event("A vs B", "Hall", "", span)
    lines = serialize_calendar(_calendar(event), "Europe/Madrid").split(CRLF)

    dtend_line = next(ln for ln in lines if ln.startswith("DTEND;VALUE=DATE:"))
    dtend = datetime.strptime(dtend_line.split(":", 1)[1], "%Y%m%d").date()

    assert dtend == exclusive_end(span.end_date) == date(2026, 1, 1)
    assert dtend - timedelta(days=1) == span.end_date


def test_zero_day_round_spans_one_day() -> None:
    event = Event("A vs B", "Hall", "", AllDay(date(2025, 11, 22), date(2025, 11, 22)))
    document = serialize_calendar(_calendar(event), "Europe/Madrid")
    assert "DTSTART;VALUE=DATE:20251122\r\nDTEND;VALUE=DATE:20251123" in document


def test_no_volatile_properties() -> None:
    event = Event("A vs B", "Hall", "", AllDay(date(2025, 11, 22), date(2025, 11, 22)))
    document = serialize_calendar(_calendar(event), "Europe/Madrid")
    assert "DTSTAMP" not in document
    assert "UID" not in document


def test_empty_calendar_is_well_formed() -> None:
    document = serialize_calendar(_calendar(), "Europe/Madrid", prodid="-//X//Y//ES")
    assert document.startswith("BEGIN:VCALENDAR\r\n")
    assert document.endswith("PRODID:-//X//Y//ES\r\nEND:VCALENDAR\r\n")
    assert "BEGIN:VEVENT" not in document


def test_text_values_are_escaped() -> None:
    assert ics_escape("Pabellón, pista 2; norte") == r"Pabellón\, pista 2\; norte"
    assert ics_escape("a\\b") == "a\\\\b"
    assert ics_escape("line1\r\nline2\nline3") == r"line1\nline2\nline3"

    event = Event(
        "A vs B",
        "Hall",
        "Result: 3-1 | Acta; pendiente",
        Timed(datetime(2025, 10, 18, 10, 0, tzinfo=MADRID)),
    )
    document = serialize_calendar(_calendar(event), "Europe/Madrid")
    assert "DESCRIPTION:Result: 3-1 | Acta\\; pendiente\r\n" in document


def test_long_lines_are_folded_at_75_octets() -> None:
    line = "SUMMARY:" + "Ñ" * 60
    folded = fold_ics_line(line)

    assert len(folded) > 1
    assert all(len(part.encode("utf-8")) <= 75 for part in folded)
    assert all(part.startswith(" ") for part in folded[1:])
    assert "".join([folded[0]] + [part[1:] for part in folded[1:]]) == line


def test_short_line_is_not_folded() -> None:
    assert fold_ics_line("VERSION:2.0") == ["VERSION:2.0"]


def test_every_line_ends_with_crlf() -> None:
    event = Event(
        "X" * 200, "Hall", "", Timed(datetime(2025, 10, 18, 10, 0, tzinfo=MADRID))
    )
    document = serialize_calendar(_calendar(event), "Europe/Madrid")
    assert document.endswith(CRLF)
    assert "\n" not in document.replace(CRLF, "")


def test_winter_time_keeps_wall_clock() -> None:
    event = Event(
        "A vs B", "Hall", "", Timed(datetime(2025, 12, 13, 18, 30, tzinfo=MADRID))
    )
    document = serialize_calendar(_calendar(event), "Europe/Madrid")
    assert "DTSTART;TZID=Europe/Madrid:20251213T183000" in document
