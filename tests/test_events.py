from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from fixture_calendars.events import TO_BE_CONFIRMED, build_description, build_event
from fixture_calendars.models import UNRESOLVED, AllDay, Timed

KICKOFF = Timed(datetime(2025, 10, 18, 10, 0, tzinfo=ZoneInfo("Europe/Madrid")))


def test_build_event_fields() -> None:
    event = build_event(
        "C.D. EXAMPLE A",
        "C.D.  LAS FLORES SEVILLA MORADO",
        KICKOFF,
        venue="SPORTS HALL X",
        result="3-1",
    )

    assert event.summary == "C.D. EXAMPLE A vs C.D. LAS FLORES SEVILLA MORADO"
    assert event.location == "SPORTS HALL X"
    assert event.description == "Result: 3-1"
    assert event.time == KICKOFF


@pytest.mark.parametrize("venue", [None, "", "   ", "-"])
def test_missing_venue_is_to_be_confirmed(venue: str | None) -> None:
    event = build_event("A", "B", KICKOFF, venue=venue)
    assert event.location == TO_BE_CONFIRMED


@pytest.mark.parametrize("result", [None, "", "-", " - "])
def test_placeholder_result_is_omitted(result: str | None) -> None:
    event = build_event("A", "B", KICKOFF, venue="Hall", result=result)
    assert event.description == ""


def test_notes_are_appended() -> None:
    description = build_description("2-3", ["Aplazado", "-", "Acta pendiente"])
    assert description == "Result: 2-3 | Aplazado | Acta pendiente"


def test_event_is_immutable() -> None:
    event = build_event("A", "B", AllDay(date(2025, 11, 21), date(2025, 11, 23)))
    with pytest.raises(AttributeError):
        event.summary = "changed"  # type: ignore[misc]


def test_unresolved_time_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_event("A", "B", UNRESOLVED)
