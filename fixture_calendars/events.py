from collections.abc import Iterable

from fixture_calendars.models import AllDay, Event, ResolvedTime, Timed

TO_BE_CONFIRMED = "To be confirmed"
PLACEHOLDERS = frozenset({"", "-"})


def as_listed(team_name: str) -> str:
    """Team label used in summaries: the listed name with whitespace collapsed."""
    return " ".join((team_name or "").split())


def _present(text: str | None) -> str | None:
    value = " ".join((text or "").split())
    return None if value in PLACEHOLDERS else value


def build_description(result: str | None, notes: Iterable[str] = ()) -> str:
    """Joins the result and any observations, skipping "-" placeholders."""
    parts = []
    shown_result = _present(result)
    if shown_result:
        parts.append(f"Result: {shown_result}")
    for note in notes:
        shown_note = _present(note)
        if shown_note:
            parts.append(shown_note)
    return " | ".join(parts)


def build_event(
    team_a: str,
    team_b: str,
    resolved_time: ResolvedTime,
    venue: str | None = None,
    result: str | None = None,
    notes: Iterable[str] = (),
) -> Event:
    """Builds the calendar entry for one match.

    Args:
        team_a: Label of the home side.
        team_b: Label of the away side.
        resolved_time: A Timed or AllDay outcome of the resolver.
        venue: Venue text; "To be confirmed" when missing.
        result: Result text; omitted when missing or "-".
        notes: Extra observations appended to the description.

    Returns:
        The immutable Event.

    Raises:
        ValueError: If resolved_time is UNRESOLVED. Callers drop those rows.
    """
    if not isinstance(resolved_time, (Timed, AllDay)):
        raise ValueError("Cannot build an event from an unresolved time")

    return Event(
        summary=f"{as_listed(team_a)} vs {as_listed(team_b)}",
        location=_present(venue) or TO_BE_CONFIRMED,
        description=build_description(result, notes),
        time=resolved_time,
    )
