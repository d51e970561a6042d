from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, TypedDict


@dataclass
class RawMatchRow:
    """A loosely-typed match listing row as handed over by the extraction step.

    Every field is raw text. ``raw_datetime`` and ``round_range_text`` may be
    empty; the resolver decides what to make of them.
    """

    team_a_raw: str
    team_b_raw: str
    raw_datetime: str = ""
    round_range_text: str = ""
    venue_raw: str = ""
    result_raw: str | None = None
    notes: tuple[str, ...] = ()


@dataclass
class FixtureRound:
    """A fixture round: the rows of one page/group sharing a round window."""

    competition: str  # File prefix, e.g. "federado" or "imd"
    category: str = ""  # e.g. "INFANTIL FEMENINO"
    round_range_text: str = ""
    rows: list[RawMatchRow] = field(default_factory=list)
    label: str = ""


@dataclass(frozen=True)
class CanonicalTeam:
    """Normalized team identity.

    Two teams are the same team when display name and slug agree. The
    category travels with the team but does not take part in identity, so a
    cross-entry listed on two category pages stays a single team.
    """

    display_name: str
    slug: str
    category: str = field(default="GENERAL", compare=False)
    is_club: bool = False


@dataclass(frozen=True)
class Timed:
    instant: datetime  # Aware, in the home zone


@dataclass(frozen=True)
class AllDay:
    start_date: date
    end_date: date  # Inclusive


class _Unresolved:
    """Marker for rows whose date could not be resolved."""

    _instance: "_Unresolved | None" = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()

ResolvedTime = Timed | AllDay | _Unresolved


@dataclass(frozen=True)
class Event:
    summary: str
    location: str
    description: str
    time: Timed | AllDay

    @property
    def is_all_day(self) -> bool:
        return isinstance(self.time, AllDay)

    def sort_key(self) -> tuple[int, Any, Any]:
        """All-day entries first, then chronological within each kind."""
        if isinstance(self.time, AllDay):
            return (0, self.time.start_date, self.time.end_date)
        return (1, self.time.instant, None)


@dataclass
class TeamCalendar:
    team: CanonicalTeam
    competition: str
    events: list[Event] = field(default_factory=list)

    @property
    def category(self) -> str:
        return self.team.category

    def sort(self) -> None:
        # list.sort is stable: equal keys keep arrival order
        self.events.sort(key=Event.sort_key)


class CalendarIndexEntry(TypedDict):
    """Dictionary representation of one written calendar in index.json."""

    team: str
    slug: str
    category: str
    competition: str
    file: str
    events: int


@dataclass
class RunReport:
    """Counters collected over one pipeline run."""

    rows_seen: int = 0
    rows_relevant: int = 0
    rows_dropped: int = 0
    events_built: int = 0
    files_written: int = 0
    files_failed: int = 0
    empty_calendars: int = 0
    sources_skipped: int = 0
    written_paths: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.files_failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows_seen": self.rows_seen,
            "rows_relevant": self.rows_relevant,
            "rows_dropped": self.rows_dropped,
            "events_built": self.events_built,
            "files_written": self.files_written,
            "files_failed": self.files_failed,
            "empty_calendars": self.empty_calendars,
            "sources_skipped": self.sources_skipped,
            "written_paths": list(self.written_paths),
            "failed_files": list(self.failed_files),
        }
