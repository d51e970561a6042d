import structlog

from fixture_calendars.event_filter import ClubFilter
from fixture_calendars.events import build_event
from fixture_calendars.exceptions import ParseFailure
from fixture_calendars.models import (
    UNRESOLVED,
    CanonicalTeam,
    FixtureRound,
    RawMatchRow,
    TeamCalendar,
)
from fixture_calendars.teams import TeamNormalizer
from fixture_calendars.utils.date_and_time import DateTimeResolver

logger = structlog.get_logger(__name__)


class TeamCalendarAggregator:
    """Routes match rows into one TeamCalendar per club team.

    Calendars are keyed by (competition, team slug) for the whole run, so a
    team listed on several group or category pages accumulates into a single
    calendar. Two spellings that slugify alike share a calendar too. The
    category of the first page a team is seen on is the one its file is
    named after.
    """

    def __init__(
        self,
        normalizer: TeamNormalizer,
        resolver: DateTimeResolver,
        club_filter: ClubFilter,
    ) -> None:
        self.normalizer = normalizer
        self.resolver = resolver
        self.club_filter = club_filter
        self._calendars: dict[tuple[str, str], TeamCalendar] = {}
        self.rows_seen = 0
        self.rows_relevant = 0
        self.dropped = 0
        self.events_built = 0
        self.failures: list[ParseFailure] = []

    def _calendar_for(self, competition: str, team: CanonicalTeam) -> TeamCalendar:
        key = (competition, team.slug)
        calendar = self._calendars.get(key)
        if calendar is None:
            calendar = TeamCalendar(team=team, competition=competition)
            self._calendars[key] = calendar
            logger.debug(
                "team_observed",
                team=team.display_name,
                category=team.category,
                competition=competition,
            )
        return calendar

    def add_row(self, fixture_round: FixtureRound, row: RawMatchRow) -> int:
        """Processes one row of a round.

        Args:
            fixture_round: The round the row belongs to (competition, category,
                shared round window).
            row: The raw match row.

        Returns:
            Number of events filed (0, 1, or 2 when the club plays itself).
        """
        self.rows_seen += 1
        sides = self.club_filter.matching_sides(row)
        if not sides:
            return 0
        self.rows_relevant += 1

        teams = [
            self.normalizer.normalize(name, fixture_round.category) for name in sides
        ]
        # A row listing the same team twice still files a single entry
        calendars = list(
            {
                id(c): c
                for c in (
                    self._calendar_for(fixture_round.competition, t) for t in teams
                )
            }.values()
        )

        round_range = row.round_range_text or fixture_round.round_range_text
        resolved = self.resolver.resolve(row.raw_datetime, round_range)
        if resolved is UNRESOLVED:
            failure = ParseFailure(
                "Row has no usable date",
                raw_datetime=row.raw_datetime,
                round_range_text=round_range,
                teams=(row.team_a_raw, row.team_b_raw),
                error_data={"round": fixture_round.label},
            )
            self.failures.append(failure)
            self.dropped += 1
            logger.warning("row_dropped", **failure.error_data)
            return 0

        # One entry per club side, filed under that side's own team
        for calendar in calendars:
            calendar.events.append(
                build_event(
                    row.team_a_raw,
                    row.team_b_raw,
                    resolved,
                    venue=row.venue_raw,
                    result=row.result_raw,
                    notes=row.notes,
                )
            )
            self.events_built += 1
        return len(calendars)

    def add_round(self, fixture_round: FixtureRound) -> None:
        for row in fixture_round.rows:
            self.add_row(fixture_round, row)

    def calendars(self) -> list[TeamCalendar]:
        """Returns every observed calendar with its events sorted.

        Calendars come back in first-observation order.
        """
        result = list(self._calendars.values())
        for calendar in result:
            calendar.sort()
        return result
