"""Relevance filtering for match rows.

Only rows where at least one side belongs to the club of interest become
calendar entries. The club is identified by a configurable needle matched
against a punctuation- and accent-insensitive form of each team name.
"""

import re

from fixture_calendars.models import RawMatchRow
from fixture_calendars.teams import fold

_SEPARATORS = re.compile(r"[^A-Z0-9]+")


def _comparable(text: str) -> str:
    return " ".join(_SEPARATORS.sub(" ", fold(text)).split())


class ClubFilter:
    """Decides which sides of a row involve the club of interest.

    Usage::

        club = ClubFilter("las flores")
        if club.involves(row):
            for raw_name in club.matching_sides(row):
                ...
    """

    def __init__(self, needle: str) -> None:
        self.needle = needle
        self._needle = _comparable(needle)

    def matches(self, team_name: str) -> bool:
        """Check if a single team name belongs to the club.

        Args:
            team_name: Raw or display team name.

        Returns:
            True if the needle is contained in the name. An empty needle
            matches nothing.
        """
        if not self._needle:
            return False
        return f" {self._needle} " in f" {_comparable(team_name)} "

    def matching_sides(self, row: RawMatchRow) -> list[str]:
        """Return the raw names of the sides that belong to the club.

        Both sides are returned, home first, when the club plays itself.
        """
        return [
            name for name in (row.team_a_raw, row.team_b_raw) if self.matches(name)
        ]

    def involves(self, row: RawMatchRow) -> bool:
        return bool(self.matching_sides(row))
