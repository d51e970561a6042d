from abc import ABC, abstractmethod
from collections.abc import Iterator

from fixture_calendars.models import FixtureRound


class BaseSource(ABC):
    """Abstract base class for fixture sources.

    A source hands over the output of the retrieval/extraction step: rounds
    of loosely-typed match rows, each round carrying its competition prefix,
    category and shared round window.
    """

    @abstractmethod
    def fetch_rounds(self) -> Iterator[FixtureRound]:
        """Yields the fixture rounds of this source.

        Returns:
            An iterator of FixtureRound objects, in a deterministic order.
        """
        pass
