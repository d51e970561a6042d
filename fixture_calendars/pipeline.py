"""One full calendar generation run.

rows -> club filter -> team normalization -> date resolution -> events ->
per-team calendars -> .ics files. Every run rebuilds the whole output set.
"""

from collections.abc import Iterable

import structlog

from fixture_calendars.aggregator import TeamCalendarAggregator
from fixture_calendars.config import PipelineConfig
from fixture_calendars.event_filter import ClubFilter
from fixture_calendars.models import FixtureRound, RunReport, TeamCalendar
from fixture_calendars.sources.base_source import BaseSource
from fixture_calendars.storage import CalendarStore
from fixture_calendars.teams import TeamNormalizer
from fixture_calendars.utils.date_and_time import DateTimeResolver

logger = structlog.get_logger(__name__)


class CalendarPipeline:
    """Wires the lookup tables and stages of a run together.

    The vocabulary, resolver and store are built once from the config and
    shared by reference for the lifetime of the pipeline.
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.normalizer = TeamNormalizer(config.vocabulary)
        self.resolver = DateTimeResolver(config.home_zone)
        self.club_filter = ClubFilter(config.club_needle)
        self.store = CalendarStore(
            config.output_dir,
            config.home_zone,
            prodids=config.prodids,
            warn_on_empty=config.warn_on_empty,
        )

    def aggregate(self, rounds: Iterable[FixtureRound]) -> TeamCalendarAggregator:
        aggregator = TeamCalendarAggregator(
            self.normalizer, self.resolver, self.club_filter
        )
        for fixture_round in rounds:
            logger.debug(
                "round_processing",
                label=fixture_round.label,
                rows=len(fixture_round.rows),
            )
            aggregator.add_round(fixture_round)
        return aggregator

    def build_calendars(self, rounds: Iterable[FixtureRound]) -> list[TeamCalendar]:
        """Aggregates rounds into sorted team calendars without writing them."""
        return self.aggregate(rounds).calendars()

    def run(self, sources: Iterable[BaseSource]) -> RunReport:
        """Executes a full run.

        Args:
            sources: Fixture sources, consumed in order.

        Returns:
            The run report. ``report.ok`` is False when any file failed to write.
        """
        sources = list(sources)
        rounds = (r for source in sources for r in source.fetch_rounds())
        aggregator = self.aggregate(rounds)
        calendars = aggregator.calendars()

        report = RunReport(
            rows_seen=aggregator.rows_seen,
            rows_relevant=aggregator.rows_relevant,
            rows_dropped=aggregator.dropped,
            events_built=aggregator.events_built,
            sources_skipped=sum(len(getattr(s, "skipped", [])) for s in sources),
        )
        logger.info(
            "aggregation_done",
            teams=len(calendars),
            rows=report.rows_seen,
            relevant=report.rows_relevant,
            dropped=report.rows_dropped,
        )

        self.store.write_all(calendars, report, workers=self.config.workers)
        logger.info(
            "run_completed",
            written=report.files_written,
            failed=report.files_failed,
            empty=report.empty_calendars,
        )
        return report
