import json
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from .exceptions import SerializationIOFailure
from .ics import DEFAULT_PRODID, serialize_calendar
from .models import CalendarIndexEntry, RunReport, TeamCalendar
from .teams import slugify

logger = structlog.get_logger(__name__)


class CalendarStore:
    """Writes one .ics file per team calendar into an output directory.

    Files are named ``{competition}_{category-slug}_{team-slug}.ics`` and are
    overwritten on every run. A failed write only affects that team's file.
    An ``index.json`` manifest lists what was written.
    """

    def __init__(
        self,
        output_dir: str,
        tz_name: str,
        prodids: dict[str, str] | None = None,
        warn_on_empty: bool = True,
    ):
        """Initializes the CalendarStore.

        Args:
            output_dir: Directory receiving the calendar files.
            tz_name: Home zone name used in TZID references.
            prodids: Optional PRODID per competition prefix.
            warn_on_empty: Log calendars without events as warnings
                instead of debug messages.
        """
        self.output_dir = Path(output_dir)
        self.tz_name = tz_name
        self.prodids = prodids or {}
        self.warn_on_empty = warn_on_empty

    def filename_for(self, calendar: TeamCalendar) -> str:
        category = slugify(calendar.category, fallback="general")
        competition = slugify(calendar.competition, fallback="calendar")
        return f"{competition}_{category}_{calendar.team.slug}.ics"

    def prodid_for(self, competition: str) -> str:
        template = self.prodids.get(competition, DEFAULT_PRODID)
        return template.format(competition=competition.capitalize())

    def write(self, calendar: TeamCalendar) -> Path:
        """Serializes and writes a single calendar.

        Args:
            calendar: The calendar to write; events must already be sorted.

        Returns:
            The path written.

        Raises:
            SerializationIOFailure: If the file cannot be written.
        """
        path = self.output_dir / self.filename_for(calendar)
        document = serialize_calendar(
            calendar, self.tz_name, self.prodid_for(calendar.competition)
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(document)
        except OSError as e:
            raise SerializationIOFailure(
                f"Could not write calendar for {calendar.team.display_name}: {e}",
                path=str(path),
                team=calendar.team.display_name,
                error_data={"os_error": str(e)},
            ) from e

        logger.info("calendar_written", path=str(path), events=len(calendar.events))
        return path

    def write_all(
        self,
        calendars: Iterable[TeamCalendar],
        report: RunReport | None = None,
        workers: int = 1,
    ) -> RunReport:
        """Writes every non-empty calendar and records the outcome.

        A calendar whose file name is already taken by an earlier one in
        the same run is not written and counts as failed.

        Args:
            calendars: Calendars to write.
            report: Report to update; a new one is created if omitted.
            workers: Number of writer threads. Output is identical for any value.

        Returns:
            The updated report.
        """
        report = report or RunReport()
        to_write: list[TeamCalendar] = []
        claimed: dict[str, TeamCalendar] = {}
        for calendar in calendars:
            if not calendar.events:
                report.empty_calendars += 1
                log = logger.warning if self.warn_on_empty else logger.debug
                log(
                    "calendar_empty",
                    team=calendar.team.display_name,
                    competition=calendar.competition,
                )
                continue

            filename = self.filename_for(calendar)
            owner = claimed.get(filename)
            if owner is not None:
                # First calendar keeps the file; later ones would overwrite it
                report.files_failed += 1
                report.failed_files.append(filename)
                logger.error(
                    "calendar_filename_collision",
                    file=filename,
                    team=calendar.team.display_name,
                    kept=owner.team.display_name,
                )
                continue
            claimed[filename] = calendar
            to_write.append(calendar)

        def _attempt(calendar: TeamCalendar) -> Path | SerializationIOFailure:
            try:
                return self.write(calendar)
            except SerializationIOFailure as e:
                return e

        if workers > 1 and len(to_write) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(_attempt, to_write))
        else:
            outcomes = [_attempt(c) for c in to_write]

        written: list[tuple[TeamCalendar, Path]] = []
        for calendar, outcome in zip(to_write, outcomes, strict=True):
            if isinstance(outcome, SerializationIOFailure):
                report.files_failed += 1
                report.failed_files.append(self.filename_for(calendar))
                logger.error("calendar_write_failed", **outcome.to_dict())
                continue
            report.files_written += 1
            report.written_paths.append(str(outcome))
            written.append((calendar, outcome))

        if written:
            self.write_index(written)
        return report

    def write_index(self, written: list[tuple[TeamCalendar, Path]]) -> Path | None:
        """Writes index.json listing the calendars of this run.

        Entries are sorted by file name so the manifest is stable across runs.
        A failure here is logged and does not affect the calendars.
        """
        entries = [
            CalendarIndexEntry(
                team=calendar.team.display_name,
                slug=calendar.team.slug,
                category=calendar.category,
                competition=calendar.competition,
                file=path.name,
                events=len(calendar.events),
            )
            for calendar, path in written
        ]
        entries.sort(key=lambda e: e["file"])

        index_path = self.output_dir / "index.json"
        try:
            with open(index_path, "w", encoding="utf-8") as f:
                json.dump({"calendars": entries}, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            logger.error("index_write_failed", path=str(index_path), error=str(e))
            return None
        return index_path
