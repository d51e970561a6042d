import logging
import sys

import click
import structlog

from fixture_calendars.config import load_config
from fixture_calendars.exceptions import ConfigurationError
from fixture_calendars.pipeline import CalendarPipeline
from fixture_calendars.sources.manual_source import ManualSource
from fixture_calendars.utils.summary import summarize_run

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Routes structlog through stdlib logging to stdout and an optional file."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@click.command()
@click.option("--config", "config_path", help="YAML configuration file")
@click.option("--input-dir", help="Directory with fixture YAML files")
@click.option("--output-dir", help="Directory receiving the .ics files")
@click.option("--club", help="Club needle used to select rows (e.g. 'las flores')")
@click.option("--workers", type=int, help="Parallel calendar writers")
@click.option("--log-file", help="Also write the log to this file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(config_path, input_dir, output_dir, club, workers, log_file, verbose):
    """Generate one calendar per club team from fixture listings."""
    configure_logging(verbose, log_file)
    logger.info("calendar_generation_started")

    try:
        config = load_config(config_path).with_overrides(
            input_dir=input_dir,
            output_dir=output_dir,
            club_needle=club,
            workers=workers,
        )
    except ConfigurationError as e:
        logger.error("configuration_invalid", **e.to_dict())
        raise click.BadParameter(str(e)) from e

    pipeline = CalendarPipeline(config)
    report = pipeline.run([ManualSource(config.input_dir)])

    click.echo(
        summarize_run(report, config.input_dir, config.output_dir, config.club_needle)
    )
    if not report.ok:
        logger.error("calendar_generation_failed", failed=report.files_failed)
        sys.exit(1)
    logger.info("calendar_generation_completed")


if __name__ == "__main__":
    main()
