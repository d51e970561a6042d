"""Shared pytest fixtures for fixture calendar tests."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

from fixture_calendars.aggregator import TeamCalendarAggregator
from fixture_calendars.config import PipelineConfig
from fixture_calendars.event_filter import ClubFilter
from fixture_calendars.teams import TeamNormalizer
from fixture_calendars.utils.date_and_time import DateTimeResolver


@pytest.fixture
def normalizer() -> TeamNormalizer:
    """Normalizer with the default club vocabulary."""
    return TeamNormalizer()


@pytest.fixture
def resolver() -> DateTimeResolver:
    """Resolver for the default home zone (Europe/Madrid)."""
    return DateTimeResolver()


@pytest.fixture
def aggregator(
    normalizer: TeamNormalizer, resolver: DateTimeResolver
) -> TeamCalendarAggregator:
    return TeamCalendarAggregator(normalizer, resolver, ClubFilter("las flores"))


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Provides an empty directory for fixture YAML files."""
    path = tmp_path / "fixtures"
    path.mkdir()
    return path


@pytest.fixture
def write_fixture(fixtures_dir: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Returns a helper that dumps a fixture listing into fixtures_dir."""

    def _write(name: str, data: dict[str, Any]) -> Path:
        path = fixtures_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, allow_unicode=True)
        return path

    return _write


@pytest.fixture
def pipeline_config(fixtures_dir: Path, tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(
        input_dir=str(fixtures_dir),
        output_dir=str(tmp_path / "calendarios"),
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Undoes the CLI's logging setup so later tests don't log to a closed stream."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    structlog.reset_defaults()
    for handler in [h for h in root.handlers if h not in before]:
        root.removeHandler(handler)
        handler.close()
