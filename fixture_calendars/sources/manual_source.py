import json
import os
from collections.abc import Iterator
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import structlog
import yaml

from fixture_calendars.exceptions import ValidationError
from fixture_calendars.models import FixtureRound, RawMatchRow
from fixture_calendars.sources.base_source import BaseSource

logger = structlog.get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schema.json"
FIXTURE_SUFFIXES = (".yaml", ".yml")
_TEXT_FIELDS = ("team_a", "team_b", "datetime", "range", "venue", "result")


@lru_cache(maxsize=1)
def load_schema() -> dict[str, Any]:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def _as_text(value: Any) -> Any:
    """YAML turns unquoted dates and numbers into objects; the rows are text."""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _coerce(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    for fixture_round in data.get("rounds") or []:
        if not isinstance(fixture_round, dict):
            continue
        if "range" in fixture_round:
            fixture_round["range"] = _as_text(fixture_round["range"])
        for match in fixture_round.get("matches") or []:
            if not isinstance(match, dict):
                continue
            for key in _TEXT_FIELDS:
                if key in match:
                    match[key] = _as_text(match[key])
            if isinstance(match.get("notes"), list):
                match["notes"] = [_as_text(n) for n in match["notes"]]
    for key in ("competition", "category", "label"):
        if key in data:
            data[key] = _as_text(data[key])
    return data


class ManualSource(BaseSource):
    """Source for fixture listings stored as YAML files.

    Each file holds the rows of one tournament page or group. Files are
    found recursively under ``base_dir`` and read in sorted path order so
    that runs are reproducible. A file failing schema validation is skipped.
    """

    def __init__(self, base_dir: str):
        """Initializes the ManualSource.

        Args:
            base_dir: Base directory to scan for fixture files.
        """
        self.base_dir = base_dir
        self.skipped: list[ValidationError] = []

    def fixture_paths(self) -> list[str]:
        paths: list[str] = []
        for root, _dirs, files in os.walk(self.base_dir):
            for name in files:
                if name.lower().endswith(FIXTURE_SUFFIXES):
                    paths.append(os.path.join(root, name))
        return sorted(paths)

    def fetch_rounds(self) -> Iterator[FixtureRound]:
        """Yields the rounds of every valid fixture file.

        Returns:
            An iterator of FixtureRound objects.
        """
        if not os.path.exists(self.base_dir):
            logger.warning("fixtures_dir_missing", path=self.base_dir)
            return

        paths = self.fixture_paths()
        logger.info("fixture_files_found", count=len(paths), path=self.base_dir)
        for path in paths:
            try:
                rounds = self.parse_file(path)
            except ValidationError as e:
                self.skipped.append(e)
                logger.error("fixture_file_rejected", **e.to_dict())
                continue
            yield from rounds

    def parse_file(self, path: str) -> list[FixtureRound]:
        """Parses and validates a single fixture file.

        Args:
            path: Path to the YAML file.

        Returns:
            The rounds described by the file (empty for an empty file).

        Raises:
            ValidationError: If the file is not valid YAML or violates the schema.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ValidationError(
                f"Could not read fixture file {path}: {e}", path=path
            ) from e

        if data is None:
            return []

        data = _coerce(data)
        try:
            jsonschema.validate(instance=data, schema=load_schema())
        except jsonschema.ValidationError as e:
            field = "/".join(str(p) for p in e.absolute_path) or None
            raise ValidationError(
                f"Fixture file {path} does not match the schema: {e.message}",
                path=path,
                field=field,
                expected=str(e.validator),
                received=e.instance,
            ) from e

        return self._build_rounds(data, path)

    def _build_rounds(self, data: dict[str, Any], path: str) -> list[FixtureRound]:
        competition = data["competition"]
        category = data.get("category") or ""
        label = data.get("label") or os.path.basename(path)

        rounds = []
        for index, round_data in enumerate(data["rounds"], start=1):
            rows = [
                RawMatchRow(
                    team_a_raw=m["team_a"],
                    team_b_raw=m["team_b"],
                    raw_datetime=m.get("datetime") or "",
                    round_range_text=m.get("range") or "",
                    venue_raw=m.get("venue") or "",
                    result_raw=m.get("result"),
                    notes=tuple(m.get("notes") or ()),
                )
                for m in round_data["matches"]
            ]
            rounds.append(
                FixtureRound(
                    competition=competition,
                    category=category,
                    round_range_text=round_data.get("range") or "",
                    rows=rows,
                    label=f"{label} #{round_data.get('name') or index}",
                )
            )
        return rounds
