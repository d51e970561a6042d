import zoneinfo
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from fixture_calendars.exceptions import ConfigurationError
from fixture_calendars.teams import TeamVocabulary
from fixture_calendars.utils.date_and_time import DEFAULT_HOME_ZONE

logger = structlog.get_logger(__name__)

DEFAULT_PRODIDS: dict[str, str] = {
    "federado": "-//Las Flores//Calendarios Federado//ES",
    "imd": "-//Las Flores//Calendarios IMD//ES",
}

# Keys of the optional "vocabulary" section, mapped to TeamVocabulary fields
_VOCABULARY_KEYS = {
    "club_core",
    "reserve_marker",
    "colors",
    "noise_words",
    "locality_words",
    "category_words",
}


@dataclass
class PipelineConfig:
    """Run configuration.

    Loaded from an optional YAML file; CLI options override single values.
    """

    club_needle: str = "las flores"
    home_zone: str = DEFAULT_HOME_ZONE
    input_dir: str = "fixtures"
    output_dir: str = "calendarios"
    warn_on_empty: bool = True
    workers: int = 1
    prodids: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PRODIDS))
    vocabulary: TeamVocabulary = field(default_factory=TeamVocabulary)

    def validate(self) -> "PipelineConfig":
        """Checks values that would otherwise fail deep inside a run.

        Raises:
            ConfigurationError: On an unknown zone or a non-positive worker count.
        """
        try:
            zoneinfo.ZoneInfo(self.home_zone)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown time zone: {self.home_zone}",
                parameter="home_zone",
                expected_format="IANA time zone name",
                example="Europe/Madrid",
            ) from e
        if self.workers < 1:
            raise ConfigurationError(
                f"workers must be at least 1, got {self.workers}",
                parameter="workers",
                expected_format="positive integer",
                example="4",
            )
        return self

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Returns a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


def _build_vocabulary(data: dict[str, Any]) -> TeamVocabulary:
    unknown = set(data) - _VOCABULARY_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown vocabulary keys: {', '.join(sorted(unknown))}",
            parameter="vocabulary",
        )

    kwargs: dict[str, Any] = {}
    for key in ("club_core", "reserve_marker"):
        if key in data:
            kwargs[key] = str(data[key])
    if "colors" in data:
        # Either a list of names or a mapping of token -> display spelling
        colors = data["colors"]
        if isinstance(colors, dict):
            kwargs["colors"] = tuple((str(k), str(v)) for k, v in colors.items())
        else:
            kwargs["colors"] = tuple((str(c), str(c)) for c in colors)
    for key in ("noise_words", "locality_words"):
        if key in data:
            kwargs[key] = frozenset(str(w) for w in data[key])
    if "category_words" in data:
        kwargs["category_words"] = tuple(str(w) for w in data["category_words"])
    return TeamVocabulary(**kwargs)


def load_config(path: str | None = None) -> PipelineConfig:
    """Loads the pipeline configuration.

    Args:
        path: Path to a YAML file. When None, defaults are returned.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file is unreadable, malformed or holds
            unknown keys.
    """
    if path is None:
        return PipelineConfig().validate()

    config_path = Path(path)
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read configuration file {config_path}: {e}",
            parameter="config",
            error_data={"path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping",
            parameter="config",
            error_data={"path": str(config_path)},
        )

    known = {f.name for f in fields(PipelineConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            parameter="config",
            error_data={"path": str(config_path)},
        )

    kwargs = dict(data)
    if "vocabulary" in kwargs:
        kwargs["vocabulary"] = _build_vocabulary(kwargs["vocabulary"] or {})
    if "prodids" in kwargs:
        kwargs["prodids"] = {**DEFAULT_PRODIDS, **(kwargs["prodids"] or {})}

    config = PipelineConfig(**kwargs).validate()
    logger.debug("config_loaded", path=str(config_path))
    return config
