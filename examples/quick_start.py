#!/usr/bin/env python3
"""Quick start example for the fixture calendar generator.

Reads the sample listing next to this script and writes the team calendars
into ./example_calendars.
"""

import sys
from pathlib import Path

# Add parent directory to path to allow importing fixture_calendars
sys.path.insert(0, str(Path(__file__).parent.parent))

from fixture_calendars.config import load_config
from fixture_calendars.pipeline import CalendarPipeline
from fixture_calendars.sources.manual_source import ManualSource


def main() -> None:
    """Run a single calendar generation over the sample fixtures."""
    here = Path(__file__).parent
    config = load_config(str(here / "config.yaml")).with_overrides(
        input_dir=str(here / "fixtures"),
        output_dir="example_calendars",
    )

    print(f"Reading fixtures from {config.input_dir}")
    report = CalendarPipeline(config).run([ManualSource(config.input_dir)])

    print(f"Rows: {report.rows_seen}, relevant: {report.rows_relevant}")
    for path in report.written_paths:
        print(f"  - {path}")


if __name__ == "__main__":
    main()
