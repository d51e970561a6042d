"""Fixture Calendars - per-team RFC 5545 calendars from match listings.

This package turns raw fixture rows from the federation and municipal
competitions into one .ics calendar per club team, resolving noisy team
names and incomplete dates along the way.
"""

__version__ = "0.1.0"
