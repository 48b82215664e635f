"""schedview: calendar-aware analytics over solved production schedules."""

__version__ = "0.1.0"
