"""timereport - time-tracking report aggregation and CSV export."""

__version__ = "0.1.0"
