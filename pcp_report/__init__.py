"""Plugin Check report generation and issue grouping."""

__version__ = "1.0.0"
