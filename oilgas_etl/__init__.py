"""Oil & gas daily production ETL."""

__version__ = "0.1.0"
