"""Table store implementations."""

from .bigquery import BigQueryTable
from .memory import InMemoryTable

__all__ = ["BigQueryTable", "InMemoryTable"]
