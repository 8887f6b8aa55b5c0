"""Tabular backend interface and the in-memory fallback."""
import copy
from abc import ABC, abstractmethod

from goal_tracker.storage.schema import TableSchema


class TabularBackend(ABC):
    """
    Row storage for the logical tables.

    Row indexes are 0-based positions among the data rows (the header row is
    not counted). Rows read back may omit trailing blank cells.
    """

    durable: bool = False

    @abstractmethod
    async def ensure_table(self, schema: TableSchema) -> None:
        """Create the table and repair its header row if needed."""

    @abstractmethod
    async def read_rows(self, schema: TableSchema) -> list[list[str]]:
        """Return every data row in append order."""

    @abstractmethod
    async def append_row(self, schema: TableSchema, row: list[str]) -> None:
        """Append one row after the last populated row."""

    @abstractmethod
    async def update_row(self, schema: TableSchema, index: int, row: list[str]) -> None:
        """Overwrite the data row at index."""


class MemoryBackend(TabularBackend):
    """Process-local tables, used when no spreadsheet is configured."""

    durable = False

    def __init__(self):
        """Initialize with empty tables."""
        self.tables: dict[str, list[list[str]]] = {}

    def _rows(self, schema: TableSchema) -> list[list[str]]:
        return self.tables.setdefault(schema.name, [])

    async def ensure_table(self, schema: TableSchema) -> None:
        # Nothing to repair: there is no header row in memory.
        return None

    async def read_rows(self, schema: TableSchema) -> list[list[str]]:
        return copy.deepcopy(self._rows(schema))

    async def append_row(self, schema: TableSchema, row: list[str]) -> None:
        self._rows(schema).append(list(row))

    async def update_row(self, schema: TableSchema, index: int, row: list[str]) -> None:
        rows = self._rows(schema)
        if index < 0 or index >= len(rows):
            raise IndexError(f"Row {index} out of range for table {schema.name}")
        rows[index] = list(row)
