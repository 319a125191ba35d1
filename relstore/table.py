"""
Tables and the database that owns them.
"""

from typing import Dict, Iterator, List, Sequence, Set

from .errors import (
    ColumnCountMismatch,
    ColumnNotFound,
    TableAlreadyExists,
    TableNotFound,
    UniqueViolation,
)
from .types import Column, Value

Row = List[Value]


class Table:
    """An insert-only sequence of rows plus per-column uniqueness indexes.

    ``indexes`` maps a column position to the set of values already stored
    at that position. Only primary and unique columns are indexed. The
    index is derived from ``rows`` and can always be rebuilt from them.
    """

    def __init__(self, name: str, columns: List[Column]):
        self.name = name
        self.columns = list(columns)
        self.rows: List[Row] = []
        self.indexes: Dict[int, Set[Value]] = self._empty_indexes()

    def _empty_indexes(self) -> Dict[int, Set[Value]]:
        return {i: set() for i, col in enumerate(self.columns) if col.is_indexed}

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def column_index(self, column_name: str) -> int:
        """Return the position of a column, or raise ColumnNotFound."""
        for i, col in enumerate(self.columns):
            if col.name == column_name:
                return i
        raise ColumnNotFound(column_name, table_name=self.name)

    def insert_row(self, row: Sequence[Value]) -> None:
        """Append a row after checking arity and uniqueness constraints.

        Every indexed column is checked before anything is mutated, so a
        rejected row leaves both rows and indexes untouched.
        """
        if len(row) != len(self.columns):
            raise ColumnCountMismatch(len(self.columns), len(row), table_name=self.name)

        for position, index in sorted(self.indexes.items()):
            if row[position] in index:
                raise UniqueViolation(self.columns[position].name, table_name=self.name)

        for position, index in self.indexes.items():
            index.add(row[position])
        self.rows.append(list(row))

    def rebuild_indexes(self) -> None:
        """Recompute every uniqueness index from the stored rows."""
        self.indexes = self._empty_indexes()
        for row in self.rows:
            for position, index in self.indexes.items():
                index.add(row[position])

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"Table(name={self.name!r}, columns={self.column_names!r}, rows={len(self.rows)})"


class Database:
    """A collection of tables keyed by name."""

    def __init__(self):
        self.tables: Dict[str, Table] = {}

    def create_table(self, name: str, columns: List[Column]) -> Table:
        if name in self.tables:
            raise TableAlreadyExists(name)
        table = Table(name, columns)
        self.tables[name] = table
        return table

    def get_table(self, name: str) -> Table:
        try:
            return self.tables[name]
        except KeyError:
            raise TableNotFound(name) from None

    def table_names(self) -> List[str]:
        return list(self.tables)

    def rebuild_indexes(self) -> None:
        for table in self.tables.values():
            table.rebuild_indexes()

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables.values())

    def __len__(self) -> int:
        return len(self.tables)
