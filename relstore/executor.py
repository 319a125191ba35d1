"""
Query executor that processes parsed statements against a Database.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .parser import CreateTable, Insert, JoinClause, QueryType, Select
from .table import Database, Row, Table
from .types import Column


@dataclass
class ExecutionResult:
    """Either a human-readable message or a header/row payload."""
    message: Optional[str] = None
    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @classmethod
    def from_message(cls, message: str) -> "ExecutionResult":
        return cls(message=message)

    @classmethod
    def from_rows(cls, headers: List[str], rows: List[Row]) -> "ExecutionResult":
        return cls(headers=headers, rows=rows)

    @property
    def is_tabular(self) -> bool:
        return self.message is None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python rendering, with Values unwrapped to int/str/None."""
        if not self.is_tabular:
            return {'status': 'OK', 'message': self.message}
        return {
            'status': 'OK',
            'columns': list(self.headers),
            'rows': [[value.to_python() for value in row] for row in self.rows],
            'row_count': self.row_count,
        }


class QueryExecutor:
    """Executes parsed statements against the database.

    The executor does no locking and no I/O; callers are expected to
    serialize access and to persist after mutating statements.
    """

    def __init__(self, database: Optional[Database] = None):
        self.database = database if database is not None else Database()

    def execute(self, statement) -> ExecutionResult:
        """Execute a parsed statement."""
        query_type = statement.type

        if query_type == QueryType.CREATE_TABLE:
            return self._execute_create_table(statement)
        elif query_type == QueryType.INSERT:
            return self._execute_insert(statement)
        elif query_type == QueryType.SELECT:
            return self._execute_select(statement)
        else:
            raise ValueError(f"Unsupported query type: {query_type}")

    def _execute_create_table(self, statement: CreateTable) -> ExecutionResult:
        columns = [
            Column(
                name=col.name,
                data_type=col.data_type,
                is_primary=col.is_primary,
                is_unique=col.is_unique,
            )
            for col in statement.columns
        ]
        self.database.create_table(statement.name, columns)
        return ExecutionResult.from_message(f"Table '{statement.name}' created")

    def _execute_insert(self, statement: Insert) -> ExecutionResult:
        table = self.database.get_table(statement.table_name)
        table.insert_row(statement.values)
        return ExecutionResult.from_message("1 row inserted.")

    def _execute_select(self, statement: Select) -> ExecutionResult:
        table = self.database.get_table(statement.table_name)

        if statement.join is not None:
            return self._execute_join(table, statement.join)

        if "*" in statement.columns:
            positions = list(range(len(table.columns)))
        else:
            positions = [table.column_index(name) for name in statement.columns]

        headers = [table.columns[i].name for i in positions]
        rows = [[row[i] for i in positions] for row in table.rows]
        return ExecutionResult.from_rows(headers, rows)

    def _execute_join(self, left: Table, join: JoinClause) -> ExecutionResult:
        """Inner equi-join of two tables using a nested loop.

        Every left row is compared with every right row, so the cost is
        O(N * M). Output keeps left-table order, then right-table order
        within each left row.
        """
        right = self.database.get_table(join.table_name)
        left_idx = left.column_index(join.left_column)
        right_idx = right.column_index(join.right_column)

        headers = [f"{left.name}.{col.name}" for col in left.columns]
        headers += [f"{right.name}.{col.name}" for col in right.columns]

        joined_rows = []
        for left_row in left.rows:
            for right_row in right.rows:
                if left_row[left_idx] == right_row[right_idx]:
                    joined_rows.append(left_row + right_row)

        return ExecutionResult.from_rows(headers, joined_rows)
