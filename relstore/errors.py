"""
Error types raised by the parser and the execution engine.
"""

from typing import Optional


class QuerySyntaxError(SyntaxError):
    """Raised by the parser when a statement cannot be parsed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ExecutionError(ValueError):
    """Base class for errors raised while executing a statement."""

    def __init__(self, message: str, table_name: Optional[str] = None,
                 column_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table_name = table_name
        self.column_name = column_name

    def __str__(self) -> str:
        return self.message


class TableAlreadyExists(ExecutionError):
    def __init__(self, table_name: str):
        super().__init__(f"Table '{table_name}' already exists", table_name=table_name)


class TableNotFound(ExecutionError):
    def __init__(self, table_name: str):
        super().__init__(f"Table '{table_name}' not found", table_name=table_name)


class ColumnNotFound(ExecutionError):
    def __init__(self, column_name: str, table_name: Optional[str] = None):
        super().__init__(f"Column '{column_name}' not found",
                         table_name=table_name, column_name=column_name)


class UniqueViolation(ExecutionError):
    def __init__(self, column_name: str, table_name: Optional[str] = None):
        super().__init__(f"Unique constraint violation on column '{column_name}'",
                         table_name=table_name, column_name=column_name)


class ColumnCountMismatch(ExecutionError):
    """Row arity differs from the table's column count."""

    def __init__(self, expected: int, got: int, table_name: Optional[str] = None):
        super().__init__(
            f"Parsing error: Columns count mismatch (expected {expected}, got {got})",
            table_name=table_name,
        )
        self.expected = expected
        self.got = got


class StorageError(ExecutionError):
    """Reading or writing the database file failed."""

    def __init__(self, message: str):
        super().__init__(f"IO Error: {message}")
