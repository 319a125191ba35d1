"""
relstore: a minimal single-node relational store.
"""

from .engine import DatabaseEngine
from .errors import (
    ColumnCountMismatch,
    ColumnNotFound,
    ExecutionError,
    QuerySyntaxError,
    StorageError,
    TableAlreadyExists,
    TableNotFound,
    UniqueViolation,
)
from .executor import ExecutionResult, QueryExecutor
from .parser import QueryParser
from .repl import DatabaseREPL
from .storage import Storage
from .table import Database, Table
from .tokenizer import tokenize
from .types import NULL, Column, Integer, Null, Text, Value

__all__ = [
    'DatabaseEngine', 'DatabaseREPL',
    'QueryParser', 'tokenize', 'QueryExecutor', 'ExecutionResult',
    'Database', 'Table', 'Column', 'Value', 'Integer', 'Text', 'Null', 'NULL',
    'Storage',
    'QuerySyntaxError', 'ExecutionError', 'TableAlreadyExists', 'TableNotFound',
    'ColumnNotFound', 'UniqueViolation', 'ColumnCountMismatch', 'StorageError',
]
