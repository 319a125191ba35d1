"""
Main database engine class.
"""

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import Settings, get_settings
from .errors import ExecutionError, QuerySyntaxError, StorageError
from .executor import ExecutionResult, QueryExecutor
from .logging import get_logger
from .parser import QueryParser
from .storage import Storage

logger = get_logger(__name__)


class DatabaseEngine:
    """Main database engine interface.

    Wraps parsing, execution and persistence behind one exclusive lock:
    statements never interleave, and a successful mutation is written to
    disk before the lock is released.
    """

    def __init__(self, data_file: Optional[Union[str, Path]] = None,
                 settings: Optional[Settings] = None,
                 persist: Optional[bool] = None):
        self.settings = settings or get_settings()
        self.storage = Storage(data_file if data_file is not None else self.settings.data_file)
        self.persist = self.settings.persist if persist is None else persist
        self.parser = QueryParser(strict_join=self.settings.strict_join)
        self._lock = threading.Lock()

        database = self.storage.load() if self.persist else None
        self.executor = QueryExecutor(database)

    @property
    def database(self):
        return self.executor.database

    def execute(self, query: str) -> ExecutionResult:
        """
        Execute a SQL-like query.

        Args:
            query: SQL-like query string

        Returns:
            The statement's ExecutionResult

        Raises:
            QuerySyntaxError: If query syntax is invalid
            ExecutionError: If the statement is rejected or cannot be saved
        """
        with self._lock:
            try:
                statement = self.parser.parse(query)
            except QuerySyntaxError as e:
                logger.info("statement_rejected", query=query, error=str(e))
                raise
            return self._execute(statement, query)

    def execute_statement(self, statement) -> ExecutionResult:
        """Execute an already parsed statement."""
        with self._lock:
            return self._execute(statement, None)

    def _execute(self, statement, query: Optional[str]) -> ExecutionResult:
        try:
            result = self.executor.execute(statement)
        except ExecutionError as e:
            logger.info("statement_failed", query=query, type=statement.type.value, error=str(e))
            raise

        if statement.is_mutation and self.persist:
            try:
                self.storage.save(self.database)
            except StorageError as e:
                # Roll memory back to the last snapshot that reached disk.
                logger.error("save_failed", query=query, type=statement.type.value, error=str(e))
                self.executor = QueryExecutor(self.storage.load())
                raise

        logger.debug(
            "statement_executed",
            query=query,
            type=statement.type.value,
            rows=result.row_count if result.is_tabular else None,
        )
        return result

    def reload(self) -> None:
        """Replace the in-memory database with the contents of the data file."""
        with self._lock:
            self.executor = QueryExecutor(self.storage.load())

    def list_tables(self) -> List[str]:
        """List all tables in the database."""
        with self._lock:
            return sorted(self.database.table_names())

    def get_table_info(self, table_name: str) -> Dict[str, Any]:
        """Get information about a table."""
        with self._lock:
            table = self.database.get_table(table_name)
            return {
                'name': table.name,
                'schema': [
                    {
                        'name': col.name,
                        'type': col.data_type,
                        'is_primary': col.is_primary,
                        'is_unique': col.is_unique
                    }
                    for col in table.columns
                ],
                'row_count': len(table.rows)
            }
