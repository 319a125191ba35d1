"""
File-based persistence: the whole database is one JSON document.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import StorageError
from .logging import get_logger
from .table import Database, Table
from .types import NULL, Column, Integer, Text, Value

logger = get_logger(__name__)


def encode_value(value: Value) -> Any:
    """Encode a Value as ``{"Integer": n}``, ``{"Text": s}`` or ``"Null"``."""
    if isinstance(value, Integer):
        return {"Integer": value.value}
    if isinstance(value, Text):
        return {"Text": value.value}
    return "Null"


def decode_value(data: Any) -> Value:
    if data == "Null":
        return NULL
    if isinstance(data, dict) and len(data) == 1:
        (tag, payload), = data.items()
        if tag == "Integer":
            return Integer(payload)
        if tag == "Text":
            return Text(payload)
    raise ValueError(f"Unrecognized value encoding: {data!r}")


def encode_table(table: Table) -> Dict[str, Any]:
    return {
        'name': table.name,
        'columns': [
            {
                'name': col.name,
                'data_type': col.data_type,
                'is_primary': col.is_primary,
                'is_unique': col.is_unique,
            }
            for col in table.columns
        ],
        'rows': [[encode_value(v) for v in row] for row in table.rows],
    }


def decode_table(data: Dict[str, Any]) -> Table:
    """Rebuild a Table from its encoded form. Indexes are not rebuilt here."""
    columns = [
        Column(
            name=col['name'],
            data_type=col['data_type'],
            is_primary=bool(col.get('is_primary', False)),
            is_unique=bool(col.get('is_unique', False)),
        )
        for col in data['columns']
    ]
    table = Table(data['name'], columns)
    rows: List[List[Value]] = []
    for raw_row in data['rows']:
        if len(raw_row) != len(columns):
            raise ValueError(f"Row width {len(raw_row)} does not match table '{table.name}'")
        rows.append([decode_value(v) for v in raw_row])
    table.rows = rows
    return table


class Storage:
    """Handles disk persistence for the whole database.

    Every save overwrites the file with a full snapshot. Uniqueness
    indexes are not written; they are rebuilt from rows on load.
    """

    def __init__(self, path: Union[str, Path] = "database.json"):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, database: Database) -> None:
        """Write the full database as JSON.

        The snapshot goes to a temporary file in the same directory which
        then replaces the target, so a failed write leaves the previous
        snapshot intact.
        """
        document = {
            'tables': {table.name: encode_table(table) for table in database},
        }
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Write to database file failed: {e}") from e
        logger.debug("database_saved", path=str(self.path), tables=len(database))

    def load(self) -> Database:
        """Read the database file, or return an empty database if there is none."""
        database = Database()
        if not self.exists():
            logger.info("database_file_missing", path=str(self.path))
            return database

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except OSError as e:
            raise StorageError(f"Could not open file: {e}") from e
        except json.JSONDecodeError as e:
            raise StorageError(f"Deserialization failed: {e}") from e

        try:
            for name, table_data in document['tables'].items():
                table = decode_table(table_data)
                database.tables[name] = table
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"Deserialization failed: {e}") from e

        database.rebuild_indexes()
        logger.info("database_loaded", path=str(self.path), tables=len(database))
        return database
