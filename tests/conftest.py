"""Pytest configuration and fixtures for relstore tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from relstore.config import Settings
from relstore.engine import DatabaseEngine
from relstore.executor import QueryExecutor
from relstore.parser import QueryParser
from relstore.table import Database


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_file(temp_dir: Path) -> Path:
    return temp_dir / "database.json"


@pytest.fixture
def test_settings(data_file: Path) -> Settings:
    """Provide settings pointing at a temporary database file."""
    return Settings(data_file=data_file, persist=True, strict_join=False)


@pytest.fixture
def parser() -> QueryParser:
    return QueryParser()


@pytest.fixture
def database() -> Database:
    return Database()


@pytest.fixture
def executor(database: Database) -> QueryExecutor:
    return QueryExecutor(database)


@pytest.fixture
def run(executor: QueryExecutor, parser: QueryParser):
    """Parse and execute a statement in one call."""
    def _run(query: str):
        return executor.execute(parser.parse(query))
    return _run


@pytest.fixture
def engine(test_settings: Settings) -> DatabaseEngine:
    """Provide an engine persisting to a temporary file."""
    return DatabaseEngine(settings=test_settings)


@pytest.fixture
def devs_and_teams(run):
    """Two joinable tables: devs.team_id references teams.id."""
    run("CREATE TABLE devs (id INT PRIMARY, team_id INT)")
    run("CREATE TABLE teams (id INT PRIMARY, name TEXT)")
    run("INSERT INTO devs VALUES (1, 10)")
    run("INSERT INTO devs VALUES (2, 20)")
    run("INSERT INTO teams VALUES (10, 'Eng')")
    run("INSERT INTO teams VALUES (20, 'Ops')")
    return run
