"""Shared test fixtures."""

from __future__ import annotations

import pytest

from nordic.core.connection import ConnectionConfig, ConnectionManager
from nordic.core.engine import Engine
from nordic.core.metadata import DatabaseMetadata, TableMetadata

CREATE_ARTICLES = (
    "CREATE TABLE articles ("
    "article_id INTEGER PRIMARY KEY, title TEXT NOT NULL, author TEXT)"
)


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def articles_table() -> TableMetadata:
    return TableMetadata(schema="main", name="articles")


@pytest.fixture
def metadata() -> DatabaseMetadata:
    return DatabaseMetadata.from_mapping({"articles": {"schema": "main", "name": "articles"}})


@pytest.fixture
def seeded_manager(sqlite_config: ConnectionConfig) -> ConnectionManager:
    """Connection manager over an in-memory database with two articles."""
    manager = ConnectionManager(sqlite_config)
    with manager.get_connection() as conn:
        conn.execute(CREATE_ARTICLES)
        conn.execute("INSERT INTO articles (article_id, title) VALUES (1, 'article1')")
        conn.execute("INSERT INTO articles (article_id, title) VALUES (2, 'article2')")
        conn.commit()
    yield manager
    manager.close()


@pytest.fixture
def engine(seeded_manager: ConnectionManager, metadata: DatabaseMetadata) -> Engine:
    return Engine(seeded_manager, metadata)
