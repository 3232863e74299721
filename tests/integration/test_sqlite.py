"""Integration test for the full workflow against SQLite.

Covers: metadata loading, compiled queries, named templates, row key
transforms, repositories and transactions end-to-end on an in-memory
database. SQLite exposes tables under the ``main`` schema.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nordic.core.connection import AsyncConnectionManager, ConnectionConfig
from nordic.core.engine import AsyncEngine, Engine
from nordic.core.exceptions import EmptyInsertError, QueryExecutionError
from nordic.core.metadata import DatabaseMetadata
from nordic.core.transform import to_camel_case

CREATE_ARTICLES = (
    "CREATE TABLE articles ("
    "article_id INTEGER PRIMARY KEY, title TEXT NOT NULL, author_name TEXT)"
)


@pytest.fixture
def metadata_file(tmp_path: Path) -> Path:
    path = tmp_path / "metadata.json"
    path.write_text(
        json.dumps({"articles": {"schema": "main", "name": "articles"}}), encoding="utf-8"
    )
    return path


@pytest.fixture
def engine(sqlite_config: ConnectionConfig, metadata_file: Path) -> Engine:
    eng = Engine.from_config(
        sqlite_config,
        metadata=DatabaseMetadata.from_file(metadata_file),
        key_transform=to_camel_case,
    )
    eng.raw_query(CREATE_ARTICLES)
    yield eng
    eng.close()


class TestSqliteWorkflow:
    def test_repository_crud(self, engine: Engine) -> None:
        articles = engine.repository("articles")

        created = articles.create(
            [
                {"article_id": 1, "title": "First", "author_name": "Ada"},
                {"article_id": 2, "title": "Second"},
                {"article_id": 3, "title": "Third", "author_name": "Ada"},
            ]
        )
        assert [row["articleId"] for row in created] == [1, 2, 3]
        assert created[1]["authorName"] is None

        assert articles.count() == 3
        assert articles.count({"author_name": "Ada"}) == 2
        assert articles.find_one({"article_id": 2})["title"] == "Second"
        assert articles.find_one({"article_id": 99}) is None

        updated = articles.update({"title": "Renamed"}, {"article_id": [1, 3]})
        assert sorted(row["articleId"] for row in updated) == [1, 3]
        assert {row["title"] for row in articles.find({"author_name": "Ada"})} == {"Renamed"}

        deleted = articles.delete({"article_id": 2})
        assert deleted == [{"articleId": 2, "title": "Second", "authorName": None}]
        assert articles.count() == 2

    def test_properties_mapping_wraps_placeholder(self, engine: Engine) -> None:
        articles = engine.repository("articles", {"title": lambda record, ph: f"upper({ph})"})
        created = articles.create({"article_id": 1, "title": "shout"})
        assert created[0]["title"] == "SHOUT"

        updated = articles.update({"title": "again"}, {"article_id": 1})
        assert updated[0]["title"] == "AGAIN"

    def test_raw_query_with_array(self, engine: Engine) -> None:
        engine.repository("articles").create(
            [{"article_id": i, "title": f"article{i}"} for i in range(1, 5)]
        )
        rows = engine.raw_query(
            "SELECT article_id FROM articles WHERE article_id > :min AND title IN (:titles) "
            "ORDER BY article_id",
            {"min": 1, "titles": ["article1", "article2", "article4"]},
        )
        assert rows == [{"articleId": 2}, {"articleId": 4}]

    def test_empty_insert_never_reaches_database(self, engine: Engine) -> None:
        with pytest.raises(EmptyInsertError):
            engine.repository("articles").create([])

    def test_constraint_violation_surfaces(self, engine: Engine) -> None:
        articles = engine.repository("articles")
        articles.create({"article_id": 1, "title": "First"})
        with pytest.raises(QueryExecutionError):
            articles.create({"article_id": 1, "title": "Duplicate"})
        assert articles.count() == 1

    def test_transaction_rollback(self, engine: Engine) -> None:
        with pytest.raises(RuntimeError), engine.transaction() as tx:
            tx.execute_query(
                engine.query_builder("articles").insert_query({"article_id": 1, "title": "x"})
            )
            raise RuntimeError("abort")
        assert engine.repository("articles").count() == 0


class TestAsyncSqliteWorkflow:
    async def test_repository_and_transaction(
        self, sqlite_config: ConnectionConfig, metadata_file: Path
    ) -> None:
        engine = AsyncEngine(
            AsyncConnectionManager(sqlite_config),
            metadata=DatabaseMetadata.from_file(metadata_file),
        )
        try:
            await engine.raw_query(CREATE_ARTICLES)
            articles = engine.repository("articles")
            await articles.create([{"article_id": 1, "title": "a"}, {"article_id": 2, "title": "b"}])
            assert await articles.count() == 2

            async with engine.transaction() as tx:
                rows = await tx.raw_query(
                    "DELETE FROM articles WHERE article_id IN (:ids) RETURNING article_id",
                    {"ids": [1, 2]},
                )
                assert len(rows) == 2
                await tx.rollback()

            assert (await articles.find_one({"article_id": 1}))["title"] == "a"
        finally:
            await engine.close()
