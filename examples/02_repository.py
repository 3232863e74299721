"""
Example 02: Repositories and Transactions

This example runs repositories against an in-memory SQLite database, with
result keys converted to camelCase.
"""

from nordic import ConnectionConfig, DatabaseMetadata, Engine, Repository, to_camel_case


def main():
    metadata = DatabaseMetadata.from_mapping({
        "articles": {"schema": "main", "name": "articles"},
    })
    engine = Engine.from_config(
        ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1),
        metadata=metadata,
        key_transform=to_camel_case,
    )

    engine.raw_query(
        "CREATE TABLE articles (article_id INTEGER PRIMARY KEY, title TEXT, author_name TEXT)"
    )

    articles = engine.repository("articles")
    print("Created:", articles.create([
        {"article_id": 1, "title": "First", "author_name": "Ada"},
        {"article_id": 2, "title": "Second", "author_name": "Grace"},
    ]))
    print("Count:", articles.count())
    print("Ada's:", articles.find({"author_name": "Ada"}))

    # Everything inside the block is rolled back on error
    try:
        with engine.transaction() as tx:
            Repository(tx, metadata.table("articles")).delete()
            raise RuntimeError("changed my mind")
    except RuntimeError:
        pass
    print("Count after rollback:", articles.count())

    print("Raw:", engine.raw_query(
        "SELECT article_id, title FROM articles WHERE article_id IN (:ids)",
        {"ids": [1, 2]},
    ))

    engine.close()


if __name__ == "__main__":
    main()
