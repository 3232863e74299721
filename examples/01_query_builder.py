"""
Example 01: Compiling Queries

This example shows the SQL and bound values produced for each statement kind,
without touching a database.
"""

from nordic import QueryBuilder, TableMetadata, rewrite_named_params


def main():
    articles = QueryBuilder(
        TableMetadata(schema="public", name="articles"),
        properties_mapping={"location": lambda record, ph: f"ST_GeomFromText({ph})"},
    )

    print("=== SELECT ===")
    print(articles.select_query({"article_id": [1, 2], "author": "ada"}))

    print("\n=== COUNT ===")
    print(articles.select_count_query({"author": "ada"}))

    print("\n=== INSERT ===")
    print(articles.insert_query([
        {"title": "First", "location": "POINT(0 0)"},
        {"title": "Second"},
    ]))

    print("\n=== UPDATE ===")
    print(articles.update_query({"title": "Renamed", "location": "POINT(1 1)"}, {"article_id": 1}))

    print("\n=== DELETE ===")
    print(articles.delete_query({"article_id": [3, 4]}))

    print("\n=== Named template ===")
    print(rewrite_named_params(
        "SELECT * FROM public.articles WHERE author = :author AND title IN (:titles)",
        {"author": "ada", "titles": ["First", "Second"]},
    ))


if __name__ == "__main__":
    main()
