import json

import pytest

from urbanswap.database.query_builder import QueryBuilder


def test_insert_query_numbers_placeholders():
    query, values = QueryBuilder.build_insert_query(
        {"title": "Bike", "tags": ["a", "b"]}, "listings", returning="*"
    )

    assert query == "INSERT INTO listings (title, tags) VALUES ($1, $2) RETURNING *"
    assert values == ["Bike", json.dumps(["a", "b"])]


def test_insert_query_rejects_unknown_table():
    with pytest.raises(ValueError, match="Invalid table"):
        QueryBuilder.build_insert_query({"title": "Bike"}, "homes")


def test_insert_query_rejects_empty_data():
    with pytest.raises(ValueError):
        QueryBuilder.build_insert_query({}, "listings")


def test_update_query_ands_where_conditions():
    query, values = QueryBuilder.build_update_query(
        {"title": "Bike", "price": "Free"}, "listings", {"id": "l1", "user_id": "u1"}, returning="*"
    )

    assert query == (
        "UPDATE listings SET title = $1, price = $2, updated_at = NOW() "
        "WHERE id = $3 AND user_id = $4 RETURNING *"
    )
    assert values == ["Bike", "Free", "l1", "u1"]


def test_update_query_with_no_fields_still_touches_updated_at():
    query, values = QueryBuilder.build_update_query({}, "users", {"id": "u1"})

    assert query == "UPDATE users SET updated_at = NOW() WHERE id = $1"
    assert values == ["u1"]


def test_update_query_requires_where():
    with pytest.raises(ValueError, match="WHERE"):
        QueryBuilder.build_update_query({"title": "Bike"}, "listings", {})
