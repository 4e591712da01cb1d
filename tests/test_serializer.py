"""Tests for result-table value serialization."""

from __future__ import annotations

import pytest

from graph_docs.docgen import serialize


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "<null>"),
        (True, "true"),
        (False, "false"),
        (13, "13"),
        (29.5, "29.5"),
        ("A", '"A"'),
        ([13, 33, 44], "[13,33,44]"),
        (["a", None], '["a",<null>]'),
        ({"name": "A", "age": 13}, '{name -> "A", age -> 13}'),
        ([], "[]"),
    ],
)
def test_serialize(value, expected: str) -> None:
    assert serialize(value) == expected


def test_nested_collections() -> None:
    assert serialize({"xs": [1, {"y": False}]}) == "{xs -> [1,{y -> false}]}"
