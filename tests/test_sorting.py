"""Tests for order-by compilation and sorting."""

import pytest
from pymongo import ASCENDING, DESCENDING

from errors import UnknownSortFieldError
from property_mapping import PropertyMapping
from sorting import SortKey, apply_sort, compile_order_by, to_mongo_sort

TICKETS = PropertyMapping({"Id": ["Id"], "Price": ["Price"], "Paid": ["Paid"]})
CUSTOMERS = PropertyMapping({"Id": ["Id"], "Name": ["LastName", "FirstName"]})


def test_compile_directions_and_order():
    assert compile_order_by("Price desc,Id", TICKETS) == [SortKey("Price", True), SortKey("Id", False)]


def test_direction_token_is_case_insensitive():
    assert compile_order_by("price DESC", TICKETS) == [SortKey("Price", True)]
    assert compile_order_by("price asc", TICKETS) == [SortKey("Price", False)]
    assert compile_order_by("price sideways", TICKETS) == [SortKey("Price", False)]


def test_one_client_field_expands_to_all_storage_fields():
    assert compile_order_by("Name", CUSTOMERS) == [SortKey("LastName", False), SortKey("FirstName", False)]
    assert compile_order_by("name desc", CUSTOMERS) == [SortKey("LastName", True), SortKey("FirstName", True)]


@pytest.mark.parametrize("order_by", [None, "", "   "])
def test_blank_order_by_uses_default(order_by):
    assert compile_order_by(order_by, TICKETS, default="Id") == [SortKey("Id", False)]


def test_blank_clauses_are_skipped():
    assert compile_order_by("Price, ,Id,", TICKETS) == [SortKey("Price", False), SortKey("Id", False)]


def test_unknown_field_raises():
    with pytest.raises(UnknownSortFieldError) as exc_info:
        compile_order_by("Price,Bogus desc", TICKETS)

    assert exc_info.value.field == "Bogus"
    assert "Bogus" in str(exc_info.value)


def test_apply_sort_breaks_ties_with_later_keys():
    items = [{"Id": 1, "Price": 10}, {"Id": 2, "Price": 20}, {"Id": 3, "Price": 10}]

    ordered = apply_sort(items, compile_order_by("Price desc,Id", TICKETS))

    assert [item["Id"] for item in ordered] == [2, 1, 3]
    assert [item["Id"] for item in items] == [1, 2, 3]


def test_apply_sort_uses_tiebreaker_last():
    items = [{"Id": 3, "Paid": True}, {"Id": 1, "Paid": True}, {"Id": 2, "Paid": False}]

    ordered = apply_sort(items, [SortKey("Paid", True)], tiebreaker="Id")

    assert [item["Id"] for item in ordered] == [1, 3, 2]


def test_apply_sort_reads_attributes_and_puts_missing_values_first():
    class Row:
        def __init__(self, id, price):
            self.id = id
            self.price = price

    rows = [Row(1, 5), Row(2, None), Row(3, 1)]

    ordered = apply_sort(rows, [SortKey("price")])

    assert [row.id for row in ordered] == [2, 3, 1]


def test_to_mongo_sort_appends_unique_tiebreaker():
    keys = compile_order_by("Price desc", TICKETS)

    assert to_mongo_sort(keys) == [("Price", DESCENDING), ("_id", ASCENDING)]
    assert to_mongo_sort([SortKey("_id", True)]) == [("_id", DESCENDING)]
