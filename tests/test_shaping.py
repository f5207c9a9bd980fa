"""Tests for data shaping."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from dtos import SeatDto
from errors import UnknownFieldError
from shaping import check_fields, field_descriptors, has_fields, resolve_fields, shape, shape_many


class TicketRow(BaseModel):
    id: int
    price: int
    reserved: bool


@dataclass
class SeatRow:
    row_no: int
    seat_no: int


def test_shape_keeps_requested_order():
    shaped = shape(TicketRow(id=1, price=10, reserved=False), "Price,Id")

    assert list(shaped.items()) == [("price", 10), ("id", 1)]


def test_shape_without_fields_returns_declared_order():
    shaped = shape(TicketRow(id=1, price=10, reserved=False), None)

    assert list(shaped.items()) == [("id", 1), ("price", 10), ("reserved", False)]
    assert list(shape(TicketRow(id=1, price=10, reserved=False), "  ")) == ["id", "price", "reserved"]


def test_shape_trims_field_names():
    assert list(shape(TicketRow(id=1, price=10, reserved=True), " reserved ,  ID ")) == ["reserved", "id"]


def test_repeated_field_keeps_first_position():
    shaped = shape(TicketRow(id=1, price=10, reserved=False), "Price,id,price")

    assert list(shaped.items()) == [("price", 10), ("id", 1)]
    assert [d.name for d in resolve_fields(TicketRow, "id,ID,reserved")] == ["id", "reserved"]


def test_shape_unknown_field_raises():
    with pytest.raises(UnknownFieldError) as exc_info:
        shape(TicketRow(id=1, price=10, reserved=False), "id,Bogus")

    assert exc_info.value.field == "Bogus"
    assert "TicketRow" in str(exc_info.value)


def test_shape_dataclass():
    assert shape(SeatRow(row_no=2, seat_no=7), "seat_no") == {"seat_no": 7}


def test_shape_many_uses_same_fields_for_every_item():
    rows = [TicketRow(id=1, price=10, reserved=False), TicketRow(id=2, price=20, reserved=True)]

    assert shape_many(rows, "reserved") == [{"reserved": False}, {"reserved": True}]


def test_shape_many_checks_fields_even_when_empty():
    assert shape_many([], "id", SeatDto) == []
    with pytest.raises(UnknownFieldError):
        shape_many([], "bogus", SeatDto)


def test_has_fields_and_check_fields():
    assert has_fields(SeatDto, None)
    assert has_fields(SeatDto, "ID, row_no")
    assert not has_fields(SeatDto, "position")
    check_fields(SeatDto, "seat_no")
    with pytest.raises(UnknownFieldError):
        check_fields(SeatDto, "position")


def test_descriptor_table_is_built_once():
    assert field_descriptors(TicketRow) is field_descriptors(TicketRow)


def test_shape_rejects_none():
    with pytest.raises(ValueError):
        shape(None, "id")
