"""Tests for the property mapping registry."""

import threading

import pytest

from dtos import MovieDto, SeatDto, TicketDto
from errors import MappingNotFoundError
from property_mapping import PropertyMapping, PropertyMappingRegistry, PropertyMappingValue, property_mappings
from schemas import Movie, Seat, Ticket


class Wire:
    pass


class Stored:
    pass


def test_lookup_is_case_insensitive():
    mapping = PropertyMapping({"Price": ["price"], "Name": ["last_name", "first_name"]})

    assert mapping["price"].destination_properties == ("price",)
    assert mapping[" NAME "].destination_properties == ("last_name", "first_name")
    assert "pRiCe" in mapping
    assert "bogus" not in mapping
    assert list(mapping) == ["Price", "Name"]


def test_mapping_value_needs_a_destination():
    with pytest.raises(ValueError):
        PropertyMappingValue([])


@pytest.mark.parametrize(
    "fields, expected",
    [
        (None, True),
        ("", True),
        ("   ", True),
        ("Id", True),
        ("id, price", True),
        ("Price desc, Id", True),
        ("Price,Bogus", False),
        ("bogus", False),
    ],
)
def test_validate(fields, expected):
    mapping = PropertyMapping({"Id": ["_id"], "Price": ["price"]})

    assert PropertyMappingRegistry.validate(mapping, fields) is expected


def test_lookup_missing_pair_raises():
    registry = PropertyMappingRegistry()

    with pytest.raises(MappingNotFoundError) as exc_info:
        registry.lookup(Wire, Stored)

    assert exc_info.value.client_error is False
    assert "Wire" in str(exc_info.value)


def test_register_replaces_existing_table():
    registry = PropertyMappingRegistry()
    registry.register(Wire, Stored, {"Id": ["_id"]})
    registry.register(Wire, Stored, {"Name": ["name"]})

    mapping = registry.lookup(Wire, Stored)

    assert list(mapping) == ["Name"]


def test_initializer_runs_once_under_concurrent_first_use():
    calls = []
    barrier = threading.Barrier(8)

    def initializer(registry):
        calls.append(1)
        registry.register(Wire, Stored, {"Id": ["_id"]})

    registry = PropertyMappingRegistry(initializer)
    results = []

    def worker():
        barrier.wait()
        results.append(registry.lookup(Wire, Stored))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)


def test_default_registry_knows_every_resource():
    assert property_mappings.lookup(MovieDto, Movie)["id"].destination_properties == ("_id",)
    assert property_mappings.lookup(TicketDto, Ticket)["Price"].destination_properties == ("price",)
    assert property_mappings.lookup(SeatDto, Seat)["position"].destination_properties == ("row_no", "seat_no")
