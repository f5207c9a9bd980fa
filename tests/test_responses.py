"""Tests for link resolution through included, nested routers."""

from fastapi import APIRouter, FastAPI, Request
from fastapi.testclient import TestClient

from responses import link_resolver

halls = APIRouter(prefix="/api/v1/halls/{hall_id}/seats")


@halls.get("", name="list_seats")
def list_seats(hall_id: str, request: Request):
    resolve = link_resolver(request)
    return {
        "seat": resolve("read_seat", {"seat_id": "s1"}, {"fields": "id", "orderBy": None}),
        "page": resolve("list_seats", {}, {"pageNumber": 2}),
    }


@halls.get("/{seat_id}", name="read_seat")
def read_seat(hall_id: str, seat_id: str, request: Request):
    return {"self": link_resolver(request)("read_seat", {"seat_id": seat_id}, {})}


outer = APIRouter()
outer.include_router(halls)

app = FastAPI()
app.include_router(outer)

client = TestClient(app)


def test_resolves_routes_inside_included_routers():
    body = client.get("/api/v1/halls/h1/seats").json()

    assert body["seat"] == "http://testserver/api/v1/halls/h1/seats/s1?fields=id"
    assert body["page"] == "http://testserver/api/v1/halls/h1/seats?pageNumber=2"


def test_reuses_path_parameters_of_the_request():
    body = client.get("/api/v1/halls/h2/seats/s9").json()

    assert body["self"] == "http://testserver/api/v1/halls/h2/seats/s9"
