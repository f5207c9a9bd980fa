"""Pytest configuration and fixtures."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app


@pytest.fixture
def db():
    """Fresh in-process MongoDB for every test."""
    return mongomock.MongoClient().cinema


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_movie(client):
    def _create(title="Neon Skies", **overrides):
        payload = {"title": title, "length_in_seconds": 7080, "genre": "Sci-Fi", **overrides}
        response = client.post("/api/v1/movies", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_hall(client):
    def _create(hall_number=1, vip_seats=0):
        response = client.post("/api/v1/halls", json={"hall_number": hall_number, "vip_seats": vip_seats})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_seat(client):
    def _create(hall_id, row_no=1, seat_no=1):
        response = client.post(f"/api/v1/halls/{hall_id}/seats", json={"row_no": row_no, "seat_no": seat_no})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_showtime(client):
    def _create(movie_id, hall_id, time_of_playing="2026-10-20T19:30:00", three_dee=False):
        response = client.post(
            f"/api/v1/movies/{movie_id}/showtimes",
            json={"hall_id": hall_id, "time_of_playing": time_of_playing, "three_dee": three_dee},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
