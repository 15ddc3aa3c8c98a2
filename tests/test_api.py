"""Tests for the HTTP endpoints in main.py"""
import pytest
from fastapi.testclient import TestClient

import booking_client
from main import app
from conftest import FakeHttp, FakeResponse

USER_COOKIE = 'user_data={"user_id":"u1"}'


@pytest.fixture
def client():
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["message"]


def test_options_catalog(client):
    response = client.get("/api/house-cleaning/options")
    assert response.status_code == 200
    assert len(response.json()["packages"]) == 4


def test_estimate(client):
    response = client.post(
        "/api/house-cleaning/estimate",
        json={"items": {"Bedroom": 2}, "options": {"category": "Standard Cleaning", "homeSize": "small"}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["finalPrice"] == 10400
    assert body["estimatedTime"] == "2h "


def test_estimate_rejects_unknown_option(client):
    response = client.post(
        "/api/house-cleaning/estimate",
        json={"items": {"Bedroom": 2}, "options": {"category": "Window Cleaning"}},
    )
    assert response.status_code == 422


def test_book_without_rooms(client):
    response = client.post("/api/house-cleaning/book", json={"items": {"Bedroom": 0}})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select at least one room to clean"


def test_book_without_credential(client, monkeypatch):
    http = FakeHttp(FakeResponse(201, {"data": {"id": "b1"}}))
    monkeypatch.setattr(booking_client.requests, "post", http.post)
    response = client.post("/api/house-cleaning/book", json={"items": {"Bedroom": 1}})
    assert response.status_code == 401
    assert http.calls == []


def test_book_success(client, monkeypatch):
    http = FakeHttp(FakeResponse(201, {"data": {"id": "b1"}}))
    monkeypatch.setattr(booking_client.requests, "post", http.post)
    response = client.post(
        "/api/house-cleaning/book",
        json={"items": {"Kitchen": 1}, "customerInfo": {"address": "1 Main St"}},
        headers={"Authorization": "Bearer tok", "Cookie": USER_COOKIE},
    )
    assert response.status_code == 201
    assert response.json() == {"data": {"id": "b1"}}
    assert "cleaningItems" in response.headers.get("set-cookie", "")
    assert http.calls[0]["json"]["customerInfo"]["address"] == "1 Main St"


def test_book_server_error(client, monkeypatch):
    http = FakeHttp(FakeResponse(500, {"message": "server down"}))
    monkeypatch.setattr(booking_client.requests, "post", http.post)
    response = client.post(
        "/api/house-cleaning/book",
        json={"items": {"Kitchen": 1}},
        headers={"Authorization": "Bearer tok", "Cookie": USER_COOKIE},
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "server down"


def test_context_missing(client):
    response = client.get("/api/house-cleaning/context")
    assert response.status_code == 404


def test_list_bookings(client, monkeypatch):
    http = FakeHttp(FakeResponse(200, {"data": [{"id": "b1", "status": "pending"}]}))
    monkeypatch.setattr(booking_client.requests, "get", http.get)
    response = client.get("/api/bookings", headers={"Authorization": "Bearer tok"})
    assert response.status_code == 200
    assert response.json() == {"data": [{"id": "b1", "status": "pending"}]}


def test_list_bookings_requires_login(client):
    response = client.get("/api/bookings")
    assert response.status_code == 401


def test_context_round_trip_after_booking(client, monkeypatch):
    """Context set on booking reads back intact, punctuation included."""
    http = FakeHttp(FakeResponse(201, {"data": {"id": "b1"}}))
    monkeypatch.setattr(booking_client.requests, "post", http.post)
    instructions = 'Dog, cat; "careful" with the vase'
    response = client.post(
        "/api/house-cleaning/book",
        json={
            "items": {"Bedroom": 2, "Kitchen": 1, "Bathroom": 1},
            "options": {"specialInstructions": instructions},
            "customerInfo": {"address": '12 "Elm" St, Apt 4; rear door', "notes": "x" * 500},
        },
        headers={"Authorization": "Bearer tok", "Cookie": USER_COOKIE},
    )
    assert response.status_code == 201

    context_response = client.get("/api/house-cleaning/context")
    assert context_response.status_code == 200
    context = context_response.json()
    assert context["totalItems"] == 4
    assert context["cleaningData"]["specialInstructions"] == instructions
    assert context["cleaningData"]["estimatedPrice"] == 12800
    assert context["customerInfo"]["address"] == '12 "Elm" St, Apt 4; rear door'
    assert context["customerInfo"]["notes"] == "x" * 500
