"""Tests for session.py"""
import json

import pytest
from fastapi import Request

from errors import AuthError
from session import MemorySession, RequestSession, get_auth_token, get_user_id


def make_request(headers):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


def test_cookie_token_wins_over_storage():
    session = MemorySession(cookies={"auth_token": "from-cookie"}, storage={"auth_token": "from-storage"})
    assert get_auth_token(session) == "from-cookie"


def test_storage_token_keys_in_order():
    assert get_auth_token(MemorySession(storage={"token": "t2"})) == "t2"
    assert get_auth_token(MemorySession(storage={"auth_token": "t1", "token": "t2"})) == "t1"
    assert get_auth_token(MemorySession()) is None


def test_user_id_falls_back_to_id():
    session = MemorySession(storage={"user_data": json.dumps({"id": 42})})
    assert get_user_id(session) == 42


def test_missing_user_data():
    with pytest.raises(AuthError, match="User not found"):
        get_user_id(MemorySession())


@pytest.mark.parametrize("raw", ["{not json", json.dumps({"name": "Ada"}), json.dumps(["u1"])])
def test_malformed_user_data(raw):
    with pytest.raises(AuthError, match="Invalid user data"):
        get_user_id(MemorySession(storage={"user_data": raw}))


def test_request_session_reads_bearer_header_and_cookies():
    request = make_request({
        "Authorization": "Bearer hdr-token",
        "Cookie": 'user_data={"user_id":"u9"}',
    })
    session = RequestSession(request)
    assert get_auth_token(session) == "hdr-token"
    assert get_user_id(session) == "u9"


def test_request_session_collects_writes():
    session = RequestSession(make_request({}))
    session.set_item("cleaningItems", "{}")
    assert session.pending == {"cleaningItems": "{}"}
    assert session.get_item("cleaningItems") == "{}"
