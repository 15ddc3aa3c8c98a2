"""
Where the caller's credential and identity come from.

The booking flow never reads cookies or scratch storage directly; it is
handed a session object with ``get_cookie``, ``get_item`` and ``set_item``.
``MemorySession`` keeps both in dicts, ``RequestSession`` reads them from an
incoming request.
"""
import json
from typing import Any, Dict, Optional, Union

from fastapi import Request

from errors import AuthError

AUTH_COOKIE = "auth_token"
TOKEN_KEYS = ("auth_token", "token")
USER_DATA_KEY = "user_data"

AUTH_REQUIRED_MESSAGE = "Authentication required. Please log in again."
USER_NOT_FOUND_MESSAGE = "User not found. Please log in again."
INVALID_USER_MESSAGE = "Invalid user data. Please log in again."


class MemorySession:
    def __init__(self, cookies: Optional[Dict[str, str]] = None, storage: Optional[Dict[str, str]] = None):
        self.cookies = dict(cookies or {})
        self.storage = dict(storage or {})

    def get_cookie(self, name: str) -> Optional[str]:
        return self.cookies.get(name)

    def get_item(self, key: str) -> Optional[str]:
        return self.storage.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.storage[key] = value


class RequestSession:
    """Session over an incoming request.

    Cookies double as scratch storage, and an ``Authorization: Bearer``
    header is readable under the ``token`` key. Writes land in ``pending``
    for the endpoint to send back as cookies.
    """

    def __init__(self, request: Request):
        self.request = request
        self.pending: Dict[str, str] = {}

    def get_cookie(self, name: str) -> Optional[str]:
        return self.request.cookies.get(name)

    def get_item(self, key: str) -> Optional[str]:
        if key in self.pending:
            return self.pending[key]
        if key == "token":
            scheme, _, credentials = self.request.headers.get("Authorization", "").partition(" ")
            if scheme.lower() == "bearer" and credentials.strip():
                return credentials.strip()
        return self.request.cookies.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.pending[key] = value


def get_auth_token(session) -> Optional[str]:
    token = session.get_cookie(AUTH_COOKIE)
    if token:
        return token
    for key in TOKEN_KEYS:
        token = session.get_item(key)
        if token:
            return token
    return None


def get_user_data(session) -> Dict[str, Any]:
    raw = session.get_item(USER_DATA_KEY)
    if not raw:
        raise AuthError(USER_NOT_FOUND_MESSAGE)
    try:
        user = json.loads(raw)
    except ValueError as exc:
        raise AuthError(INVALID_USER_MESSAGE) from exc
    if not isinstance(user, dict):
        raise AuthError(INVALID_USER_MESSAGE)
    return user


def get_user_id(session) -> Union[int, str]:
    user = get_user_data(session)
    user_id = user.get("user_id") or user.get("id")
    if not user_id:
        raise AuthError(INVALID_USER_MESSAGE)
    return user_id
