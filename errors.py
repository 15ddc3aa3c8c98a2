"""
Errors raised while pricing or submitting a booking.

Every error carries a message that can be shown to the user as-is. None of
them are retried; the user fixes the input or logs in again and resubmits.
"""
from typing import Optional


class BookingError(Exception):
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BookingError):
    """Nothing selected to clean."""
    status_code = 400


class AuthError(BookingError):
    """Missing credential, or missing/unreadable user data."""
    status_code = 401


class ServerError(BookingError):
    """Booking API answered with a non-2xx status."""
    status_code = 502


class NetworkError(BookingError):
    """Booking API could not be reached."""
    status_code = 503
