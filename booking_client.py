"""
Booking submission against the remote house-cleaning API.

A submission moves idle -> validating and then either stops as rejected or
goes on to submitting, ending succeeded or failed. Exactly one POST is made
per submission; nothing is retried.
"""
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

import requests
from pydantic import ValidationError as SchemaError

from config import Config
from errors import AuthError, BookingError, NetworkError, ServerError, ValidationError
from logger import setup_logger
from pricing import compute_price, count_rooms, estimate_duration, get_turnaround, map_rooms_to_backend
from schemas import (
    BookingContext, BookingDetails, BookingRequest, CleaningData,
    CustomerInfo, RoomSelection, ServiceOptions,
)
from session import AUTH_REQUIRED_MESSAGE, get_auth_token, get_user_id

logger = setup_logger(__name__)

CREATE_BOOKING_PATH = "/api/v1/house-cleaning/create"
BOOKINGS_PATH = "/api/v1/bookings"
CONTEXT_KEY = "cleaningItems"

NO_ROOMS_MESSAGE = "Please select at least one room to clean"


class SubmissionState(str, Enum):
    idle = "idle"
    validating = "validating"
    rejected = "rejected"
    submitting = "submitting"
    succeeded = "succeeded"
    failed = "failed"


def _as_options(options: Union[ServiceOptions, Mapping[str, Any], None]) -> ServiceOptions:
    if isinstance(options, ServiceOptions):
        return options
    return ServiceOptions.model_validate(dict(options or {}))


def _as_customer_info(customer_info: Union[CustomerInfo, Mapping[str, Any], None]) -> CustomerInfo:
    if isinstance(customer_info, CustomerInfo):
        return customer_info
    return CustomerInfo.model_validate(dict(customer_info or {}))


def _as_booking_details(booking_details: Union[BookingDetails, Mapping[str, Any], None]) -> BookingDetails:
    if isinstance(booking_details, BookingDetails):
        return booking_details
    return BookingDetails.model_validate(dict(booking_details or {}))


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _json_body(response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None


def _upstream_status(response) -> Optional[int]:
    return response.status_code if response.status_code >= 400 else None


def _invalid_input_message(exc: SchemaError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"Invalid {field}: {first['msg']}" if field else f"Invalid booking input: {first['msg']}"


def _error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


def build_cleaning_data(selection, options: ServiceOptions) -> CleaningData:
    total_rooms = count_rooms(selection)
    return CleaningData(
        category=options.category,
        package=options.package,
        items=map_rooms_to_backend(selection),
        home_size=options.home_size,
        frequency=options.frequency,
        estimated_price=compute_price(selection, options).final_price,
        estimated_time=estimate_duration(total_rooms),
        preferred_time=options.preferred_time,
        special_instructions=options.special_instructions,
        turnaround=get_turnaround(options.category),
    )


def build_booking_context(selection, options: ServiceOptions, customer_info: CustomerInfo) -> BookingContext:
    if not isinstance(selection, RoomSelection):
        selection = RoomSelection.model_validate(dict(selection))
    return BookingContext(
        items=selection.root,
        selected_options=options,
        pricing=compute_price(selection, options).to_payload(),
        total_items=selection.total(),
        cleaning_data=build_cleaning_data(selection, options),
        backend_items=map_rooms_to_backend(selection),
        customer_info=customer_info,
    )


class BookingPipeline:
    """One booking submission for the caller behind ``session``.

    ``state`` and ``error`` reflect the latest call to ``submit``; ``error``
    holds the message to show the user.
    """

    def __init__(self, session, base_url: Optional[str] = None, http=None, timeout: Optional[float] = None):
        self.session = session
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.http = http or requests
        self.timeout = Config.REQUEST_TIMEOUT if timeout is None else timeout
        self.state = SubmissionState.idle
        self.error: Optional[str] = None

    def _stop(self, state: SubmissionState, exc: BookingError) -> BookingError:
        self.state = state
        self.error = exc.message
        return exc

    def _reject_input(self, exc: SchemaError) -> BookingError:
        message = _invalid_input_message(exc)
        logger.info("Booking rejected: %s", message)
        return self._stop(SubmissionState.rejected, ValidationError(message))

    def validate(self, selection) -> int:
        self.state = SubmissionState.validating
        try:
            total_rooms = count_rooms(selection)
        except SchemaError as exc:
            raise self._reject_input(exc) from exc
        if total_rooms == 0:
            logger.info("Booking rejected: no rooms selected")
            raise self._stop(SubmissionState.rejected, ValidationError(NO_ROOMS_MESSAGE))
        self.error = None
        return total_rooms

    def submit(self, selection, options=None, customer_info=None, booking_details=None) -> Any:
        """Validate, create the booking and hand the context off.

        Returns the ``data`` field of the API's response untouched. Raises a
        ``BookingError`` subclass carrying the user-facing message.
        """
        self.state = SubmissionState.validating
        try:
            options = _as_options(options)
            customer_info = _as_customer_info(customer_info)
            booking_details = _as_booking_details(booking_details)
        except SchemaError as exc:
            raise self._reject_input(exc) from exc
        total_rooms = self.validate(selection)

        try:
            token = get_auth_token(self.session)
            if not token:
                raise AuthError(AUTH_REQUIRED_MESSAGE)
            user_id = get_user_id(self.session)
        except AuthError as exc:
            logger.warning("Booking rejected: %s", exc.message)
            raise self._stop(SubmissionState.rejected, exc)

        context = build_booking_context(selection, options, customer_info)
        booking_request = BookingRequest(
            user_id=user_id,
            cleaning_data=context.cleaning_data,
            booking_details=booking_details,
            customer_info=customer_info,
        )

        self.state = SubmissionState.submitting
        url = f"{self.base_url}{CREATE_BOOKING_PATH}"
        logger.info(
            "Submitting %s for user %s: %d rooms, estimate %d",
            options.category.value, user_id, total_rooms, context.cleaning_data.estimated_price,
        )
        try:
            response = self.http.post(
                url,
                json=booking_request.to_payload(),
                headers=_auth_headers(token),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Booking request to %s failed: %s", url, exc)
            raise self._stop(SubmissionState.failed, NetworkError(f"Booking failed: {exc}")) from exc

        body = _json_body(response)
        if not 200 <= response.status_code < 300:
            message = _error_message(body, f"Booking failed: {response.status_code}")
            logger.error("Booking API returned %s: %s", response.status_code, message)
            raise self._stop(SubmissionState.failed, ServerError(message, status_code=_upstream_status(response)))
        if not isinstance(body, dict):
            raise self._stop(SubmissionState.failed, ServerError("Booking failed: invalid response from server"))

        # Hand the booking context to the date/time step
        self.session.set_item(CONTEXT_KEY, context.model_dump_json(by_alias=True))
        self.state = SubmissionState.succeeded
        return body.get("data")


def submit_booking(selection, options=None, customer_info=None, *, session, booking_details=None, **pipeline_kwargs):
    return BookingPipeline(session, **pipeline_kwargs).submit(selection, options, customer_info, booking_details)


def fetch_bookings(session, base_url: Optional[str] = None, http=None, timeout: Optional[float] = None) -> List[Any]:
    """Prior bookings of the caller, as returned by the booking API."""
    token = get_auth_token(session)
    if not token:
        raise AuthError(AUTH_REQUIRED_MESSAGE)

    url = f"{(base_url or Config.API_BASE_URL).rstrip('/')}{BOOKINGS_PATH}"
    try:
        response = (http or requests).get(
            url,
            headers=_auth_headers(token),
            timeout=Config.REQUEST_TIMEOUT if timeout is None else timeout,
        )
    except requests.RequestException as exc:
        logger.error("Fetching bookings from %s failed: %s", url, exc)
        raise NetworkError("Failed to fetch bookings") from exc

    if not 200 <= response.status_code < 300:
        logger.error("Bookings API returned %s", response.status_code)
        raise ServerError("Failed to fetch bookings", status_code=_upstream_status(response))
    body = _json_body(response)
    if not isinstance(body, dict):
        logger.error("Bookings API returned an unreadable body")
        raise ServerError("Failed to fetch bookings: invalid response from server")
    return body.get("data") or []
