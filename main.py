from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from booking_client import CONTEXT_KEY, BookingPipeline, fetch_bookings
from config import Config
from errors import BookingError
from logger import setup_logger
from pricing import build_quote, option_catalog
from schemas import BookingDetails, CustomerInfo, RoomSelection, ServiceOptions
from session import RequestSession

logger = setup_logger("cleaning_api")

app = FastAPI(title="House Cleaning Booking API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[Config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request models
class EstimateRequest(BaseModel):
    items: RoomSelection = Field(default_factory=RoomSelection.empty)
    options: ServiceOptions = Field(default_factory=ServiceOptions)


class BookCleaningRequest(EstimateRequest):
    model_config = ConfigDict(populate_by_name=True)

    customer_info: CustomerInfo = Field(default_factory=CustomerInfo, alias="customerInfo")
    booking_details: Optional[BookingDetails] = Field(None, alias="bookingDetails")


def http_error(exc: BookingError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@app.get("/")
def root():
    return {"message": "House Cleaning Booking API is running"}


# ------------------------ PRICING ------------------------
@app.get("/api/house-cleaning/options")
def cleaning_options():
    return option_catalog()


@app.post("/api/house-cleaning/estimate")
def cleaning_estimate(payload: EstimateRequest):
    return build_quote(payload.items, payload.options)


# ------------------------ BOOKING ------------------------
@app.post("/api/house-cleaning/book", status_code=201)
def book_cleaning(payload: BookCleaningRequest, request: Request, response: Response):
    session = RequestSession(request)
    pipeline = BookingPipeline(session)
    try:
        record = pipeline.submit(payload.items, payload.options, payload.customer_info, payload.booking_details)
    except BookingError as exc:
        raise http_error(exc) from exc
    # Hand the booking context to the date/time step
    for key, value in session.pending.items():
        response.set_cookie(key, value, samesite="lax")
    return {"data": record}


@app.get("/api/house-cleaning/context")
def booking_context(request: Request):
    raw = RequestSession(request).get_item(CONTEXT_KEY)
    if not raw:
        raise HTTPException(status_code=404, detail="No booking in progress")
    return Response(content=raw, media_type="application/json")


# ------------------------ DASHBOARD ------------------------
@app.get("/api/bookings")
def list_bookings(request: Request):
    try:
        bookings = fetch_bookings(RequestSession(request))
    except BookingError as exc:
        raise http_error(exc) from exc
    return {"data": bookings}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
