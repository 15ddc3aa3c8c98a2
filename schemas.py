"""
Schemas for the House Cleaning booking flow

Each Pydantic model below describes one shape that moves between the booking
page, this service and the remote booking API. Wire-facing models use the
camelCase keys the booking API expects and accept snake_case names too.

Option enums are closed: an unknown category, package, home size or
frequency is rejected when the model is validated.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, RootModel, field_validator
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Room labels shown on the booking page, in display order
ROOM_LABELS = ["Living Room", "Terrace", "Bedroom", "Bathroom", "Kitchen", "Dining", "Garage"]

# Room labels the booking API stores
BACKEND_ROOM_LABELS = [
    "Living Room", "Bedrooms", "Bathrooms", "Kitchen",
    "Dining Room", "Terrace/Balcony", "Garage", "Study/Office",
]

ROOM_LABEL_MAP = {
    "Living Room": "Living Room",
    "Terrace": "Terrace/Balcony",
    "Bedroom": "Bedrooms",
    "Bathroom": "Bathrooms",
    "Kitchen": "Kitchen",
    "Dining": "Dining Room",
    "Garage": "Garage",
}

SPECIAL_REQUESTS = {
    "eco-friendly": "Eco-friendly products only",
    "pet-safe": "Pet-safe cleaning products",
    "fragrance-free": "Fragrance-free products",
    "inside-appliances": "Clean inside appliances",
    "windows": "Clean interior windows",
    "organization": "Light organization help",
}

DEFAULT_PREFERRED_TIME = "10:00 AM - 12:00 PM"


class CleaningCategory(str, Enum):
    standard = "Standard Cleaning"
    deep = "Deep Cleaning"
    move_in = "Move-in Cleaning"
    move_out = "Move-out Cleaning"


class CleaningPackage(str, Enum):
    basic = "Basic Package"
    standard = "Standard Package"
    premium = "Premium Package"
    luxury = "Luxury Package"


class HomeSize(str, Enum):
    studio = "studio"
    small = "small"
    medium = "medium"
    large = "large"


class Frequency(str, Enum):
    one_time = "one-time"
    monthly = "monthly"
    bi_weekly = "bi-weekly"
    weekly = "weekly"


class RoomSelection(RootModel[Dict[str, NonNegativeInt]]):
    """Room label -> number of rooms to clean."""

    @classmethod
    def empty(cls) -> "RoomSelection":
        return cls({label: 0 for label in ROOM_LABELS})

    def total(self) -> int:
        return sum(self.root.values())

    def increment(self, label: str) -> "RoomSelection":
        _check_room_label(label)
        counts = dict(self.root)
        counts[label] = counts.get(label, 0) + 1
        return RoomSelection(counts)

    def decrement(self, label: str) -> "RoomSelection":
        _check_room_label(label)
        counts = dict(self.root)
        if counts.get(label, 0) > 0:
            counts[label] -= 1
        return RoomSelection(counts)


def _check_room_label(label: str) -> None:
    if label not in ROOM_LABEL_MAP:
        raise ValueError(f"Unknown room: {label}")


class ServiceOptions(BaseModel):
    model_config = CAMEL_CONFIG

    category: CleaningCategory = CleaningCategory.standard
    package: CleaningPackage = CleaningPackage.standard
    home_size: HomeSize = HomeSize.small
    frequency: Frequency = Frequency.one_time
    preferred_time: str = DEFAULT_PREFERRED_TIME
    special_instructions: str = ""


class PriceBreakdown(BaseModel):
    """Estimated price. Detail fields are unset when nothing can be priced."""

    model_config = CAMEL_CONFIG

    final_price: int = 0
    base_price: Optional[int] = None
    room_count: Optional[int] = None
    price_per_room: Optional[int] = None
    package_multiplier: Optional[float] = None
    size_multiplier: Optional[float] = None
    frequency_discount: Optional[float] = None
    subtotal: Optional[float] = None
    discount: Optional[float] = None
    total: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.room_count is None

    def to_payload(self) -> dict:
        breakdown = self.model_dump(by_alias=True, exclude={"final_price"}, exclude_none=True)
        return {"finalPrice": self.final_price, "breakdown": breakdown}


class Reminders(BaseModel):
    sms: bool = False
    email: bool = False


class CustomerInfo(BaseModel):
    model_config = CAMEL_CONFIG

    phone: str = ""
    address: str = ""
    notes: str = ""
    special_requests: List[str] = Field(default_factory=list)
    reminders: Reminders = Field(default_factory=Reminders)

    @field_validator("special_requests")
    @classmethod
    def known_special_requests(cls, value: List[str]) -> List[str]:
        unknown = [item for item in value if item not in SPECIAL_REQUESTS]
        if unknown:
            raise ValueError(f"Unknown special requests: {', '.join(unknown)}")
        # keep first occurrence order, drop repeats
        return list(dict.fromkeys(value))


class CleaningData(BaseModel):
    model_config = CAMEL_CONFIG

    category: CleaningCategory
    package: CleaningPackage
    items: Dict[str, int]
    home_size: HomeSize
    frequency: Frequency
    estimated_price: int
    estimated_time: str
    preferred_time: str = DEFAULT_PREFERRED_TIME
    special_instructions: str = ""
    turnaround: str


class BookingDetails(BaseModel):
    model_config = CAMEL_CONFIG

    date: Optional[str] = Field(None, description="Service date, YYYY-MM-DD")
    time_slot: Optional[str] = Field(None, description="e.g. 10:00 AM - 12:00 PM")


class BookingRequest(BaseModel):
    """Body of POST /api/v1/house-cleaning/create."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Union[int, str]
    cleaning_data: CleaningData = Field(..., alias="cleaningData")
    booking_details: BookingDetails = Field(default_factory=BookingDetails, alias="bookingDetails")
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo, alias="customerInfo")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BookingContext(BaseModel):
    """Booking state handed to the date/time step through scratch storage."""

    model_config = CAMEL_CONFIG

    items: Dict[str, int]
    selected_options: ServiceOptions
    pricing: dict
    total_items: int
    cleaning_data: CleaningData
    backend_items: Dict[str, int]
    customer_info: CustomerInfo
