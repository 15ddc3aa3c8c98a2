"""
Client-side price estimation for house cleaning.

The rate tables match the booking API's own pricing, so the estimate shown
before submission is the price the API records.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, NamedTuple, Optional, Tuple, Union

from logger import setup_logger
from schemas import (
    BACKEND_ROOM_LABELS, ROOM_LABEL_MAP, SPECIAL_REQUESTS,
    CleaningCategory, CleaningPackage, Frequency, HomeSize,
    PriceBreakdown, RoomSelection, ServiceOptions,
)

logger = setup_logger(__name__)

Selection = Union[RoomSelection, Mapping[str, int]]
Options = Union[ServiceOptions, Mapping[str, str], None]


class CategoryRates(NamedTuple):
    base_price: int
    price_per_room: int
    turnaround: str


CATEGORY_RATES = {
    CleaningCategory.standard: CategoryRates(8000, 1200, "2-4 hours"),
    CleaningCategory.deep: CategoryRates(15000, 2000, "4-6 hours"),
    CleaningCategory.move_in: CategoryRates(20000, 2500, "5-8 hours"),
    CleaningCategory.move_out: CategoryRates(22000, 2800, "5-8 hours"),
}

PACKAGE_MULTIPLIER = {
    CleaningPackage.basic: 0.8,
    CleaningPackage.standard: 1,
    CleaningPackage.premium: 1.4,
    CleaningPackage.luxury: 1.8,
}

SIZE_MULTIPLIER = {
    HomeSize.studio: 0.7,
    HomeSize.small: 1,
    HomeSize.medium: 1.5,
    HomeSize.large: 2.2,
}

FREQUENCY_DISCOUNT = {
    Frequency.one_time: 0,
    Frequency.monthly: 0.05,
    Frequency.bi_weekly: 0.1,
    Frequency.weekly: 0.15,
}

DEFAULT_TURNAROUND = "2-4 hours"

BASE_MINUTES = 60
MINUTES_PER_ROOM = 30

# Display metadata for the option pickers
PACKAGE_DESCRIPTIONS = {
    CleaningPackage.basic: "Essential cleaning",
    CleaningPackage.standard: "Complete cleaning",
    CleaningPackage.premium: "Detailed cleaning",
    CleaningPackage.luxury: "White-glove service",
}

HOME_SIZE_LABELS = {
    HomeSize.studio: ("Studio/1BR", "Up to 1 bedroom"),
    HomeSize.small: ("2-3 Bedrooms", "Small to medium home"),
    HomeSize.medium: ("4-5 Bedrooms", "Large family home"),
    HomeSize.large: ("5+ Bedrooms", "Very large property"),
}

FREQUENCY_NAMES = {
    Frequency.one_time: "One-time",
    Frequency.monthly: "Monthly",
    Frequency.bi_weekly: "Bi-weekly",
    Frequency.weekly: "Weekly",
}


def round_half_up(value: float) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _room_counts(selection: Selection) -> Dict[str, int]:
    if isinstance(selection, RoomSelection):
        return selection.root
    return RoomSelection.model_validate(dict(selection)).root


def map_rooms_to_backend(selection: Selection) -> Dict[str, int]:
    """Translate booking-page room labels to the booking API's labels.

    Every API label is present in the result; rooms the page has no label
    for stay at 0 and unknown page labels are dropped.
    """
    backend_items = {label: 0 for label in BACKEND_ROOM_LABELS}
    for label, count in _room_counts(selection).items():
        backend_label = ROOM_LABEL_MAP.get(label)
        if backend_label is not None:
            backend_items[backend_label] = count
    return backend_items


def count_rooms(selection: Selection) -> int:
    return sum(map_rooms_to_backend(selection).values())


def _resolve_options(
    options: Options,
) -> Optional[Tuple[CleaningCategory, CleaningPackage, HomeSize, Frequency]]:
    if options is None:
        options = ServiceOptions()
    if isinstance(options, ServiceOptions):
        return options.category, options.package, options.home_size, options.frequency
    try:
        return (
            CleaningCategory(options.get("category", CleaningCategory.standard)),
            CleaningPackage(options.get("package", CleaningPackage.standard)),
            HomeSize(options.get("homeSize", options.get("home_size", HomeSize.small))),
            Frequency(options.get("frequency", Frequency.one_time)),
        )
    except ValueError:
        return None


def compute_price(selection: Selection, options: Options = None) -> PriceBreakdown:
    """Price a cleaning for the selected rooms and options.

    ``options`` is either a validated ``ServiceOptions`` or a raw mapping with
    the booking page's keys. A raw mapping holding a value outside the known
    options prices as zero instead of raising, as does a selection with no
    rooms.
    """
    resolved = _resolve_options(options)
    if resolved is None:
        # NOTE: a typo in a raw option silently yields a zero price
        logger.warning("Unrecognized cleaning options %s, pricing as zero", dict(options))
        return PriceBreakdown()

    category, package, home_size, frequency = resolved
    rates = CATEGORY_RATES[category]
    package_multiplier = PACKAGE_MULTIPLIER[package]
    size_multiplier = SIZE_MULTIPLIER[home_size]
    frequency_discount = FREQUENCY_DISCOUNT[frequency]

    room_count = count_rooms(selection)
    if room_count == 0:
        return PriceBreakdown()

    subtotal = (rates.base_price + room_count * rates.price_per_room) * package_multiplier * size_multiplier
    discounted_price = subtotal * (1 - frequency_discount)
    final_price = round_half_up(discounted_price)

    return PriceBreakdown(
        final_price=final_price,
        base_price=rates.base_price,
        room_count=room_count,
        price_per_room=rates.price_per_room,
        package_multiplier=package_multiplier,
        size_multiplier=size_multiplier,
        frequency_discount=frequency_discount,
        subtotal=subtotal,
        discount=subtotal - discounted_price,
        total=final_price,
    )


def estimate_duration(total_rooms: int) -> str:
    total_minutes = BASE_MINUTES + total_rooms * MINUTES_PER_ROOM
    hours, minutes = divmod(total_minutes, 60)
    # whole hours keep the trailing space, e.g. "2h "
    return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h "


def get_turnaround(category: Union[CleaningCategory, str]) -> str:
    try:
        return CATEGORY_RATES[CleaningCategory(category)].turnaround
    except ValueError:
        return DEFAULT_TURNAROUND


def build_quote(selection: Selection, options: ServiceOptions) -> dict:
    """Price, duration and turnaround for the estimate panel."""
    total_items = count_rooms(selection)
    quote = compute_price(selection, options).to_payload()
    quote.update(
        totalItems=total_items,
        estimatedTime=estimate_duration(total_items),
        turnaround=get_turnaround(options.category),
    )
    return quote


def option_catalog() -> dict:
    return {
        "categories": [
            {"id": c.value, "name": c.value, "turnaround": CATEGORY_RATES[c].turnaround}
            for c in CleaningCategory
        ],
        "packages": [
            {"id": p.value, "name": p.value, "description": PACKAGE_DESCRIPTIONS[p]}
            for p in CleaningPackage
        ],
        "homeSizes": [
            {"id": s.value, "name": HOME_SIZE_LABELS[s][0], "description": HOME_SIZE_LABELS[s][1]}
            for s in HomeSize
        ],
        "frequencies": [
            {"id": f.value, "name": FREQUENCY_NAMES[f], "discount": round_half_up(FREQUENCY_DISCOUNT[f] * 100)}
            for f in Frequency
        ],
        "specialRequests": [{"id": key, "label": label} for key, label in SPECIAL_REQUESTS.items()],
    }
