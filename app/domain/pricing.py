"""Laundry service pricing.

Prices are in GBP. The collection fee is only charged when at least one
service is selected, and a total never goes below zero.
"""

from decimal import Decimal
from typing import TypedDict

BASE_WASH_DRY: dict[str, tuple[str, Decimal]] = {
    "0-6kg": ("Standard Wash (up to 6kg)", Decimal("18.00")),
    "6-10kg": ("Large Wash (6-10kg)", Decimal("25.00")),
}

SPECIAL_ITEMS: dict[str, tuple[str, Decimal]] = {
    "duvet_double": ("Double Duvet", Decimal("20.00")),
    "duvet_single": ("Single Duvet", Decimal("15.00")),
    "bed_sheets": ("Bed Sheet Set", Decimal("8.00")),
    "pillows": ("Pillows (pair)", Decimal("6.00")),
    "curtains": ("Curtains", Decimal("12.00")),
}

ADD_ONS: dict[str, tuple[str, Decimal]] = {
    "stain_removal": ("Stain Removal Treatment", Decimal("5.00")),
    "ironing": ("Ironing Service", Decimal("12.50")),
    "own_products": ("User supplies own products", Decimal("-1.50")),  # discount
}

COLLECTION_FEE = Decimal("4.99")

TIME_SLOTS = [
    "9:00 AM - 12:00 PM",
    "1:00 PM - 4:00 PM",
    "5:00 PM - 8:00 PM",
]


class LineItem(TypedDict):
    label: str
    price: Decimal


def get_itemized_breakdown(
    weight_tier: str | None,
    selected_items: dict[str, int],
    selected_add_ons: list[str],
) -> list[LineItem]:
    """Build priced line items for a selection.

    Args:
        weight_tier: Key into BASE_WASH_DRY, or None for no base wash
        selected_items: Special item key -> quantity
        selected_add_ons: Add-on keys

    Raises:
        KeyError: If a key is not in the price table
    """
    items: list[LineItem] = []

    if weight_tier:
        label, price = BASE_WASH_DRY[weight_tier]
        items.append({"label": label, "price": price})

    for key, quantity in selected_items.items():
        if quantity <= 0:
            continue
        label, price = SPECIAL_ITEMS[key]
        if quantity > 1:
            label = f"{label} x{quantity}"
        items.append({"label": label, "price": price * quantity})

    for key in selected_add_ons:
        label, price = ADD_ONS[key]
        items.append({"label": label, "price": price})

    if items:
        items.append({"label": "Collection & Delivery", "price": COLLECTION_FEE})

    return items


def calculate_total(
    weight_tier: str | None,
    selected_items: dict[str, int],
    selected_add_ons: list[str],
) -> Decimal:
    """Total price for a selection, never negative."""
    total = sum(
        (item["price"] for item in get_itemized_breakdown(weight_tier, selected_items, selected_add_ons)),
        Decimal("0"),
    )
    return max(Decimal("0"), total)
