"""Priced item catalog sold by the store."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


class UnknownItemError(ValueError):
    """Raised when an item code is not part of the catalog."""


@dataclass(slots=True, frozen=True)
class CatalogItem:
    code: str
    label: str
    price: Decimal


@dataclass(slots=True, frozen=True)
class PriceQuote:
    """Price snapshot stored on a purchase."""

    item: CatalogItem
    quantity: int
    unit_price: Decimal
    total: Decimal


DEFAULT_ITEM_CODE = "DOCE_SALGADINHO"

CATALOG: dict[str, CatalogItem] = {
    item.code: item
    for item in (
        CatalogItem(code="DOCE_SALGADINHO", label="Snack", price=Decimal("2.00")),
        CatalogItem(code="RED_BULL", label="Red Bull", price=Decimal("7.00")),
        CatalogItem(code="CAPSULA_CAFE", label="Coffee Capsule", price=Decimal("3.00")),
    )
}


def get_item(code: str) -> CatalogItem:
    try:
        return CATALOG[code]
    except KeyError as exc:
        raise UnknownItemError(f"Unknown item code '{code}'") from exc


def item_label(code: str) -> str:
    """Display label for report rows; codes missing from the catalog read as the default item."""

    item = CATALOG.get(code)
    if item is None:
        return CATALOG[DEFAULT_ITEM_CODE].label
    return item.label


def quote(code: str, quantity: int) -> PriceQuote:
    """Return the unit price and total for ``quantity`` units of ``code`` at current prices."""

    if quantity < 1:
        msg = "quantity must be at least 1"
        raise ValueError(msg)
    item = get_item(code)
    total = (item.price * quantity).quantize(Decimal("0.01"))
    return PriceQuote(item=item, quantity=quantity, unit_price=item.price, total=total)


__all__ = [
    "CATALOG",
    "CatalogItem",
    "DEFAULT_ITEM_CODE",
    "PriceQuote",
    "UnknownItemError",
    "get_item",
    "item_label",
    "quote",
]
