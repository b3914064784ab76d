"""Validation and normalization of cart payloads into provider line items.

Two request shapes are accepted, checked in this order:

* ``{"cart": [{"sku": ..., "qty": ...}]}`` is priced from the server catalog.
  Any price the client sends alongside is ignored.
* ``{"items": [{"nom"/"name", "prix"/"price", "quantite"/"quantity"}],
  "livraison"/"shipping": ..., "taxes": ...}`` carries client prices.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Optional

from src.checkout.catalog import CATALOG, CatalogEntry, find_entry
from src.checkout.exceptions import CartValidationError
from src.checkout.schemas import (
    Cart,
    CatalogCart,
    CatalogCartEntry,
    LegacyCart,
    LegacyCartItem,
    LineItem,
)

MIN_CATALOG_QTY = 1
MAX_CATALOG_QTY = 50

# Magnitudes beyond 10**15 are never a real price or quantity
MAX_DECIMAL_EXPONENT = 15

DEFAULT_ITEM_NAME = "Item"
SHIPPING_LINE_NAME = "Frais de livraison"
TAXES_LINE_NAME = "Taxes"


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a JSON number or numeric string. Returns None for anything non-finite, non-numeric or out of range."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    elif isinstance(value, str):
        raw = value.strip()
    else:
        return None

    try:
        number = Decimal(raw)
    except InvalidOperation:
        return None
    if not number.is_finite() or abs(number.adjusted()) > MAX_DECIMAL_EXPONENT:
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    number = parse_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _first_present(source: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _non_empty_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _parse_catalog_entry(raw: Any, catalog: Mapping[str, CatalogEntry]) -> CatalogCartEntry:
    raw = _as_mapping(raw)
    sku = raw.get("sku")
    if find_entry(sku, catalog) is None:
        raise CartValidationError("Unknown sku")

    qty = parse_int(raw.get("qty"))
    if qty is None or not MIN_CATALOG_QTY <= qty <= MAX_CATALOG_QTY:
        raise CartValidationError("Invalid qty")

    return CatalogCartEntry(sku=sku, quantity=qty)


def _parse_legacy_item(raw: Any) -> LegacyCartItem:
    raw = _as_mapping(raw)
    name = str(_first_present(raw, ("nom", "name")) or DEFAULT_ITEM_NAME)

    price = parse_decimal(_first_present(raw, ("prix", "price")))
    unit_amount = to_minor_units(price) if price is not None and price > 0 else 0
    if unit_amount < 1:
        raise CartValidationError(f"Invalid price for item: {name}")

    raw_quantity = _first_present(raw, ("quantite", "quantity"))
    quantity = 1 if raw_quantity is None else parse_int(raw_quantity)
    if quantity is None or quantity < 1:
        raise CartValidationError(f"Invalid quantity for item: {name}")

    return LegacyCartItem(name=name, unit_amount=unit_amount, quantity=quantity)


def _optional_amount(value: Any) -> int:
    # Zero, negative or unparsable extras are dropped rather than rejected
    amount = parse_decimal(value)
    if amount is None or amount <= 0:
        return 0
    return to_minor_units(amount)


def parse_cart(payload: Any, catalog: Mapping[str, CatalogEntry] = CATALOG) -> Cart:
    """
    Decide which cart shape the payload carries and validate it.

    Raises:
        CartValidationError: with the message to return to the caller.
    """
    payload = _as_mapping(payload)

    cart = payload.get("cart")
    if _non_empty_sequence(cart):
        return CatalogCart(entries=[_parse_catalog_entry(entry, catalog) for entry in cart])

    items = payload.get("items")
    if _non_empty_sequence(items):
        return LegacyCart(
            items=[_parse_legacy_item(item) for item in items],
            shipping_amount=_optional_amount(_first_present(payload, ("livraison", "shipping"))),
            taxes_amount=_optional_amount(payload.get("taxes")),
        )

    raise CartValidationError("No items provided")


def build_line_items(
    cart: Cart,
    currency: str,
    catalog: Mapping[str, CatalogEntry] = CATALOG,
) -> List[LineItem]:
    """Map a validated cart to line items. `currency` applies to legacy carts only."""
    if cart.kind == "catalog":
        line_items = []
        for entry in cart.entries:
            product = catalog[entry.sku]
            line_items.append(LineItem(
                currency=product.currency,
                name=product.name,
                unit_amount=product.unit_amount,
                quantity=entry.quantity,
            ))
        return line_items

    line_items = [
        LineItem(currency=currency, name=item.name, unit_amount=item.unit_amount, quantity=item.quantity)
        for item in cart.items
    ]
    if cart.shipping_amount > 0:
        line_items.append(LineItem(currency=currency, name=SHIPPING_LINE_NAME, unit_amount=cart.shipping_amount, quantity=1))
    if cart.taxes_amount > 0:
        line_items.append(LineItem(currency=currency, name=TAXES_LINE_NAME, unit_amount=cart.taxes_amount, quantity=1))
    return line_items


__all__ = [
    "build_line_items",
    "parse_cart",
    "parse_decimal",
    "parse_int",
    "to_minor_units",
]
