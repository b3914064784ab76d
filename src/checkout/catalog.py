"""Server-side product catalog. Catalog carts are priced only from here."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    unit_amount: int  # minor units
    currency: str


CATALOG: Mapping[str, CatalogEntry] = MappingProxyType({
    "livre_magog": CatalogEntry(name="Livre Magog", unit_amount=2499, currency="cad"),
    "livre_magog_numerique": CatalogEntry(name="Livre Magog (numérique)", unit_amount=1499, currency="cad"),
    "livraison_locale": CatalogEntry(name="Livraison locale", unit_amount=599, currency="cad"),
    "livraison_postale": CatalogEntry(name="Livraison postale", unit_amount=1299, currency="cad"),
})


def find_entry(sku: object, catalog: Mapping[str, CatalogEntry] = CATALOG) -> Optional[CatalogEntry]:
    if not isinstance(sku, str):
        return None
    return catalog.get(sku)


__all__ = ["CATALOG", "CatalogEntry", "find_entry"]
