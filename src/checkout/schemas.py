from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CatalogCartEntry(BaseModel):
    sku: str = Field(..., description="Catalog product code")
    quantity: int = Field(..., ge=1, le=50)


class CatalogCart(BaseModel):
    kind: Literal["catalog"] = "catalog"
    entries: List[CatalogCartEntry]


class LegacyCartItem(BaseModel):
    name: str = Field(default="Item")
    unit_amount: int = Field(..., gt=0, description="Unit price in minor units")
    quantity: int = Field(default=1, ge=1)


class LegacyCart(BaseModel):
    kind: Literal["legacy"] = "legacy"
    items: List[LegacyCartItem]
    shipping_amount: int = Field(default=0, ge=0, description="Minor units, 0 when absent")
    taxes_amount: int = Field(default=0, ge=0, description="Minor units, 0 when absent")


Cart = Annotated[Union[CatalogCart, LegacyCart], Field(discriminator="kind")]


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str
    name: str
    unit_amount: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)

    def to_price_data(self) -> Dict[str, Any]:
        """Render in the shape the payment provider expects for ad-hoc prices."""
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": self.name},
                "unit_amount": self.unit_amount,
            },
            "quantity": self.quantity,
        }


class CheckoutSessionRef(BaseModel):
    id: str
    url: Optional[str] = None


class SessionStatus(BaseModel):
    payment_status: str
    order_token: Optional[str] = None

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"

    def to_response(self) -> Dict[str, Any]:
        return {
            "paid": self.paid,
            "payment_status": self.payment_status,
            "orderToken": self.order_token,
        }


__all__ = [
    "Cart",
    "CatalogCart",
    "CatalogCartEntry",
    "CheckoutSessionRef",
    "LegacyCart",
    "LegacyCartItem",
    "LineItem",
    "SessionStatus",
]
