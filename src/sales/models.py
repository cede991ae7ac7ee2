# provide dataclass models for the sales desk

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional


class CartSignal(Enum):
    """Outcome of a cart mutation. Rejections leave the cart untouched."""

    OK = "ok"
    REMOVED = "removed"
    STOCK_EXCEEDED = "stock_exceeded"
    OUT_OF_STOCK = "out_of_stock"
    NOT_IN_CART = "not_in_cart"

    @property
    def rejected(self) -> bool:
        return self in (
            CartSignal.STOCK_EXCEEDED,
            CartSignal.OUT_OF_STOCK,
            CartSignal.NOT_IN_CART,
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    inventory: int
    min_threshold: Optional[int] = None
    image_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Product:
        image = data.get("image")
        image_url = image.get("imageUrl") if isinstance(image, Mapping) else image
        return cls(
            id=str(data.get("_id", data.get("id"))),
            name=data.get("name", ""),
            price=float(data.get("price") or 0),
            inventory=int(data.get("inventory") or 0),
            min_threshold=data.get("minThreshold"),
            image_url=image_url or None,
        )


@dataclass(frozen=True)
class LineItem:
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    max_stock: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Totals:
    subtotal: float
    discount_amount: float
    total: float


@dataclass(frozen=True)
class SaleLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class SaleRequest:
    customer: str
    customer_email: str
    discount: float
    products: List[SaleLine] = field(default_factory=list)

    def to_payload(self) -> dict:
        return {
            "customer": self.customer,
            "customerEmail": self.customer_email,
            "discount": self.discount,
            "products": [
                {"productId": line.product_id, "quantity": line.quantity}
                for line in self.products
            ],
        }
