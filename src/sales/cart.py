from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from sales.models import CartSignal, LineItem, Product, SaleLine, Totals


def compute_totals(items: Iterable[LineItem], discount_percent: float) -> Totals:
    """
    Price a set of line items.

    ``discount_percent`` is expected to be clamped to [0, 100] already
    (see utils.pure.clamp_discount); nothing is clamped here.
    """
    subtotal = sum(item.unit_price * item.quantity for item in items)
    discount_amount = subtotal * discount_percent / 100
    return Totals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        total=subtotal - discount_amount,
    )


class Cart:
    """
    Working set of items for one sale.

    Every line item keeps 1 <= quantity <= max_stock. Mutations that would
    break that are refused and reported through the returned CartSignal.
    """

    def __init__(self):
        # dicts keep insertion order, which is the display order
        self._items: Dict[str, LineItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._items

    def __iter__(self) -> Iterator[LineItem]:
        return iter(list(self._items.values()))

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get(self, product_id: str) -> Optional[LineItem]:
        return self._items.get(product_id)

    def add_item(self, product: Product) -> CartSignal:
        existing = self._items.get(product.id)
        if existing is not None:
            if existing.quantity + 1 > product.inventory:
                return CartSignal.STOCK_EXCEEDED
            self._items[product.id] = replace(
                existing, quantity=existing.quantity + 1, max_stock=product.inventory
            )
            return CartSignal.OK

        if product.inventory <= 0:
            return CartSignal.OUT_OF_STOCK
        self._items[product.id] = LineItem(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=1,
            max_stock=product.inventory,
        )
        return CartSignal.OK

    def set_quantity(self, product_id: str, quantity: int) -> CartSignal:
        item = self._items.get(product_id)
        if quantity < 1:
            self.remove_item(product_id)
            return CartSignal.REMOVED
        if item is None:
            return CartSignal.NOT_IN_CART
        if quantity > item.max_stock:
            return CartSignal.STOCK_EXCEEDED
        self._items[product_id] = replace(item, quantity=quantity)
        return CartSignal.OK

    def remove_item(self, product_id: str) -> bool:
        return self._items.pop(product_id, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def compute_totals(self, discount_percent: float) -> Totals:
        return compute_totals(self._items.values(), discount_percent)

    def to_sale_lines(self) -> List[SaleLine]:
        return [
            SaleLine(product_id=item.product_id, quantity=item.quantity)
            for item in self._items.values()
        ]
