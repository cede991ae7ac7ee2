from typing import Any

import httpx

from api import endpoints
from sales.cart import Cart
from sales.models import SaleRequest
from utils.logger import get_logger

_logger = get_logger(__name__)


class CheckoutRejected(ValueError):
    """Sale not sent: missing customer details or empty cart."""


def build_sale(cart: Cart, customer: str, customer_email: str, discount: float) -> SaleRequest:
    customer = customer.strip()
    customer_email = customer_email.strip()
    if not customer or not customer_email:
        raise CheckoutRejected("Please enter customer details")
    if cart.is_empty:
        raise CheckoutRejected("Cart is empty")
    return SaleRequest(
        customer=customer,
        customer_email=customer_email,
        discount=float(discount),
        products=cart.to_sale_lines(),
    )


async def submit_sale(
    client: httpx.AsyncClient,
    cart: Cart,
    customer: str,
    customer_email: str,
    discount: float,
) -> Any:
    """
    Post the cart as a sale and empty it once the backend accepts.

    On any error the cart is kept so the operator can retry.
    """
    sale = build_sale(cart, customer, customer_email, discount)
    result = await endpoints.create_sale(client, sale)
    _logger.info(f"Sale recorded for {sale.customer} ({len(sale.products)} lines)")
    cart.clear()
    return result
