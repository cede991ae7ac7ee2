from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from auth.store import SessionStore
from sales.cart import Cart
from utils.pure import clamp_discount


@dataclass
class AppState:
    """
    Everything the screens share, handed around explicitly via ``app.state``.

    Fields:
      - http: the one httpx client every API call goes through
      - session: token + user, owns the client's Authorization header
      - cart: the sale being rung up
      - discount: percentage for the current sale, always within [0, 100]
    """

    http: httpx.AsyncClient
    session: SessionStore
    cart: Cart = field(default_factory=Cart)
    discount: float = 0.0

    def set_discount(self, raw) -> float:
        self.discount = clamp_discount(raw)
        return self.discount

    def reset_sale(self) -> None:
        self.cart.clear()
        self.discount = 0.0

    async def end_session(self) -> None:
        """Log out and drop the sale in progress."""
        self.reset_sale()
        await self.session.logout()

    async def aclose(self) -> None:
        await self.session.aclose()
        await self.http.aclose()
