# typed wrappers around the backend routes used by the client
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from api.client import request
from sales.models import Product, SaleRequest


# ---------------------------
# Auth & Profile
# ---------------------------


async def login(client: httpx.AsyncClient, username: str, password: str) -> Dict[str, Any]:
    """Return ``{token, user}``. Raises AuthFailure on bad credentials."""
    return await request(
        client, "POST", "/user/login", json={"username": username, "password": password}
    )


async def register(
    client: httpx.AsyncClient,
    username: str,
    email: str,
    password: str,
    mobile: str = "",
) -> Dict[str, Any]:
    payload = {"username": username, "email": email, "password": password}
    if mobile:
        payload["mobile"] = mobile
    return await request(client, "POST", "/user/register", json=payload)


async def google_login(client: httpx.AsyncClient, credential: str) -> Dict[str, Any]:
    """Exchange a Google id token for a session."""
    return await request(client, "POST", "/user/google-login", json={"token": credential})


async def fetch_profile(client: httpx.AsyncClient) -> Dict[str, Any]:
    """Current user for whatever token the client carries."""
    return await request(client, "GET", "/user/profile")


async def update_profile(
    client: httpx.AsyncClient,
    user_id: str,
    username: str,
    email: str,
    mobile: str,
    image: Optional[bytes] = None,
    image_name: str = "avatar.png",
) -> Dict[str, Any]:
    data = {"userId": user_id, "username": username, "mobile": mobile, "email": email}
    files = {"image": (image_name, image)} if image else None
    return await request(client, "PUT", "/user/profile", data=data, files=files)


async def reset_password(
    client: httpx.AsyncClient, user_id: str, reset_token: str, new_password: str
) -> Any:
    """403 here means the account signs in through Google."""
    return await request(
        client,
        "POST",
        "/pass/reset",
        json={"id": user_id, "token": reset_token, "newPassword": new_password},
    )


# ---------------------------
# Catalog & Sales
# ---------------------------


async def list_products(client: httpx.AsyncClient) -> List[Product]:
    rows = await request(client, "GET", "/products/getproducts")
    return [Product.from_api(row) for row in rows or []]


async def create_sale(client: httpx.AsyncClient, sale: SaleRequest) -> Any:
    return await request(client, "POST", "/sales/create", json=sale.to_payload())
