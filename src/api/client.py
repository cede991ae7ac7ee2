"""HTTP client for the business-management REST API.

Every call goes through one shared ``httpx.AsyncClient``. Its default
``Authorization`` header is owned by the session store; nothing in this
package writes it.
"""

from typing import Any, Optional

import httpx

from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)

AUTH_HEADER = "Authorization"


class ApiError(Exception):
    """Error reported by the backend."""

    def __init__(self, status: int, message: str, details: Optional[dict] = None):
        self.status = status
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthFailure(ApiError):
    """Credentials rejected (401/403). The current session is left alone."""


class ApiUnavailable(Exception):
    """Backend could not be reached."""

    pass


def create_client(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the shared async client."""
    return httpx.AsyncClient(
        base_url=base_url or config.API_URL,
        timeout=timeout if timeout is not None else config.HTTP_TIMEOUT,
        headers={"Accept": "application/json"},
        transport=transport,
    )


def _handle_response(response: httpx.Response) -> Any:
    """Unwrap the ``{success, result, message}`` envelope or raise."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {"result": data}

    if response.is_error:
        message = data.get("message") or response.reason_phrase or "request failed"
        if response.status_code in (401, 403):
            raise AuthFailure(response.status_code, message, data)
        raise ApiError(response.status_code, message, data)

    if data.get("success") is False:
        raise ApiError(response.status_code, data.get("message") or "request failed", data)
    return data.get("result")


async def request(client: httpx.AsyncClient, method: str, path: str, **kwargs) -> Any:
    try:
        response = await client.request(method, path, **kwargs)
    except httpx.RequestError as e:
        _logger.error(f"{method} {path} failed: {e}")
        raise ApiUnavailable(str(e)) from e
    _logger.debug(f"{method} {path} -> {response.status_code}")
    return _handle_response(response)
