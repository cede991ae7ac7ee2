from typing import Optional

import httpx

from api import endpoints
from auth.models import User
from auth.store import SessionStore
from utils.logger import get_logger

_logger = get_logger(__name__)


class ProfileRejected(ValueError):
    """Profile not sent: nobody signed in, or a required field is blank."""


async def save_profile(
    client: httpx.AsyncClient,
    store: SessionStore,
    username: str,
    email: str,
    mobile: str,
    image: Optional[bytes] = None,
    image_name: str = "avatar.png",
) -> User:
    """
    Send the edited profile and merge what the backend stored into the
    session, which persists it like any other user change.
    """
    user = store.select_user()
    if user is None:
        raise ProfileRejected("No user is signed in")
    username, email, mobile = username.strip(), email.strip(), mobile.strip()
    if not username or not email:
        raise ProfileRejected("Username and email are required")

    result = await endpoints.update_profile(
        client, user.id, username, email, mobile, image=image, image_name=image_name
    )

    if isinstance(result, dict):
        changes = User.changes_from_api(result)
    else:
        changes = {}
    if not changes:
        # backend acknowledged without echoing the record
        changes = {"username": username, "email": email, "mobile": mobile}
    changes.pop("id", None)
    changes.pop("remember_me", None)

    await store.update_user(**changes)
    _logger.info(f"Profile updated for user {user.id}")
    return store.select_user()
