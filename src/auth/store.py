"""Session store.

Single holder of the auth token and user profile for one running client.
It owns the ``Authorization`` header of the shared httpx client and mirrors
every state change into one of two storage slots:

- remember-me sessions go to the durable slot,
- the rest go to the ephemeral slot,

and whichever slot is not chosen is emptied. Persistence is best effort;
a failing slot never breaks login or logout.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from api import endpoints
from api.client import AUTH_HEADER
from auth.models import ANONYMOUS, Session, User, UserUpdate
from auth.storage import SNAPSHOT_KEY, PersistenceFailure, SnapshotStorage
from utils.logger import get_logger

_logger = get_logger(__name__)

ProfileLoader = Callable[[], Awaitable[Mapping[str, Any]]]

_UPDATABLE = frozenset(UserUpdate.__optional_keys__)


class SessionStore:
    def __init__(
        self,
        http: httpx.AsyncClient,
        durable: SnapshotStorage,
        ephemeral: SnapshotStorage,
        profile_loader: Optional[ProfileLoader] = None,
    ):
        self._http = http
        self._durable = durable
        self._ephemeral = ephemeral
        self._load_profile = profile_loader or (lambda: endpoints.fetch_profile(http))

        self._session: Session = ANONYMOUS
        self._persist_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task] = None
        self._refresh_token: Optional[str] = None

    # ---------------------------
    # Read accessors
    # ---------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def select_user(self) -> Optional[User]:
        return self._session.user

    def select_user_id(self) -> Optional[str]:
        user = self._session.user
        return user.id if user else None

    # ---------------------------
    # Lifecycle
    # ---------------------------

    async def restore(self) -> Session:
        """
        Load the last snapshot, durable slot first.

        The header is in place before this returns, so the caller can start
        issuing requests right after awaiting it.
        """
        session = await self._read_snapshot(self._durable, "durable")
        if session is None:
            session = await self._read_snapshot(self._ephemeral, "ephemeral")
        if session is None or not session.is_authenticated:
            _logger.debug("No stored session, starting anonymous")
            return self._session

        self._set_session(session)
        _logger.info(f"Restored session for user {self.select_user_id() or '<pending>'}")
        self._schedule_refresh()
        return self._session

    async def aclose(self) -> None:
        await self._cancel_refresh()

    # ---------------------------
    # Mutations
    # ---------------------------

    async def login(self, payload: Mapping[str, Any]) -> None:
        """
        Accept ``{token, user, rememberMe?}`` from a login, registration or
        OAuth callback.
        """
        token = str(payload["token"])
        user = payload.get("user")
        if isinstance(user, Mapping):
            user = User.from_api(user)
        remember_me = payload.get("rememberMe", payload.get("remember_me"))
        if user is not None and remember_me is not None:
            user = replace(user, remember_me=bool(remember_me))

        self._set_session(Session(token=token, user=user))
        _logger.info(f"Logged in as {user.username if user else '<pending profile>'}")
        await self._persist()
        self._schedule_refresh()

    async def update_user(self, **changes: Any) -> bool:
        """
        Merge ``changes`` into the current user.

        Does nothing and returns False when no user is set. Names outside
        UserUpdate raise TypeError.
        """
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise TypeError(f"update_user() got unknown fields: {', '.join(sorted(unknown))}")

        user = self._session.user
        if user is None:
            _logger.debug("update_user ignored, no user in session")
            return False

        merged = replace(user, **changes)
        self._set_session(Session(token=self._session.token, user=merged))
        await self._persist()
        return True

    async def logout(self) -> None:
        self._set_session(ANONYMOUS)
        await self._cancel_refresh()
        _logger.info("Logged out")
        await self._persist()

    # ---------------------------
    # Side effects
    # ---------------------------

    def _set_session(self, session: Session) -> None:
        # state and header change in one synchronous step, no request can
        # be dispatched in between
        self._session = session
        if session.token:
            self._http.headers[AUTH_HEADER] = f"Bearer {session.token}"
        else:
            self._http.headers.pop(AUTH_HEADER, None)

    async def _persist(self) -> None:
        async with self._persist_lock:
            # serialize under the lock so the newest state always wins
            session = self._session
            try:
                if not session.is_authenticated:
                    await self._durable.delete(SNAPSHOT_KEY)
                    await self._ephemeral.delete(SNAPSHOT_KEY)
                    return

                blob = json.dumps(session.to_snapshot())
                if session.remember_me:
                    await self._durable.set(SNAPSHOT_KEY, blob)
                    await self._ephemeral.delete(SNAPSHOT_KEY)
                else:
                    await self._ephemeral.set(SNAPSHOT_KEY, blob)
                    await self._durable.delete(SNAPSHOT_KEY)
            except (PersistenceFailure, TypeError, ValueError) as e:
                _logger.debug(f"Session snapshot not saved: {e}")

    @staticmethod
    async def _read_snapshot(storage: SnapshotStorage, label: str) -> Optional[Session]:
        try:
            blob = await storage.get(SNAPSHOT_KEY)
            if not blob:
                return None
            data = json.loads(blob)
            if not isinstance(data, dict):
                return None
            return Session.from_snapshot(data)
        except (PersistenceFailure, TypeError, ValueError) as e:
            _logger.debug(f"Ignoring unreadable {label} snapshot: {e}")
            return None

    # ---------------------------
    # Profile refresh
    # ---------------------------

    def _schedule_refresh(self) -> None:
        token = self._session.token
        if token is None:
            return
        task = self._refresh_task
        if task is not None and not task.done():
            if self._refresh_token == token:
                return
            task.cancel()
        self._refresh_token = token
        self._refresh_task = asyncio.create_task(self._refresh_profile(token))

    async def _cancel_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        self._refresh_token = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait_for_refresh(self) -> None:
        """Block until the pending profile refresh, if any, has settled."""
        task = self._refresh_task
        if task is not None:
            # asyncio.wait leaves the task running if the waiter is cancelled
            await asyncio.wait({task})

    async def _refresh_profile(self, token: str) -> None:
        try:
            profile = await self._load_profile()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            _logger.warning(f"Profile refresh failed: {e}")
            return

        if self._session.token != token:
            _logger.debug("Discarding profile for a session that has ended")
            return
        if not profile:
            return
        if not isinstance(profile, Mapping):
            _logger.warning(
                f"Profile refresh returned a {type(profile).__name__}, expected an object"
            )
            return

        if self._session.user is None:
            try:
                user = User.from_api(profile)
            except (TypeError, ValueError) as e:
                _logger.warning(f"Profile refresh returned an unusable user: {e}")
                return
            self._set_session(Session(token=token, user=user))
            await self._persist()
            return

        changes = User.changes_from_api(profile)
        changes.pop("id", None)
        # remember-me is a local preference, the server does not own it
        changes.pop("remember_me", None)
        await self.update_user(**changes)
