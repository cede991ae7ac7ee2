# key-value slots the session snapshot is persisted to
import asyncio
import os.path
from contextlib import asynccontextmanager
from typing import Dict, Optional, Protocol

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

SNAPSHOT_KEY = "sessionState"


class PersistenceFailure(Exception):
    """A storage slot could not be read or written."""


class SnapshotStorage(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryStorage:
    """
    Ephemeral slot. Lives as long as the process, so a screen reload keeps
    the session but a restart does not.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteStorage:
    """
    Durable slot backed by a small sqlite file, survives restarts.
    """

    def __init__(self, path: str):
        self.path = path
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def _init_db(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        await conn.commit()

    @asynccontextmanager
    async def connect(self):
        """Yield a connection, creating the file and table on first use."""
        try:
            folder = os.path.dirname(self.path)
            if folder and not os.path.isdir(folder):
                os.makedirs(folder, exist_ok=True)
            conn = await aiosqlite.connect(self.path)
        except (OSError, aiosqlite.Error) as e:
            raise PersistenceFailure(f"cannot open {self.path}: {e}") from e

        try:
            if not self._initialized:
                async with self._init_lock:
                    if not self._initialized:
                        _logger.debug(f"Initializing session store at {self.path}")
                        await self._init_db(conn)
                        self._initialized = True
            yield conn
        except aiosqlite.Error as e:
            raise PersistenceFailure(str(e)) from e
        finally:
            await conn.close()

    async def get(self, key: str) -> Optional[str]:
        async with self.connect() as conn:
            cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
            row = await cur.fetchone()
            await cur.close()
            return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        async with self.connect() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO kv(key, value) VALUES (?, ?);", (key, value)
            )
            await conn.commit()

    async def delete(self, key: str) -> None:
        async with self.connect() as conn:
            await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
            await conn.commit()
