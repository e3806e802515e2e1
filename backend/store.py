"""
In-memory session registry shared across all routes.

Two tiers of locking:
  - a reader/writer lock over the mapping itself: lookups hold it shared,
    insertion and removal hold it exclusive;
  - one asyncio.Lock per session, held for every read or write of that
    session's fields.

The map lock is never held while waiting on a session lock, in either
direction, so a busy session cannot stall the sweep or lookups of other
sessions. Sessions live only in process memory and are lost on restart.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import AsyncIterator, Callable, Optional, TypeVar

from models.session import BuzzResult, Session
from models.team import Team

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionNotFound(LookupError):
    """The session id (or team index within it) does not currently exist."""

    def __init__(self, session_id: str, team_index: Optional[int] = None):
        self.session_id = session_id
        self.team_index = team_index
        if team_index is None:
            message = f"Session {session_id!r} not found"
        else:
            message = f"Team {team_index} not found in session {session_id!r}"
        super().__init__(message)


class ReadWriteLock:
    """
    asyncio reader/writer lock, writer-preferring.

    Readers pass through `_gate` only to register, so a writer holding it
    keeps new readers queued behind it while the current ones drain.
    Releases are synchronous: a cancelled waiter never holds anything.
    Neither side is reentrant.
    """

    def __init__(self) -> None:
        self._gate = asyncio.Lock()
        self._no_readers = asyncio.Event()
        self._no_readers.set()
        self._readers = 0

    async def acquire_read(self) -> None:
        async with self._gate:
            self._readers += 1
            self._no_readers.clear()

    def release_read(self) -> None:
        self._readers -= 1
        if self._readers == 0:
            self._no_readers.set()

    async def acquire_write(self) -> None:
        await self._gate.acquire()
        try:
            await self._no_readers.wait()
        except BaseException:
            self._gate.release()
            raise

    def release_write(self) -> None:
        self._gate.release()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        await self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        await self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass
class _Entry:
    session: Session
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    closed: bool = False


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, _Entry] = {}
        self._rw = ReadWriteLock()

    def __len__(self) -> int:
        return len(self._sessions)

    def ids(self) -> list[str]:
        return list(self._sessions)

    # ---------- Lifecycle ----------

    async def create(self, now: Optional[datetime] = None) -> str:
        """Inserts a session with three default teams and returns its id."""
        session_id = str(uuid.uuid4())
        session = Session() if now is None else Session(created_at=now)
        entry = _Entry(session=session)
        async with self._rw.write():
            self._sessions[session_id] = entry
        logger.info("Session %s started", session_id)
        return session_id

    async def exists(self, session_id: str) -> bool:
        async with self._rw.read():
            return session_id in self._sessions

    async def remove(self, session_id: str) -> bool:
        async with self._rw.write():
            entry = self._sessions.pop(session_id, None)
            if entry is None:
                return False
            entry.closed = True
        logger.info("Session %s closed", session_id)
        return True

    close = remove

    async def sweep_expired(self, ttl: timedelta, now: Optional[datetime] = None) -> int:
        """
        Removes every session whose age is at least `ttl`.

        Decides on `created_at` alone, which never changes after creation,
        so no session lock is taken. Returns the number of sessions removed.
        """
        async with self._rw.write():
            expired = [
                sid for sid, entry in self._sessions.items()
                if entry.session.is_expired(ttl, now)
            ]
            for sid in expired:
                self._sessions.pop(sid).closed = True

        if expired:
            logger.info("Swept %d expired session(s)", len(expired))
        return len(expired)

    # ---------- Exclusive access ----------

    @asynccontextmanager
    async def session(self, session_id: str) -> AsyncIterator[Session]:
        """
        Yields the session with its lock held.

        Raises SessionNotFound if the id is unknown, or if the session was
        removed while this caller waited for its lock. Removal does not wait
        for holders; work already under way finishes on the detached session.
        """
        async with self._rw.read():
            entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFound(session_id)
        async with entry.lock:
            if entry.closed:
                raise SessionNotFound(session_id)
            yield entry.session

    async def with_session(self, session_id: str, fn: Callable[[Session], T]) -> T:
        async with self.session(session_id) as session:
            return fn(session)

    # ---------- Team info ----------

    async def get_teams(self, session_id: str) -> list[Team]:
        return await self.with_session(session_id, Session.snapshot)

    async def set_team(self, session_id: str, index: int, team: Team) -> Team:
        async with self.session(session_id) as session:
            try:
                return session.update_team(index, team)
            except IndexError:
                raise SessionNotFound(session_id, index) from None

    # ---------- Buzz lock ----------

    async def acquire_buzz(self, session_id: str, index: int) -> BuzzResult:
        async with self.session(session_id) as session:
            try:
                result = session.acquire_buzz(index)
            except IndexError:
                raise SessionNotFound(session_id, index) from None

        if result is BuzzResult.GRANTED:
            logger.info("Session %s: team %d holds the buzz lock", session_id, index)
        else:
            logger.debug("Session %s: team %d lost the buzz race", session_id, index)
        return result

    async def release_buzz(self, session_id: str) -> None:
        await self.with_session(session_id, Session.release_buzz)
