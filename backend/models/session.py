"""
Session state and the buzz-lock state machine.

A session is either Released (no team owns the lock) or Locked(i) (team i
owns it). `buzz_locked` mirrors that state so that

    buzz_locked == any(team.buzz_lock_owned for team in teams)

holds after every method below. None of these methods synchronise; the
registry serialises callers with the session's own lock.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from models.team import Team

TEAM_COUNT = 3


def _default_teams() -> list[Team]:
    return [Team(team_name=f"Team {i + 1}") for i in range(TEAM_COUNT)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BuzzResult(str, Enum):
    GRANTED = "Success"
    CONTENDED = "Locked"


class Session(BaseModel):
    teams: list[Team] = Field(
        default_factory=_default_teams, min_length=TEAM_COUNT, max_length=TEAM_COUNT,
    )
    buzz_locked: bool = False
    created_at: datetime = Field(default_factory=_utcnow, frozen=True)

    # ---------- Roster ----------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.teams):
            raise IndexError(f"team index {index} out of range")

    def snapshot(self) -> list[Team]:
        return [team.model_copy() for team in self.teams]

    def update_team(self, index: int, team: Team) -> Team:
        """
        Replaces the name and score of the team at `index`.

        `buzz_lock_owned` on the incoming team is ignored: ownership only
        changes through acquire_buzz / release_buzz.
        """
        self._check_index(index)
        current = self.teams[index]
        self.teams[index] = Team(
            team_name=team.team_name,
            score=team.score,
            buzz_lock_owned=current.buzz_lock_owned,
        )
        return self.teams[index].model_copy()

    # ---------- Buzz lock ----------

    @property
    def holder(self) -> Optional[int]:
        for i, team in enumerate(self.teams):
            if team.buzz_lock_owned:
                return i
        return None

    def acquire_buzz(self, index: int) -> BuzzResult:
        self._check_index(index)
        if self.buzz_locked:
            return BuzzResult.CONTENDED
        self.teams[index].buzz_lock_owned = True
        self.buzz_locked = True
        return BuzzResult.GRANTED

    def release_buzz(self) -> None:
        for team in self.teams:
            team.buzz_lock_owned = False
        self.buzz_locked = False

    # ---------- Expiry ----------

    def age(self, now: Optional[datetime] = None) -> timedelta:
        return (now or _utcnow()) - self.created_at

    def is_expired(self, ttl: timedelta, now: Optional[datetime] = None) -> bool:
        return self.age(now) >= ttl
