"""
Unit tests for the Session model and its buzz-lock state machine.

No locking here; the registry tests cover concurrency.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from models.session import BuzzResult, Session, TEAM_COUNT
from models.team import Team


def _assert_lock_consistent(session: Session):
    owners = [t for t in session.teams if t.buzz_lock_owned]
    assert len(owners) <= 1
    assert session.buzz_locked == bool(owners)


class TestDefaults:

    def test_three_default_teams(self):
        session = Session()
        assert len(session.teams) == TEAM_COUNT == 3
        assert [t.team_name for t in session.teams] == ["Team 1", "Team 2", "Team 3"]
        assert all(t.score == 0 and not t.buzz_lock_owned for t in session.teams)
        assert session.buzz_locked is False
        assert session.holder is None

    def test_created_at_is_utc(self):
        session = Session()
        assert session.created_at.tzinfo is not None
        assert session.age() >= timedelta(0)

    def test_sessions_do_not_share_teams(self):
        a, b = Session(), Session()
        a.teams[0].score = 10
        assert b.teams[0].score == 0

    def test_created_at_cannot_change(self):
        session = Session()
        with pytest.raises(ValidationError):
            session.created_at = datetime(2000, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("count", [0, 2, 4])
    def test_roster_must_have_three_teams(self, count):
        with pytest.raises(ValidationError):
            Session(teams=[Team(team_name=f"T{i}") for i in range(count)])


class TestBuzzLock:

    def setup_method(self):
        self.session = Session()

    def test_first_buzz_is_granted(self):
        assert self.session.acquire_buzz(1) is BuzzResult.GRANTED
        assert self.session.holder == 1
        _assert_lock_consistent(self.session)

    def test_second_buzz_is_contended(self):
        self.session.acquire_buzz(1)
        assert self.session.acquire_buzz(2) is BuzzResult.CONTENDED
        assert self.session.holder == 1
        assert not self.session.teams[2].buzz_lock_owned
        _assert_lock_consistent(self.session)

    def test_same_team_buzzing_twice_is_contended(self):
        self.session.acquire_buzz(0)
        assert self.session.acquire_buzz(0) is BuzzResult.CONTENDED
        assert self.session.holder == 0

    def test_release_clears_everything(self):
        self.session.acquire_buzz(2)
        self.session.release_buzz()
        assert self.session.buzz_locked is False
        assert self.session.holder is None
        _assert_lock_consistent(self.session)

    def test_release_is_idempotent(self):
        self.session.release_buzz()
        self.session.release_buzz()
        assert not any(t.buzz_lock_owned for t in self.session.teams)
        assert self.session.buzz_locked is False

    def test_buzz_after_release_is_granted(self):
        self.session.acquire_buzz(1)
        self.session.release_buzz()
        assert self.session.acquire_buzz(2) is BuzzResult.GRANTED
        assert self.session.holder == 2

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_invalid_index_raises_without_side_effects(self, index):
        with pytest.raises(IndexError):
            self.session.acquire_buzz(index)
        assert self.session.buzz_locked is False

    def test_invalid_index_while_locked_still_raises(self):
        self.session.acquire_buzz(0)
        with pytest.raises(IndexError):
            self.session.acquire_buzz(5)

    def test_result_values_match_wire_format(self):
        assert BuzzResult.GRANTED.value == "Success"
        assert BuzzResult.CONTENDED.value == "Locked"


class TestUpdateTeam:

    def setup_method(self):
        self.session = Session()

    def test_replaces_name_and_score(self):
        stored = self.session.update_team(1, Team(team_name="Owls", score=-5))
        assert stored == Team(team_name="Owls", score=-5, buzz_lock_owned=False)
        assert self.session.teams[1].team_name == "Owls"
        assert self.session.teams[1].score == -5

    def test_cannot_grant_ownership(self):
        stored = self.session.update_team(0, Team(team_name="Cheat", score=1, buzz_lock_owned=True))
        assert stored.buzz_lock_owned is False
        assert self.session.buzz_locked is False
        _assert_lock_consistent(self.session)

    def test_cannot_revoke_ownership(self):
        self.session.acquire_buzz(2)
        stored = self.session.update_team(2, Team(team_name="Team 3", score=10, buzz_lock_owned=False))
        assert stored.buzz_lock_owned is True
        assert stored.score == 10
        assert self.session.holder == 2
        _assert_lock_consistent(self.session)

    def test_returned_team_is_a_copy(self):
        stored = self.session.update_team(0, Team(team_name="A", score=1))
        stored.score = 1000
        assert self.session.teams[0].score == 1

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            self.session.update_team(3, Team(team_name="X"))

    def test_snapshot_is_detached(self):
        snap = self.session.snapshot()
        snap[0].score = 42
        assert self.session.teams[0].score == 0


class TestExpiry:

    def setup_method(self):
        self.created = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.session = Session(created_at=self.created)
        self.ttl = timedelta(hours=1)

    def test_not_expired_before_ttl(self):
        now = self.created + self.ttl - timedelta(microseconds=1)
        assert not self.session.is_expired(self.ttl, now)

    def test_expired_at_ttl(self):
        assert self.session.is_expired(self.ttl, self.created + self.ttl)

    def test_expired_after_ttl(self):
        assert self.session.is_expired(self.ttl, self.created + timedelta(hours=5))

    def test_age(self):
        assert self.session.age(self.created + timedelta(minutes=7)) == timedelta(minutes=7)


class TestTeamScore:

    def test_accepts_32_bit_bounds(self):
        assert Team(team_name="Low", score=-2**31).score == -2**31
        assert Team(team_name="High", score=2**31 - 1).score == 2**31 - 1

    @pytest.mark.parametrize("score", [2**31, -2**31 - 1, "12", 1.0])
    def test_rejects_out_of_range_or_coerced(self, score):
        with pytest.raises(ValidationError):
            Team(team_name="X", score=score)
