"""
Unit tests for MatchService: idempotent creation, the duplicate-key race,
party-only access and unmatching.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from swipematch.core.exceptions import Forbidden, MatchAlreadyExists, MatchNotFound
from swipematch.models.match import Match
from swipematch.models.user import User, UserRole
from swipematch.services.match_service import MatchService
from swipematch.utils.pagination import PaginationParams


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def _make_user(role: UserRole, user_id: uuid.UUID | None = None) -> User:
    user = User()
    user.id = user_id or uuid.uuid4()
    user.email = f"{role.value}@example.com"
    user.role = role
    user.is_active = True
    user.cooldown_days = 30
    return user


def _make_match(candidate_id: uuid.UUID | None = None, recruiter_id: uuid.UUID | None = None) -> Match:
    match = Match()
    match.id = uuid.uuid4()
    match.candidate_user_id = candidate_id or uuid.uuid4()
    match.recruiter_user_id = recruiter_id or uuid.uuid4()
    match.job_id = uuid.uuid4()
    return match


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT INTO matches", {}, Exception("uq_match_candidate_job"))


def _make_service(match_repo: MagicMock | None = None):
    repo = match_repo or MagicMock()
    cooldown = MagicMock()
    cooldown.record_unmatch = AsyncMock()
    notifications = MagicMock()
    analytics = MagicMock()
    service = MatchService(
        match_repo=repo,
        cooldown_service=cooldown,
        notification_service=notifications,
        analytics_service=analytics,
    )
    return service, repo, cooldown, notifications, analytics


# ---------------------------------------------------------------------------
# create_match
# ---------------------------------------------------------------------------
class TestCreateMatch:
    @pytest.mark.asyncio
    async def test_creates_and_fires_side_effects(self):
        created = _make_match()
        repo = MagicMock()
        repo.get_by_candidate_job = AsyncMock(return_value=None)
        repo.create = AsyncMock(return_value=created)
        service, _, _, notifications, analytics = _make_service(repo)
        db = AsyncMock()

        match, is_new = await service.create_match(
            db, created.candidate_user_id, created.recruiter_user_id, created.job_id
        )

        assert match is created
        assert is_new is True
        db.commit.assert_awaited_once()
        notifications.notify_match.assert_called_once_with(created)
        analytics.track_match.assert_called_once_with(created)

    @pytest.mark.asyncio
    async def test_existing_match_returned_without_side_effects(self):
        existing = _make_match()
        repo = MagicMock()
        repo.get_by_candidate_job = AsyncMock(return_value=existing)
        repo.create = AsyncMock()
        service, _, _, notifications, analytics = _make_service(repo)

        match, is_new = await service.create_match(
            AsyncMock(), existing.candidate_user_id, existing.recruiter_user_id, existing.job_id
        )

        assert match is existing
        assert is_new is False
        repo.create.assert_not_awaited()
        notifications.notify_match.assert_not_called()
        analytics.track_match.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_race_returns_winner(self):
        winner = _make_match()
        repo = MagicMock()
        # Pre-check sees nothing, insert collides, re-read finds the winner
        repo.get_by_candidate_job = AsyncMock(side_effect=[None, winner])
        repo.create = AsyncMock(side_effect=_integrity_error())
        service, _, _, notifications, _ = _make_service(repo)

        match, is_new = await service.create_match(
            AsyncMock(), winner.candidate_user_id, winner.recruiter_user_id, winner.job_id
        )

        assert match is winner
        assert is_new is False
        notifications.notify_match.assert_not_called()

    @pytest.mark.asyncio
    async def test_integrity_error_without_winner_propagates(self):
        repo = MagicMock()
        repo.get_by_candidate_job = AsyncMock(return_value=None)
        repo.create = AsyncMock(side_effect=_integrity_error())
        service, *_ = _make_service(repo)

        with pytest.raises(MatchAlreadyExists):
            await service.create_match(AsyncMock(), uuid.uuid4(), uuid.uuid4(), uuid.uuid4())


# ---------------------------------------------------------------------------
# get_match / list_matches
# ---------------------------------------------------------------------------
class TestGetMatch:
    @pytest.mark.asyncio
    async def test_party_can_read(self):
        candidate = _make_user(UserRole.CANDIDATE)
        match = _make_match(candidate_id=candidate.id)
        repo = MagicMock()
        repo.get = AsyncMock(return_value=match)
        service, *_ = _make_service(repo)

        assert await service.get_match(AsyncMock(), match.id, candidate) is match

    @pytest.mark.asyncio
    async def test_missing_raises_not_found(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=None)
        service, *_ = _make_service(repo)

        with pytest.raises(MatchNotFound):
            await service.get_match(AsyncMock(), uuid.uuid4(), _make_user(UserRole.CANDIDATE))

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=_make_match())
        service, *_ = _make_service(repo)

        with pytest.raises(Forbidden):
            await service.get_match(AsyncMock(), uuid.uuid4(), _make_user(UserRole.RECRUITER))

    @pytest.mark.asyncio
    async def test_list_uses_role_side_and_pagination(self):
        recruiter = _make_user(UserRole.RECRUITER)
        repo = MagicMock()
        repo.list_for_user = AsyncMock(return_value=([], 0))
        service, *_ = _make_service(repo)

        await service.list_matches(AsyncMock(), recruiter, PaginationParams(page=3, page_size=10))

        args, kwargs = repo.list_for_user.await_args
        assert args[1] == recruiter.id
        assert args[2] == UserRole.RECRUITER
        assert kwargs == {"skip": 20, "limit": 10}


# ---------------------------------------------------------------------------
# delete_match
# ---------------------------------------------------------------------------
class TestDeleteMatch:
    @pytest.mark.asyncio
    async def test_either_party_unmatches_and_records_cooldown(self):
        recruiter = _make_user(UserRole.RECRUITER)
        match = _make_match(recruiter_id=recruiter.id)
        repo = MagicMock()
        repo.get = AsyncMock(return_value=match)
        repo.delete = AsyncMock(return_value=True)
        service, _, cooldown, notifications, _ = _make_service(repo)
        db = AsyncMock()

        await service.delete_match(db, match.id, recruiter)

        repo.delete.assert_awaited_once_with(db, match.id)
        cooldown.record_unmatch.assert_awaited_once_with(
            db, match.candidate_user_id, match.recruiter_user_id
        )
        db.commit.assert_awaited_once()
        notifications.end_match.assert_called_once_with(match.id)

    @pytest.mark.asyncio
    async def test_outsider_cannot_unmatch(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=_make_match())
        repo.delete = AsyncMock()
        service, _, cooldown, notifications, _ = _make_service(repo)

        with pytest.raises(Forbidden):
            await service.delete_match(AsyncMock(), uuid.uuid4(), _make_user(UserRole.CANDIDATE))

        repo.delete.assert_not_awaited()
        cooldown.record_unmatch.assert_not_awaited()
        notifications.end_match.assert_not_called()
