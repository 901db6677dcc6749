"""
Unit tests for Pydantic schema validators and pagination helpers.

Verifies that schemas correctly accept valid data and reject invalid data
with appropriate error messages.
"""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from swipematch.models.swipe import SwipeDirection, SwipeTargetType
from swipematch.schemas.candidate import FeedFilters
from swipematch.schemas.message import MessageCreate
from swipematch.schemas.swipe import CandidateTarget, JobTarget, SwipeCreate
from swipematch.schemas.user import CooldownUpdate
from swipematch.utils.pagination import (
    PaginationMeta,
    PaginationParams,
    calculate_offset,
    calculate_total_pages,
)


# ---------------------------------------------------------------------------
# SwipeCreate
# ---------------------------------------------------------------------------
class TestSwipeCreate:
    def test_job_target(self):
        target_id = uuid.uuid4()
        data = SwipeCreate(target={"type": "job", "id": str(target_id)}, direction="right")
        assert isinstance(data.target, JobTarget)
        assert data.target.id == target_id
        assert data.target.target_type == SwipeTargetType.JOB
        assert data.direction == SwipeDirection.RIGHT

    def test_candidate_target(self):
        data = SwipeCreate(target={"type": "candidate", "id": str(uuid.uuid4())}, direction="left")
        assert isinstance(data.target, CandidateTarget)
        assert data.target.target_type == SwipeTargetType.CANDIDATE

    def test_unknown_target_type_raises(self):
        with pytest.raises(ValidationError):
            SwipeCreate(target={"type": "company", "id": str(uuid.uuid4())}, direction="right")

    def test_invalid_direction_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            SwipeCreate(target={"type": "job", "id": str(uuid.uuid4())}, direction="up")
        errors = exc_info.value.errors()
        assert any(e["loc"] == ("direction",) for e in errors)

    def test_invalid_uuid_raises(self):
        with pytest.raises(ValidationError):
            SwipeCreate(target={"type": "job", "id": "not-a-uuid"}, direction="right")


# ---------------------------------------------------------------------------
# MessageCreate
# ---------------------------------------------------------------------------
class TestMessageCreate:
    def test_body_is_stripped(self):
        data = MessageCreate(match_id=uuid.uuid4(), body="  hello  ")
        assert data.body == "hello"

    def test_whitespace_only_body_raises(self):
        with pytest.raises(ValidationError):
            MessageCreate(match_id=uuid.uuid4(), body="   ")

    def test_too_long_body_raises(self):
        with pytest.raises(ValidationError):
            MessageCreate(match_id=uuid.uuid4(), body="x" * 2001)


# ---------------------------------------------------------------------------
# CooldownUpdate
# ---------------------------------------------------------------------------
class TestCooldownUpdate:
    @pytest.mark.parametrize("days", [1, 30, 90])
    def test_valid_range(self, days):
        assert CooldownUpdate(cooldown_days=days).cooldown_days == days

    @pytest.mark.parametrize("days", [0, 91, -1])
    def test_out_of_range_raises(self, days):
        with pytest.raises(ValidationError):
            CooldownUpdate(cooldown_days=days)


# ---------------------------------------------------------------------------
# FeedFilters
# ---------------------------------------------------------------------------
class TestFeedFilters:
    def test_comma_separated_skills(self):
        assert FeedFilters(skills="python, fastapi,,").skills == ["python", "fastapi"]

    def test_list_skills(self):
        assert FeedFilters(skills=["go", " rust "]).skills == ["go", "rust"]

    def test_defaults(self):
        filters = FeedFilters()
        assert filters.skills == []
        assert filters.location is None
        assert filters.min_yoe is None

    def test_negative_experience_raises(self):
        with pytest.raises(ValidationError):
            FeedFilters(min_yoe=-1)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
class TestPagination:
    def test_offset(self):
        assert calculate_offset(1, 20) == 0
        assert calculate_offset(3, 10) == 20

    def test_offset_rejects_page_zero(self):
        with pytest.raises(ValueError):
            calculate_offset(0, 20)

    def test_total_pages(self):
        assert calculate_total_pages(95, 20) == 5
        assert calculate_total_pages(0, 20) == 0

    def test_meta_flags(self):
        meta = PaginationMeta.from_params(PaginationParams(page=2, page_size=10), total=25)
        assert meta.total_pages == 3
        assert meta.has_next is True
        assert meta.has_previous is True

    def test_page_size_capped(self):
        with pytest.raises(ValidationError):
            PaginationParams(page=1, page_size=101)
