"""
Integration tests for matches, unmatching, recruiter cooldown settings,
the discovery feed and match chat.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select

from swipematch.models.unmatch import UnmatchRecord
from tests.factories import (
    CandidateFactory,
    CandidateProfileFactory,
    FeedFilterPresetFactory,
    MatchFactory,
    MessageFactory,
    RecruiterFactory,
    UnmatchRecordFactory,
)


@pytest_asyncio.fixture
async def match(db_session, candidate, recruiter, job):
    return await MatchFactory.create_async(
        db_session,
        candidate_user_id=candidate.id,
        recruiter_user_id=recruiter.id,
        job_id=job.id,
    )


@pytest_asyncio.fixture
async def outsider_headers(db_session, auth_headers_for):
    outsider = await RecruiterFactory.create_async(db_session)
    return auth_headers_for(outsider)


def _feed_user_ids(response) -> set[str]:
    return {item["user_id"] for item in response.json()["candidates"]}


# ---------------------------------------------------------------------------
# /matches
# ---------------------------------------------------------------------------
class TestMatches:
    @pytest.mark.asyncio
    async def test_both_parties_list_the_match(self, async_client, match, candidate_headers, recruiter_headers):
        for headers in (candidate_headers, recruiter_headers):
            response = await async_client.get("/api/v1/matches", headers=headers)
            assert response.status_code == 200
            body = response.json()
            assert [item["id"] for item in body["items"]] == [str(match.id)]
            assert body["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_get_match(self, async_client, match, candidate_headers):
        response = await async_client.get(f"/api/v1/matches/{match.id}", headers=candidate_headers)

        assert response.status_code == 200
        assert response.json()["job_id"] == str(match.job_id)

    @pytest.mark.asyncio
    async def test_outsider_forbidden(self, async_client, match, outsider_headers):
        response = await async_client.get(f"/api/v1/matches/{match.id}", headers=outsider_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    @pytest.mark.asyncio
    async def test_missing_match(self, async_client, candidate_headers, unknown_id):
        response = await async_client.get(f"/api/v1/matches/{unknown_id}", headers=candidate_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "match_not_found"

    @pytest.mark.asyncio
    async def test_stats(self, async_client, match, recruiter_headers):
        stats = (await async_client.get("/api/v1/matches/stats", headers=recruiter_headers)).json()
        assert stats == {"total": 1, "today": 1, "this_week": 1}


class TestUnmatch:
    @pytest.mark.asyncio
    async def test_unmatch_records_recruiter_cooldown(
        self, async_client, db_session, match, candidate, recruiter, candidate_headers
    ):
        recruiter.cooldown_days = 14
        await db_session.flush()

        response = await async_client.delete(f"/api/v1/matches/{match.id}", headers=candidate_headers)

        assert response.status_code == 204
        follow_up = await async_client.get(f"/api/v1/matches/{match.id}", headers=candidate_headers)
        assert follow_up.status_code == 404

        records = (await db_session.execute(select(UnmatchRecord))).scalars().all()
        assert len(records) == 1
        assert records[0].candidate_user_id == candidate.id
        assert records[0].recruiter_user_id == recruiter.id
        assert records[0].cooldown_days == 14

    @pytest.mark.asyncio
    async def test_outsider_cannot_unmatch(self, async_client, match, outsider_headers):
        response = await async_client.delete(f"/api/v1/matches/{match.id}", headers=outsider_headers)
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# /me/cooldown
# ---------------------------------------------------------------------------
class TestCooldownSettings:
    @pytest.mark.asyncio
    async def test_default_and_update(self, async_client, recruiter_headers):
        current = await async_client.get("/api/v1/me/cooldown", headers=recruiter_headers)
        assert current.json() == {"cooldown_days": 30}

        updated = await async_client.put(
            "/api/v1/me/cooldown", json={"cooldown_days": 10}, headers=recruiter_headers
        )
        assert updated.status_code == 200
        assert updated.json() == {"cooldown_days": 10}

        again = await async_client.get("/api/v1/me/cooldown", headers=recruiter_headers)
        assert again.json() == {"cooldown_days": 10}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, 91])
    async def test_out_of_range(self, async_client, recruiter_headers, days):
        response = await async_client.put(
            "/api/v1/me/cooldown", json={"cooldown_days": days}, headers=recruiter_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_candidate_forbidden(self, async_client, candidate_headers):
        response = await async_client.put(
            "/api/v1/me/cooldown", json={"cooldown_days": 10}, headers=candidate_headers
        )
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# /candidates/feed
# ---------------------------------------------------------------------------
class TestCandidateFeed:
    @pytest.mark.asyncio
    async def test_candidate_cannot_browse(self, async_client, candidate_headers):
        response = await async_client.get("/api/v1/candidates/feed", headers=candidate_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_matched_candidate_hidden(self, async_client, candidate, candidate_profile, match, recruiter_headers):
        response = await async_client.get("/api/v1/candidates/feed", headers=recruiter_headers)

        assert response.status_code == 200
        assert str(candidate.id) not in _feed_user_ids(response)

    @pytest.mark.asyncio
    async def test_cooldown_hides_then_expires(
        self, async_client, db_session, candidate, candidate_profile, recruiter, recruiter_headers
    ):
        record = await UnmatchRecordFactory.create_async(
            db_session,
            candidate_user_id=candidate.id,
            recruiter_user_id=recruiter.id,
            cooldown_days=10,
            created_at=datetime.now(timezone.utc) - timedelta(days=5),
        )

        hidden = await async_client.get("/api/v1/candidates/feed", headers=recruiter_headers)
        assert str(candidate.id) not in _feed_user_ids(hidden)

        record.created_at = datetime.now(timezone.utc) - timedelta(days=11)
        await db_session.flush()

        visible = await async_client.get("/api/v1/candidates/feed", headers=recruiter_headers)
        assert str(candidate.id) in _feed_user_ids(visible)

    @pytest.mark.asyncio
    async def test_cooldown_is_per_recruiter(
        self, async_client, db_session, candidate, candidate_profile, recruiter, auth_headers_for
    ):
        other = await RecruiterFactory.create_async(db_session)
        await UnmatchRecordFactory.create_async(
            db_session, candidate_user_id=candidate.id, recruiter_user_id=recruiter.id, cooldown_days=30
        )

        response = await async_client.get("/api/v1/candidates/feed", headers=auth_headers_for(other))

        assert str(candidate.id) in _feed_user_ids(response)

    @pytest.mark.asyncio
    async def test_skill_filter_and_ranking(self, async_client, db_session, recruiter_headers):
        strong = await CandidateFactory.create_async(db_session)
        weak = await CandidateFactory.create_async(db_session)
        other = await CandidateFactory.create_async(db_session)
        await CandidateProfileFactory.create_async(db_session, user_id=weak.id, skills=["python"])
        await CandidateProfileFactory.create_async(db_session, user_id=strong.id, skills=["python", "kafka"])
        await CandidateProfileFactory.create_async(db_session, user_id=other.id, skills=["cobol"])

        response = await async_client.get(
            "/api/v1/candidates/feed?skills=python,kafka", headers=recruiter_headers
        )

        items = response.json()["candidates"]
        assert [item["user_id"] for item in items] == [str(strong.id), str(weak.id)]
        assert items[0]["score"] == 100.0

    @pytest.mark.asyncio
    async def test_finds_match_older_than_scan_window(self, async_client, db_session, monkeypatch, recruiter_headers):
        from swipematch.services.discovery_service import DiscoveryService

        monkeypatch.setattr(DiscoveryService, "SCAN_LIMIT", 2)
        now = datetime.now(timezone.utc)
        for hours in range(1, 6):
            user = await CandidateFactory.create_async(db_session)
            await CandidateProfileFactory.create_async(
                db_session, user_id=user.id, skills=["java"], last_active=now - timedelta(hours=hours)
            )
        oldest = await CandidateFactory.create_async(db_session)
        await CandidateProfileFactory.create_async(
            db_session, user_id=oldest.id, skills=["elixir"], location="Lisbon",
            last_active=now - timedelta(days=30),
        )

        by_skill = await async_client.get("/api/v1/candidates/feed?skills=elixir", headers=recruiter_headers)
        by_location = await async_client.get("/api/v1/candidates/feed?location=lisbon", headers=recruiter_headers)

        assert _feed_user_ids(by_skill) == {str(oldest.id)}
        assert _feed_user_ids(by_location) == {str(oldest.id)}


# ---------------------------------------------------------------------------
# /candidates/filters
# ---------------------------------------------------------------------------
class TestSavedFeedFilters:
    @pytest.mark.asyncio
    async def test_empty_until_saved(self, async_client, recruiter_headers):
        response = await async_client.get("/api/v1/candidates/filters", headers=recruiter_headers)

        assert response.status_code == 200
        assert response.json()["filters"] == {"skills": [], "location": None, "min_yoe": None, "max_yoe": None}

    @pytest.mark.asyncio
    async def test_save_then_read_back(self, async_client, recruiter_headers):
        saved = await async_client.put(
            "/api/v1/candidates/filters",
            json={"skills": "python, kafka", "location": "Berlin", "min_yoe": 3},
            headers=recruiter_headers,
        )
        assert saved.status_code == 200
        assert saved.json()["filters"]["skills"] == ["python", "kafka"]

        replaced = await async_client.put(
            "/api/v1/candidates/filters", json={"skills": ["go"]}, headers=recruiter_headers
        )
        assert replaced.status_code == 200

        current = (await async_client.get("/api/v1/candidates/filters", headers=recruiter_headers)).json()
        assert current["filters"] == {"skills": ["go"], "location": None, "min_yoe": None, "max_yoe": None}
        assert current["updated_at"]

    @pytest.mark.asyncio
    async def test_feed_uses_saved_filters_unless_overridden(self, async_client, db_session, recruiter_headers):
        berlin = await CandidateFactory.create_async(db_session)
        paris = await CandidateFactory.create_async(db_session)
        await CandidateProfileFactory.create_async(db_session, user_id=berlin.id, location="Berlin")
        await CandidateProfileFactory.create_async(db_session, user_id=paris.id, location="Paris")
        await async_client.put(
            "/api/v1/candidates/filters", json={"location": "Paris"}, headers=recruiter_headers
        )

        default = await async_client.get("/api/v1/candidates/feed", headers=recruiter_headers)
        overridden = await async_client.get("/api/v1/candidates/feed?location=berlin", headers=recruiter_headers)

        assert _feed_user_ids(default) == {str(paris.id)}
        assert _feed_user_ids(overridden) == {str(berlin.id)}

    @pytest.mark.asyncio
    async def test_filters_are_per_recruiter(self, async_client, db_session, recruiter, auth_headers_for):
        other = await RecruiterFactory.create_async(db_session)
        await FeedFilterPresetFactory.create_async(
            db_session, user_id=recruiter.id, filters={"skills": ["go"]}
        )

        response = await async_client.get("/api/v1/candidates/filters", headers=auth_headers_for(other))

        assert response.json()["filters"]["skills"] == []

    @pytest.mark.asyncio
    async def test_candidate_forbidden(self, async_client, candidate_headers):
        read = await async_client.get("/api/v1/candidates/filters", headers=candidate_headers)
        write = await async_client.put(
            "/api/v1/candidates/filters", json={"skills": ["go"]}, headers=candidate_headers
        )

        assert read.status_code == 403
        assert write.status_code == 403


# ---------------------------------------------------------------------------
# /messages
# ---------------------------------------------------------------------------
class TestMessages:
    @pytest.mark.asyncio
    async def test_send_and_list(self, async_client, match, candidate, candidate_headers, recruiter_headers):
        sent = await async_client.post(
            "/api/v1/messages",
            json={"match_id": str(match.id), "body": "  Hello there  "},
            headers=candidate_headers,
        )
        assert sent.status_code == 201
        assert sent.json()["body"] == "Hello there"
        assert sent.json()["sender_id"] == str(candidate.id)

        listed = await async_client.get(
            f"/api/v1/messages?match_id={match.id}", headers=recruiter_headers
        )
        assert listed.status_code == 200
        body = listed.json()
        assert [m["body"] for m in body["messages"]] == ["Hello there"]
        assert body["has_more"] is False

    @pytest.mark.asyncio
    async def test_pagination_oldest_first(self, async_client, db_session, match, candidate, candidate_headers):
        start = datetime.now(timezone.utc) - timedelta(minutes=10)
        for i in range(3):
            await MessageFactory.create_async(
                db_session, match_id=match.id, sender_id=candidate.id,
                body=f"m{i}", created_at=start + timedelta(minutes=i),
            )

        response = await async_client.get(
            f"/api/v1/messages?match_id={match.id}&limit=2", headers=candidate_headers
        )

        body = response.json()
        assert [m["body"] for m in body["messages"]] == ["m1", "m2"]
        assert body["has_more"] is True

    @pytest.mark.asyncio
    async def test_outsider_cannot_read_or_send(self, async_client, match, outsider_headers):
        read = await async_client.get(f"/api/v1/messages?match_id={match.id}", headers=outsider_headers)
        assert read.status_code == 403

        sent = await async_client.post(
            "/api/v1/messages", json={"match_id": str(match.id), "body": "hi"}, headers=outsider_headers
        )
        assert sent.status_code == 403

    @pytest.mark.asyncio
    async def test_blank_body_rejected(self, async_client, match, candidate_headers):
        response = await async_client.post(
            "/api/v1/messages", json={"match_id": str(match.id), "body": "   "}, headers=candidate_headers
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# App plumbing
# ---------------------------------------------------------------------------
class TestApp:
    @pytest.mark.asyncio
    async def test_healthz(self, async_client):
        response = await async_client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, async_client):
        response = await async_client.get("/healthz", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, async_client):
        response = await async_client.get("/healthz")
        assert response.headers["X-Request-ID"]
