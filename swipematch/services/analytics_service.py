"""
Product analytics dispatch.

Events are handed to the ARQ worker (``record_analytics_event``) from a
background task, so neither a slow Redis nor a dead queue can delay or fail
the swipe/match/message that produced them.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
import logging

from swipematch.core import arq
from swipematch.core.background import fire_and_forget
from swipematch.models.swipe import Swipe
from swipematch.models.match import Match
from swipematch.models.message import Message
from swipematch.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

SWIPE_MADE = "swipe_made"
MATCH_CREATED = "match_created"
MESSAGE_SENT = "message_sent"


class AnalyticsService:
    """Fire-and-forget analytics events for the matching flow."""

    TASK_NAME = "record_analytics_event"

    def track(self, event: str, user_id: UUID, properties: Optional[dict] = None) -> None:
        """
        Schedule an analytics event and return immediately.

        Args:
            event: Event name (``swipe_made``, ``match_created``, ...)
            user_id: User the event is attributed to
            properties: JSON-serialisable event properties
        """
        fire_and_forget(
            self._dispatch(event, user_id, properties or {}),
            name=f"analytics:{event}",
        )

    async def _dispatch(self, event: str, user_id: UUID, properties: dict) -> None:
        try:
            await arq.enqueue(
                self.TASK_NAME,
                event=event,
                user_id=str(user_id),
                properties=properties,
                timestamp=utcnow().isoformat(),
            )
        except Exception as e:
            logger.warning(f"Dropping analytics event {event} for user {user_id}: {e}")

    def track_swipe(self, swipe: Swipe) -> None:
        self.track(
            SWIPE_MADE,
            swipe.actor_user_id,
            {
                "swipe_id": str(swipe.id),
                "target_type": swipe.target_type.value,
                "target_id": str(swipe.target_id),
                "direction": swipe.direction.value,
            },
        )

    def track_match(self, match: Match) -> None:
        """One event per party so both funnels count the match."""
        properties = {
            "match_id": str(match.id),
            "job_id": str(match.job_id),
        }
        self.track(MATCH_CREATED, match.candidate_user_id, {**properties, "role": "candidate"})
        self.track(MATCH_CREATED, match.recruiter_user_id, {**properties, "role": "recruiter"})

    def track_message(self, message: Message) -> None:
        self.track(
            MESSAGE_SENT,
            message.sender_id,
            {
                "match_id": str(message.match_id),
                "message_id": str(message.id),
                "length": len(message.body),
            },
        )
