from .match import Match, MatchListResponse, MatchStats
from .swipe import (
    JobTarget,
    CandidateTarget,
    SwipeTarget,
    SwipeCreate,
    Swipe,
    SwipeResult,
    SwipeHistoryResponse,
    SwipeStats,
)
from .message import Message, MessageCreate, MessageListResponse
from .user import CooldownUpdate, CooldownSettings
from .candidate import FeedFilters, CandidateFeedItem, CandidateFeedResponse, SavedFeedFilters

__all__ = [
    "Match", "MatchListResponse", "MatchStats",
    "JobTarget", "CandidateTarget", "SwipeTarget", "SwipeCreate", "Swipe",
    "SwipeResult", "SwipeHistoryResponse", "SwipeStats",
    "Message", "MessageCreate", "MessageListResponse",
    "CooldownUpdate", "CooldownSettings",
    "FeedFilters", "CandidateFeedItem", "CandidateFeedResponse", "SavedFeedFilters",
]
