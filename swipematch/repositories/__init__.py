"""
Repository layer: all SQL for the matching engine lives here.
"""

from .base import BaseRepository
from .swipe_repository import SwipeRepository
from .match_repository import MatchRepository
from .unmatch_repository import UnmatchRepository
from .job_repository import JobRepository
from .candidate_profile_repository import CandidateProfileRepository
from .message_repository import MessageRepository
from .user_repository import UserRepository
from .feed_filter_repository import FeedFilterRepository

__all__ = [
    "BaseRepository",
    "SwipeRepository",
    "MatchRepository",
    "UnmatchRepository",
    "JobRepository",
    "CandidateProfileRepository",
    "MessageRepository",
    "UserRepository",
    "FeedFilterRepository",
]
