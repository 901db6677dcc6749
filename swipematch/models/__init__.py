from .user import User, UserRole
from .candidate_profile import CandidateProfile
from .job import Job, JobStatus
from .swipe import Swipe, SwipeDirection, SwipeTargetType
from .match import Match
from .unmatch import UnmatchRecord
from .message import Message
from .feed_filter import FeedFilterPreset

__all__ = [
    "User", "UserRole", "CandidateProfile", "Job", "JobStatus",
    "Swipe", "SwipeDirection", "SwipeTargetType", "Match", "UnmatchRecord", "Message",
    "FeedFilterPreset"
]
