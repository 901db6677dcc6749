from .analytics_service import AnalyticsService
from .cooldown_service import CooldownService
from .discovery_service import DiscoveryService
from .match_service import MatchService
from .message_service import MessageService
from .notification_service import NotificationService
from .rate_limit_service import RateLimitService
from .reciprocity_service import ReciprocityService, ReciprocityResult
from .swipe_service import SwipeService, SwipeOutcome

__all__ = [
    "AnalyticsService",
    "CooldownService",
    "DiscoveryService",
    "MatchService",
    "MessageService",
    "NotificationService",
    "RateLimitService",
    "ReciprocityService",
    "ReciprocityResult",
    "SwipeService",
    "SwipeOutcome",
]
