"""
Services package exports.
"""
from .feed_service import FeedRefresher
from .midnight_scheduler import MidnightScheduler, SchedulerState
from .refresh_service import RefreshController

__all__ = ["FeedRefresher", "MidnightScheduler", "RefreshController", "SchedulerState"]
