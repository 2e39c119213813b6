"""Per-session state and usage analytics."""

from .analytics import AnalyticsRecorder, SessionAnalytics, SkillUsageStats
from .store import SessionState, SessionStore

__all__ = [
    "AnalyticsRecorder",
    "SessionAnalytics",
    "SessionState",
    "SessionStore",
    "SkillUsageStats",
]
