"""Per-session skill usage analytics.

The analytics file is a JSON object keyed by session id:

    {
      "<session id>": {
        "sessionId": "<session id>",
        "skillUsage": {
          "<skill>": {"skillName": ..., "loadCount": ..., "triggerType": ...,
                      "firstLoaded": <epoch ms>, "lastLoaded": <epoch ms>}
        }
      }
    }

The whole file is rewritten on every mutation. Write failures are logged
and otherwise ignored.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import TriggerType
from ..core.paths import ensure_directory

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SkillUsageStats:
    """Usage of one skill within one session."""

    skill_name: str
    trigger_type: TriggerType  # Trigger of the first load
    load_count: int = 1
    first_loaded: int = 0
    last_loaded: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skillName": self.skill_name,
            "loadCount": self.load_count,
            "triggerType": self.trigger_type.value,
            "firstLoaded": self.first_loaded,
            "lastLoaded": self.last_loaded,
        }


@dataclass
class SessionAnalytics:
    """Usage records for one session."""

    session_id: str
    skill_usage: Dict[str, SkillUsageStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "skillUsage": {
                name: stats.to_dict() for name, stats in self.skill_usage.items()
            },
        }


class AnalyticsRecorder:
    """Records skill loads per session and persists them to disk.

    When disabled every method is a no-op, so callers never need to check.
    """

    def __init__(self, path: Path, enabled: bool = False) -> None:
        """Initialize the recorder.

        Args:
            path: Analytics JSON file
            enabled: Whether to record anything at all
        """
        self.path = path
        self.enabled = enabled
        self._sessions: Dict[str, SessionAnalytics] = {}

    def get(self, session_id: str) -> Optional[SessionAnalytics]:
        return self._sessions.get(session_id)

    def _session(self, session_id: str) -> SessionAnalytics:
        if session_id not in self._sessions:
            self._sessions[session_id] = SessionAnalytics(session_id=session_id)
        return self._sessions[session_id]

    def track(self, session_id: str, skill_name: str, trigger_type: TriggerType) -> None:
        """Record a load of a skill, incrementing the count on repeats."""
        if not self.enabled:
            return

        usage = self._session(session_id).skill_usage
        now = _now_ms()
        stats = usage.get(skill_name)
        if stats is None:
            usage[skill_name] = SkillUsageStats(
                skill_name=skill_name,
                trigger_type=trigger_type,
                first_loaded=now,
                last_loaded=now,
            )
        else:
            stats.load_count += 1
            stats.last_loaded = now

        self.save()

    def ensure(self, session_id: str, skill_name: str, trigger_type: TriggerType) -> None:
        """Record a skill only if the session has no record of it yet."""
        if not self.enabled:
            return
        existing = self._sessions.get(session_id)
        if existing is not None and skill_name in existing.skill_usage:
            return
        self.track(session_id, skill_name, trigger_type)

    def discard(self, session_id: str) -> None:
        """Drop a session's records from memory."""
        self._sessions.pop(session_id, None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            session_id: data.to_dict() for session_id, data in self._sessions.items()
        }

    def save(self) -> None:
        """Rewrite the analytics file. Never raises."""
        if not self.enabled:
            return

        try:
            ensure_directory(self.path.parent)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
                f.write("\n")
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save analytics to {self.path}: {e}")
