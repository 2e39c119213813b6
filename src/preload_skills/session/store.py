"""
Per-session state for skill injection.

The SessionStore owns every piece of mutable per-session data:
- SessionState: loaded skill names, tokens used, initial-injection flag
- the pending injection queue
- the tool call id -> file path cache
- usage analytics (through AnalyticsRecorder)

One store is created per plugin instance and passed to every hook handler.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.config import TriggerType
from ..skills.loader import SkillStore
from ..skills.models import Skill
from .analytics import AnalyticsRecorder

logger = logging.getLogger(__name__)

# Upper bound on remembered tool calls whose "after" event has not arrived
MAX_TRACKED_FILE_PATHS = 256


@dataclass
class SessionState:
    """State for one agent session.

    Attributes:
        loaded_skills: Names of every skill loaded in this session, in load
            order. Grows monotonically and holds each name once
        total_tokens_used: Estimated tokens of all loaded skills
        initial_skills_injected: Whether the initial block has been
            rendered since the session started or was last compacted
    """

    loaded_skills: List[str] = field(default_factory=list)
    total_tokens_used: int = 0
    initial_skills_injected: bool = False

    def has_skill(self, name: str) -> bool:
        return name in self.loaded_skills

    def add_skill(self, skill: Skill) -> bool:
        """Add a skill. Returns False if it was already loaded."""
        if skill.name in self.loaded_skills:
            return False
        self.loaded_skills.append(skill.name)
        self.total_tokens_used += skill.token_count
        return True


class SessionStore:
    """
    Holds session state, pending queues and tool call paths.

    Sessions are created lazily on first reference, seeded with the initial
    skills, and removed by cleanup() when the host deletes the session.

    Example usage:
        store = SessionStore(skill_store, analytics, initial_skills=skills)
        state = store.get_state("session-1")
        store.queue_skills("session-1", [skill], TriggerType.FILE_TYPE)
        pending = store.get_pending_skills("session-1")
        store.clear_pending_skills("session-1")
    """

    def __init__(
        self,
        skill_store: SkillStore,
        analytics: AnalyticsRecorder,
        initial_skills: Optional[List[Skill]] = None,
        initial_trigger_types: Optional[Dict[str, TriggerType]] = None,
        max_tracked_file_paths: int = MAX_TRACKED_FILE_PATHS,
    ) -> None:
        """
        Initialize the session store.

        Args:
            skill_store: Shared skill cache used to rebuild loaded skills
            analytics: Usage recorder (may be disabled)
            initial_skills: Skills every new session starts with
            initial_trigger_types: Trigger type per initial skill name for
                                   analytics. Defaults to INITIAL
            max_tracked_file_paths: Bound for the call id -> path cache
        """
        self.skill_store = skill_store
        self.analytics = analytics
        self.initial_skills = list(initial_skills or [])
        self.initial_trigger_types = initial_trigger_types or {}
        self.max_tracked_file_paths = max_tracked_file_paths

        self._sessions: Dict[str, SessionState] = {}
        self._pending: Dict[str, List[Skill]] = {}
        # call id -> (session id, file path), oldest first
        self._file_paths: "OrderedDict[str, Tuple[str, str]]" = OrderedDict()

        for skill in self.initial_skills:
            self.skill_store.cache_skill(skill)

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get_state(self, session_id: str) -> SessionState:
        """
        Get the state for a session, creating it on first reference.

        New sessions start with the initial skills loaded and the
        initial-injection flag unset.
        """
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionState()
            for skill in self.initial_skills:
                if state.add_skill(skill):
                    trigger = self.initial_trigger_types.get(skill.name, TriggerType.INITIAL)
                    self.analytics.ensure(session_id, skill.name, trigger)
            self._sessions[session_id] = state
            logger.debug(f"Created session state for {session_id}")
        return state

    def queue_skills(
        self,
        session_id: str,
        skills: List[Skill],
        trigger_type: TriggerType,
    ) -> List[Skill]:
        """
        Queue newly triggered skills for injection.

        Skills already loaded in the session are ignored. The rest are added
        to the loaded set, counted against the session's tokens and appended
        to the pending queue.

        Returns:
            The skills that were actually queued
        """
        state = self.get_state(session_id)
        new_skills = []
        for skill in skills:
            if state.add_skill(skill):
                new_skills.append(skill)

        if not new_skills:
            return []

        for skill in new_skills:
            self.skill_store.cache_skill(skill)
            self.analytics.ensure(session_id, skill.name, trigger_type)

        self._pending.setdefault(session_id, []).extend(new_skills)

        logger.debug(
            f"Queued {trigger_type.value} skills for injection in {session_id}: "
            f"{[s.name for s in new_skills]} "
            f"({sum(s.token_count for s in new_skills)} tokens)"
        )
        return new_skills

    def get_pending_skills(self, session_id: str) -> List[Skill]:
        """Get queued skills. Does not clear the queue."""
        return list(self._pending.get(session_id, []))

    def clear_pending_skills(self, session_id: str) -> None:
        self._pending.pop(session_id, None)

    def get_all_loaded_skills(self, session_id: str) -> List[Skill]:
        """
        Get skill objects for everything loaded in a session.

        Returns:
            Skills in load order; [] for unknown sessions
        """
        state = self._sessions.get(session_id)
        if state is None:
            return []

        skills = []
        for name in state.loaded_skills:
            skill = self.skill_store.get_cached(name)
            if skill is not None:
                skills.append(skill)
        return skills

    def track_file_path(self, session_id: str, call_id: str, file_path: str) -> None:
        """Remember the file a tool call touches until its "after" event."""
        self._file_paths[call_id] = (session_id, file_path)
        self._file_paths.move_to_end(call_id)
        while len(self._file_paths) > self.max_tracked_file_paths:
            evicted, _ = self._file_paths.popitem(last=False)
            logger.debug(f"Evicted file path for stale tool call {evicted}")

    def get_file_path(self, call_id: str) -> Optional[str]:
        entry = self._file_paths.get(call_id)
        return entry[1] if entry else None

    def pop_file_path(self, call_id: str) -> Optional[str]:
        """Get and forget the file path for a tool call."""
        entry = self._file_paths.pop(call_id, None)
        return entry[1] if entry else None

    def mark_initial_injected(self, session_id: str) -> None:
        self.get_state(session_id).initial_skills_injected = True

    def reset_initial_injected(self, session_id: str) -> None:
        """Clear the flag so the next injection renders the initial skills again."""
        self.get_state(session_id).initial_skills_injected = False

    def save_analytics(self) -> None:
        self.analytics.save()

    def cleanup(self, session_id: str) -> None:
        """
        Remove all state for a session and flush analytics.

        A later reference to the same id starts a fresh session.
        """
        self._sessions.pop(session_id, None)
        self._pending.pop(session_id, None)
        stale_calls = [
            call_id for call_id, (owner, _) in self._file_paths.items() if owner == session_id
        ]
        for call_id in stale_calls:
            del self._file_paths[call_id]
        self.analytics.discard(session_id)
        logger.debug(f"Cleaned up session state for {session_id}")
        self.save_analytics()
