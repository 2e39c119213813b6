"""Shared context and error boundary for hook handlers."""

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, List, TypeVar

from ..core.config import PreloadConfig, TriggerType
from ..session.store import SessionStore
from ..skills.budget import BudgetAllocator
from ..skills.formatter import RenderOptions, render_skills
from ..skills.loader import SkillStore
from ..skills.models import Skill

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def hook_boundary(func: F) -> F:
    """Log and swallow any exception raised by a hook handler.

    A bad skill file or malformed tool argument must not break the host,
    so handlers never raise past this point.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            await func(*args, **kwargs)
        except Exception:
            logger.exception(f"Hook {func.__qualname__} failed")

    return wrapper  # type: ignore[return-value]


@dataclass
class PluginContext:
    """Everything a hook handler needs, built once per plugin instance."""

    config: PreloadConfig
    project_dir: Path
    skill_store: SkillStore
    session_store: SessionStore
    allocator: BudgetAllocator
    initial_skills: List[Skill] = field(default_factory=list)
    initial_formatted_content: str = ""
    initial_tokens_used: int = 0
    missing_skills: List[str] = field(default_factory=list)

    @property
    def render_options(self) -> RenderOptions:
        return RenderOptions.from_config(self.config)

    def render(self, skills: List[Skill]) -> str:
        return render_skills(skills, self.render_options)

    def queue_triggered(
        self,
        session_id: str,
        skill_names: List[str],
        trigger_type: TriggerType,
    ) -> List[Skill]:
        """Load triggered skills within the session's budget and queue them.

        Returns:
            The skills newly queued for injection
        """
        if not skill_names:
            return []

        state = self.session_store.get_state(session_id)
        # Skills already loaded in the session are not charged again
        result = self.allocator.load_with_budget(
            skill_names,
            state.total_tokens_used,
            trigger_type,
            session_id=session_id,
            exclude=state.loaded_skills,
        )
        if not result.skills:
            return []
        return self.session_store.queue_skills(session_id, result.skills, trigger_type)
