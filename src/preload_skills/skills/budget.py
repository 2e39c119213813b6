"""Token budgeting for skill injection."""

import logging
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Optional

from ..core.config import PreloadConfig, TriggerType
from ..session.analytics import AnalyticsRecorder
from .loader import SkillStore
from .models import Skill
from .triggers import expand_groups

logger = logging.getLogger(__name__)


def calculate_total_tokens(skills: List[Skill]) -> int:
    return sum(skill.token_count for skill in skills)


def filter_skills_by_token_budget(skills: List[Skill], max_tokens: int) -> List[Skill]:
    """Keep the longest prefix of skills that fits in max_tokens.

    The first skill that does not fit ends the selection: later skills are
    dropped even if they are small enough to fit.
    """
    result: List[Skill] = []
    total = 0
    for skill in skills:
        if total + skill.token_count > max_tokens:
            break
        result.append(skill)
        total += skill.token_count
    return result


@dataclass
class LoadResult:
    """Skills kept by a budgeted load and their combined token count."""

    skills: List[Skill] = field(default_factory=list)
    tokens_used: int = 0


@dataclass
class BudgetStats:
    """Token budget usage for a session."""

    tokens_used: int
    max_tokens: Optional[int]  # None when no cap is configured

    @property
    def remaining(self) -> Optional[int]:
        if self.max_tokens is None:
            return None
        return max(0, self.max_tokens - self.tokens_used)

    @property
    def percentage(self) -> Optional[float]:
        """Bounded 0-100 share of the cap in use."""
        if not self.max_tokens:
            return None
        raw = (self.tokens_used / self.max_tokens) * 100
        return round(max(0.0, min(100.0, raw)), 1)

    def format_summary(self) -> str:
        """Format usage like "Token budget: 1200 of 4000 used (30.0%)"."""
        if self.max_tokens is None:
            return f"Token budget: {self.tokens_used} used"
        return (
            f"Token budget: {self.tokens_used} of {self.max_tokens} used "
            f"({self.percentage:.1f}%)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokens_used": self.tokens_used,
            "max_tokens": self.max_tokens,
            "remaining": self.remaining,
            "percentage": self.percentage,
        }


class BudgetAllocator:
    """Loads triggered skills and trims them to the configured token cap."""

    def __init__(
        self,
        config: PreloadConfig,
        store: SkillStore,
        analytics: Optional[AnalyticsRecorder] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.analytics = analytics

    def load_with_budget(
        self,
        skill_names: List[str],
        tokens_already_used: int,
        trigger_type: TriggerType,
        session_id: Optional[str] = None,
        exclude: Collection[str] = (),
    ) -> LoadResult:
        """Load skills that fit in the remaining budget.

        Args:
            skill_names: Candidate names; ``@group`` references are expanded
            tokens_already_used: Tokens the session has already spent
            trigger_type: Trigger recorded in analytics for kept skills
            session_id: Session to record analytics under. None skips
                        recording (used for the startup load)
            exclude: Names already loaded; they are neither loaded nor
                     charged against the budget

        Returns:
            LoadResult with the kept skills in listed order
        """
        excluded = set(exclude)
        resolved = [
            name for name in expand_groups(skill_names, self.config.groups)
            if name not in excluded
        ]
        # The header name may differ from the requested one
        skills = [s for s in self.store.load_many(resolved) if s.name not in excluded]

        if self.config.max_tokens:
            remaining = self.config.max_tokens - tokens_already_used
            kept = filter_skills_by_token_budget(skills, remaining)
            if len(kept) < len(skills):
                dropped = [s.name for s in skills[len(kept):]]
                logger.debug(
                    f"Token budget exceeded for {trigger_type.value} skills; dropped {dropped}"
                )
            skills = kept

        if self.analytics is not None and session_id is not None:
            for skill in skills:
                self.analytics.track(session_id, skill.name, trigger_type)

        return LoadResult(skills=skills, tokens_used=calculate_total_tokens(skills))

    def budget_stats(self, tokens_used: int) -> BudgetStats:
        return BudgetStats(tokens_used=tokens_used, max_tokens=self.config.max_tokens)
