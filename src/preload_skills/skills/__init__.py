"""
Skill loading, trigger resolution and token budgeting.

This package provides:
- SkillStore: Loads SKILL.md files from the skill search path and caches them
- render_skills: Renders skills into the injected text block
- BudgetAllocator: Loads triggered skills within the configured token cap
- triggers: Pure functions mapping extensions, paths and keywords to skills

Example:
    from preload_skills.skills import SkillStore, render_skills

    store = SkillStore(project_dir=Path("."))
    block = render_skills(store.load_many(["testing", "react"]))
"""

from .budget import BudgetAllocator, BudgetStats, LoadResult
from .formatter import RenderOptions, render_skills
from .loader import SkillStore, estimate_tokens
from .models import Skill

__all__ = [
    "BudgetAllocator",
    "BudgetStats",
    "LoadResult",
    "RenderOptions",
    "Skill",
    "SkillStore",
    "estimate_tokens",
    "render_skills",
]
