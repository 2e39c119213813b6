"""Inspection tool listing the skills loaded in the current session."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..session.store import SessionStore
from ..skills.budget import BudgetAllocator

TOOL_NAME = "loaded_skills"


@dataclass
class ToolContext:
    """Context the host passes to a tool call."""
    session_id: str


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class LoadedSkillsTool:
    """Reports loaded skills with their token counts and budget usage."""

    description = (
        "List all preloaded skills for the current session: names, "
        "descriptions, and token counts."
    )
    args: Dict[str, Any] = {}

    def __init__(self, session_store: SessionStore, allocator: BudgetAllocator) -> None:
        self.session_store = session_store
        self.allocator = allocator

    async def execute(self, args: Optional[Dict[str, Any]], context: ToolContext) -> str:
        state = self.session_store.get_state(context.session_id)
        skills = self.session_store.get_all_loaded_skills(context.session_id)

        if not skills:
            return "No skills currently loaded for this session."

        total = sum(skill.token_count for skill in skills)
        lines: List[str] = [
            f"**{len(skills)} skill{_plural(len(skills))} loaded** ({total} total tokens)",
            "",
        ]
        for skill in skills:
            line = f"- **{skill.name}** ({skill.token_count} tokens)"
            if skill.description:
                line += f": {skill.description}"
            lines.append(line)

        lines.append("")
        lines.append(self.allocator.budget_stats(state.total_tokens_used).format_summary())
        return "\n".join(lines)
