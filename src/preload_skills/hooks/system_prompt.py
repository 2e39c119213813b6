"""Instruction-channel hook, registered only for the ``systemPrompt`` method."""

import logging
from typing import Dict

from ..skills.models import Skill
from .base import PluginContext, hook_boundary
from .types import SystemPromptInput, SystemPromptOutput

logger = logging.getLogger(__name__)


class SystemPromptHook:
    """Appends every skill relevant to the session to the system prompt.

    The block is rebuilt on each call from the initial skills, the skills
    loaded in the session and the pending queue, which is consumed.
    """

    def __init__(self, ctx: PluginContext) -> None:
        self.ctx = ctx

    @hook_boundary
    async def __call__(self, input: SystemPromptInput, output: SystemPromptOutput) -> None:
        if not input.session_id:
            return

        session_id = input.session_id
        store = self.ctx.session_store
        state = store.get_state(session_id)

        # Insertion-ordered, unique by name
        to_inject: Dict[str, Skill] = {}
        for skill in self.ctx.initial_skills:
            to_inject.setdefault(skill.name, skill)
        for skill in store.get_all_loaded_skills(session_id):
            to_inject.setdefault(skill.name, skill)

        pending = store.get_pending_skills(session_id)
        if pending:
            for skill in pending:
                to_inject.setdefault(skill.name, skill)
            store.clear_pending_skills(session_id)

        if not to_inject:
            return

        output.system.append(self.ctx.render(list(to_inject.values())))

        if self.ctx.initial_skills and not state.initial_skills_injected:
            store.mark_initial_injected(session_id)
            logger.info(
                f"Injected skills into system prompt for {session_id}: {list(to_inject)}"
            )
