"""Chat message hook: keyword/agent triggers and chat-message injection."""

import logging

from ..core.config import TriggerType
from ..skills.triggers import keyword_matches
from .base import PluginContext, hook_boundary
from .types import ChatMessageInput, ChatMessageOutput

logger = logging.getLogger(__name__)

MESSAGE_SEPARATOR = "\n\n---\n\n"


class ChatMessageHook:
    """Handles every user message of a session.

    Agent and keyword triggers are evaluated for every message. When the
    injection method is ``chatMessage``, rendered skills are prepended to
    the message text:

        <initial block>          (first injection only)
        <pending block>          (skills queued since the last message)
        ---
        <original text>
    """

    def __init__(self, ctx: PluginContext) -> None:
        self.ctx = ctx

    def _queue_triggers(self, session_id: str, agent: str, text: str) -> None:
        config = self.ctx.config

        if agent and agent in config.agent_skills:
            self.ctx.queue_triggered(session_id, config.agent_skills[agent], TriggerType.AGENT)

        for skill_names in keyword_matches(text, config.content_triggers):
            self.ctx.queue_triggered(session_id, skill_names, TriggerType.CONTENT)

    @hook_boundary
    async def __call__(self, input: ChatMessageInput, output: ChatMessageOutput) -> None:
        if not input.session_id:
            return

        session_id = input.session_id
        state = self.ctx.session_store.get_state(session_id)
        text_part = output.first_text_part()
        if text_part is None:
            return

        self._queue_triggers(session_id, input.agent or "", text_part.text or "")

        if self.ctx.config.uses_system_prompt:
            return

        blocks = []
        if not state.initial_skills_injected and self.ctx.initial_formatted_content:
            blocks.append(self.ctx.initial_formatted_content)
            self.ctx.session_store.mark_initial_injected(session_id)
            logger.info(
                f"Injected initial preloaded skills into {session_id}: "
                f"{[s.name for s in self.ctx.initial_skills]}"
            )

        pending = self.ctx.session_store.get_pending_skills(session_id)
        if pending:
            formatted = self.ctx.render(pending)
            if formatted:
                blocks.append(formatted)
                logger.info(
                    f"Injected triggered skills into {session_id}: {[s.name for s in pending]}"
                )
            self.ctx.session_store.clear_pending_skills(session_id)

        if blocks:
            text_part.text = "\n\n".join(blocks) + MESSAGE_SEPARATOR + (text_part.text or "")
