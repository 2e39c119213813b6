"""Session lifecycle hooks: compaction and deletion."""

import logging

from .base import PluginContext, hook_boundary
from .types import SESSION_DELETED, CompactingInput, CompactingOutput, SessionEvent

logger = logging.getLogger(__name__)

COMPACTION_HEADER = (
    "## Preloaded Skills\n\n"
    "The following skills were loaded during this session and should persist:"
)


class LifecycleHooks:
    """Re-asserts loaded skills on compaction and tears sessions down."""

    def __init__(self, ctx: PluginContext) -> None:
        self.ctx = ctx

    @hook_boundary
    async def compacting(self, input: CompactingInput, output: CompactingOutput) -> None:
        if not self.ctx.config.persist_after_compaction:
            return
        if not input.session_id:
            return

        session_id = input.session_id
        store = self.ctx.session_store
        loaded = store.get_all_loaded_skills(session_id)
        if not loaded:
            return

        output.context.append(f"{COMPACTION_HEADER}\n\n{self.ctx.render(loaded)}")
        store.reset_initial_injected(session_id)
        logger.info(
            f"Added {len(loaded)} loaded skills to compaction context for {session_id}"
        )
        store.save_analytics()

    @hook_boundary
    async def event(self, event: SessionEvent) -> None:
        if event.type != SESSION_DELETED:
            return
        session_id = event.session_id
        if session_id:
            self.ctx.session_store.cleanup(session_id)
