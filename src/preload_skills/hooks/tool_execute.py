"""Tool execution hooks: file-type and path-pattern triggers."""

import logging
import os

from ..core.config import TriggerType
from ..skills.triggers import extension_match, path_match
from .base import PluginContext, hook_boundary
from .types import (
    ToolExecuteAfterOutput,
    ToolExecuteBeforeOutput,
    ToolExecuteInput,
    normalize_tool_args,
)

logger = logging.getLogger(__name__)

# Tools whose arguments name a file
FILE_TOOLS = frozenset({"read", "edit", "write", "glob", "grep"})


class ToolExecuteHooks:
    """Captures file paths before a tool runs and triggers skills after.

    The path is only known from the tool arguments, which the host passes
    to the "before" hook; triggers fire once the call completes.
    """

    def __init__(self, ctx: PluginContext) -> None:
        self.ctx = ctx

    @hook_boundary
    async def before(self, input: ToolExecuteInput, output: ToolExecuteBeforeOutput) -> None:
        if input.tool not in FILE_TOOLS:
            return

        file_path = normalize_tool_args(output.args).file_path
        if file_path is None:
            return

        self.ctx.session_store.track_file_path(input.session_id or "", input.call_id, file_path)
        logger.debug(f"Captured file path from {input.tool} ({input.call_id}): {file_path}")

    @hook_boundary
    async def after(self, input: ToolExecuteInput, output: ToolExecuteAfterOutput) -> None:
        if input.tool not in FILE_TOOLS:
            return
        if not input.session_id:
            return

        file_path = self.ctx.session_store.pop_file_path(input.call_id)
        if file_path is None:
            logger.debug(f"No file path found for {input.tool} ({input.call_id})")
            return

        session_id = input.session_id
        config = self.ctx.config
        ext = os.path.splitext(file_path)[1]
        logger.debug(f"Processing file access by {input.tool}: {file_path} (extension {ext!r})")

        if ext and config.file_type_skills:
            names = extension_match(ext, config.file_type_skills)
            if names:
                logger.debug(f"Found skills for extension {ext}: {names}")
                self.ctx.queue_triggered(session_id, names, TriggerType.FILE_TYPE)

        if config.path_patterns:
            names = path_match(file_path, config.path_patterns)
            if names:
                logger.debug(f"Found skills for path {file_path}: {names}")
                self.ctx.queue_triggered(session_id, names, TriggerType.PATH)
