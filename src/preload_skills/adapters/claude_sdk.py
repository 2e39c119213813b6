"""Claude Agent SDK bridge.

Plugs a HookSet into the Claude Agent SDK hook API so skills are injected
into ``query()`` sessions:

    hooks = create_plugin(Path("."))
    bridge = ClaudeSDKHookBridge(hooks)
    options = ClaudeAgentOptions(hooks=bridge.hook_matchers(), cwd=".")
    async for message in query(prompt=prompt, options=options):
        ...

The SDK cannot rewrite the user message or the system prompt per turn, so
all injected text is returned as ``additionalContext`` of the
``UserPromptSubmit`` hook. Compaction context is carried over to the next
prompt of the same session.
"""

import logging
from typing import Any, Dict, List, Optional

from claude_agent_sdk import HookContext, HookMatcher

from ..hooks.chat_message import MESSAGE_SEPARATOR
from ..hooks.plugin import HookSet
from ..hooks.types import (
    SESSION_DELETED,
    ChatMessageInput,
    ChatMessageOutput,
    CompactingInput,
    CompactingOutput,
    MessagePart,
    SessionEvent,
    SystemPromptInput,
    SystemPromptOutput,
    ToolExecuteAfterOutput,
    ToolExecuteBeforeOutput,
    ToolExecuteInput,
)

logger = logging.getLogger(__name__)

# Claude tool name -> hook tool name
TOOL_NAME_MAP = {
    "Read": "read",
    "Edit": "edit",
    "MultiEdit": "edit",
    "Write": "write",
    "Glob": "glob",
    "Grep": "grep",
}
FILE_TOOL_MATCHER = "|".join(TOOL_NAME_MAP)


def translate_tool_input(tool_input: Any) -> Dict[str, Any]:
    """Rename Claude's ``file_path`` argument to the hook contract's ``filePath``."""
    if not isinstance(tool_input, dict):
        return {}
    args = dict(tool_input)
    if "file_path" in args and "filePath" not in args:
        args["filePath"] = args.pop("file_path")
    return args


def _additional_context(event_name: str, blocks: List[str]) -> Dict[str, Any]:
    blocks = [block for block in blocks if block]
    if not blocks:
        return {}
    return {
        "hookSpecificOutput": {
            "hookEventName": event_name,
            "additionalContext": "\n\n".join(blocks),
        }
    }


class ClaudeSDKHookBridge:
    """Adapts HookSet handlers to Claude Agent SDK hook callbacks."""

    def __init__(self, hooks: HookSet, agent: Optional[str] = None) -> None:
        """Initialize the bridge.

        Args:
            hooks: Hook set from create_plugin()
            agent: Agent name used for agent-keyed triggers
        """
        self.hooks = hooks
        self.agent = agent
        self._compaction_context: Dict[str, List[str]] = {}
        self._last_system_block: Dict[str, str] = {}

    async def _system_blocks(self, session_id: str) -> List[str]:
        """Render the instruction block, skipping it when unchanged."""
        if self.hooks.system_transform is None:
            return []

        output = SystemPromptOutput()
        await self.hooks.system_transform(SystemPromptInput(session_id=session_id), output)
        block = "\n\n".join(output.system)
        if not block or self._last_system_block.get(session_id) == block:
            return []
        self._last_system_block[session_id] = block
        return [block]

    async def on_user_prompt_submit(
        self,
        input_data: Dict[str, Any],
        tool_use_id: Optional[str],
        context: HookContext,
    ) -> Dict[str, Any]:
        session_id = input_data.get("session_id")
        if not session_id:
            return {}

        prompt = input_data.get("prompt") or ""
        blocks = self._compaction_context.pop(session_id, [])

        message = ChatMessageOutput(parts=[MessagePart(type="text", text=prompt)])
        await self.hooks.chat_message(
            ChatMessageInput(session_id=session_id, agent=self.agent), message
        )
        rendered = message.parts[0].text or ""
        if rendered != prompt and rendered.endswith(prompt):
            prefix = rendered[: len(rendered) - len(prompt)]
            blocks.append(prefix.removesuffix(MESSAGE_SEPARATOR))

        blocks.extend(await self._system_blocks(session_id))
        return _additional_context("UserPromptSubmit", blocks)

    def _tool_input(self, input_data: Dict[str, Any], tool_use_id: Optional[str]) -> Optional[ToolExecuteInput]:
        tool = TOOL_NAME_MAP.get(input_data.get("tool_name", ""))
        call_id = tool_use_id or input_data.get("tool_use_id")
        if tool is None or not call_id:
            return None
        return ToolExecuteInput(tool=tool, session_id=input_data.get("session_id"), call_id=call_id)

    async def on_pre_tool_use(
        self,
        input_data: Dict[str, Any],
        tool_use_id: Optional[str],
        context: HookContext,
    ) -> Dict[str, Any]:
        tool_input = self._tool_input(input_data, tool_use_id)
        if tool_input is not None:
            args = translate_tool_input(input_data.get("tool_input"))
            await self.hooks.tool_execute_before(tool_input, ToolExecuteBeforeOutput(args=args))
        return {}

    async def on_post_tool_use(
        self,
        input_data: Dict[str, Any],
        tool_use_id: Optional[str],
        context: HookContext,
    ) -> Dict[str, Any]:
        tool_input = self._tool_input(input_data, tool_use_id)
        if tool_input is not None:
            await self.hooks.tool_execute_after(tool_input, ToolExecuteAfterOutput())
        return {}

    async def on_pre_compact(
        self,
        input_data: Dict[str, Any],
        tool_use_id: Optional[str],
        context: HookContext,
    ) -> Dict[str, Any]:
        session_id = input_data.get("session_id")
        if not session_id:
            return {}

        output = CompactingOutput()
        await self.hooks.session_compacting(CompactingInput(session_id=session_id), output)
        if output.context:
            self._compaction_context.setdefault(session_id, []).extend(output.context)
        # Compaction drops earlier injections from the transcript
        self._last_system_block.pop(session_id, None)
        return {}

    async def close_session(self, session_id: str) -> None:
        """Tear down a session. The SDK has no deletion hook, so callers
        invoke this when a query() session ends."""
        self._compaction_context.pop(session_id, None)
        self._last_system_block.pop(session_id, None)
        await self.hooks.event(SessionEvent(type=SESSION_DELETED, properties={"sessionID": session_id}))

    def hook_matchers(self) -> Dict[str, List[HookMatcher]]:
        """Hook configuration for ``ClaudeAgentOptions(hooks=...)``."""
        return {
            "UserPromptSubmit": [HookMatcher(matcher=None, hooks=[self.on_user_prompt_submit])],
            "PreToolUse": [HookMatcher(matcher=FILE_TOOL_MATCHER, hooks=[self.on_pre_tool_use])],
            "PostToolUse": [HookMatcher(matcher=FILE_TOOL_MATCHER, hooks=[self.on_post_tool_use])],
            "PreCompact": [HookMatcher(matcher=None, hooks=[self.on_pre_compact])],
        }
