"""
Host lifecycle hooks.

create_plugin() builds a HookSet once per project. Each handler takes a
typed input and mutates a typed output in place:

- chat_message: agent/keyword triggers; chat-message injection
- system_transform: system-prompt injection (systemPrompt method only)
- tool_execute_before / tool_execute_after: file-type and path triggers
- session_compacting: re-asserts loaded skills in the compaction context
- event: session cleanup on deletion
"""

from .base import PluginContext
from .chat_message import MESSAGE_SEPARATOR
from .plugin import HookSet, create_context, create_hooks, create_plugin
from .types import (
    ChatMessageInput,
    ChatMessageOutput,
    CompactingInput,
    CompactingOutput,
    MessagePart,
    SessionEvent,
    SystemPromptInput,
    SystemPromptOutput,
    ToolArgs,
    ToolExecuteAfterOutput,
    ToolExecuteBeforeOutput,
    ToolExecuteInput,
    normalize_tool_args,
)

__all__ = [
    "ChatMessageInput",
    "ChatMessageOutput",
    "CompactingInput",
    "CompactingOutput",
    "HookSet",
    "MESSAGE_SEPARATOR",
    "MessagePart",
    "PluginContext",
    "SessionEvent",
    "SystemPromptInput",
    "SystemPromptOutput",
    "ToolArgs",
    "ToolExecuteAfterOutput",
    "ToolExecuteBeforeOutput",
    "ToolExecuteInput",
    "create_context",
    "create_hooks",
    "create_plugin",
    "normalize_tool_args",
]
