"""Input and output shapes of the host lifecycle hooks.

Each hook receives an input describing the event and a mutable output the
handler may modify in place; the host reads the output after the handler
returns.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

SESSION_DELETED = "session.deleted"

# Argument names that may carry a file path, in priority order
FILE_PATH_ARG_KEYS = ("filePath", "path", "file")


@dataclass
class MessagePart:
    """One part of a chat message. Only "text" parts are injected into."""
    type: str = "text"
    text: Optional[str] = None


@dataclass
class ChatMessageInput:
    session_id: Optional[str]
    agent: Optional[str] = None


@dataclass
class ChatMessageOutput:
    parts: List[MessagePart] = field(default_factory=list)

    def first_text_part(self) -> Optional[MessagePart]:
        for part in self.parts:
            if part.type == "text" and part.text is not None:
                return part
        return None


@dataclass
class SystemPromptInput:
    session_id: Optional[str]
    model: Optional[str] = None


@dataclass
class SystemPromptOutput:
    system: List[str] = field(default_factory=list)


@dataclass
class ToolExecuteInput:
    tool: str
    session_id: Optional[str]
    call_id: str


@dataclass
class ToolExecuteBeforeOutput:
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolExecuteAfterOutput:
    title: str = ""
    output: str = ""
    metadata: Any = None


@dataclass
class CompactingInput:
    session_id: Optional[str]


@dataclass
class CompactingOutput:
    context: List[str] = field(default_factory=list)
    prompt: Optional[str] = None


@dataclass
class SessionEvent:
    type: str
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def session_id(self) -> Optional[str]:
        value = self.properties.get("sessionID")
        return value if isinstance(value, str) and value else None


@dataclass
class ToolArgs:
    """Normalized tool call arguments."""
    file_path: Optional[str] = None


def normalize_tool_args(args: Any) -> ToolArgs:
    """Extract the fields this plugin reads from raw tool arguments.

    The file path is taken from the first of ``filePath``, ``path`` and
    ``file`` that holds a non-empty string.
    """
    if not isinstance(args, Mapping):
        return ToolArgs()

    for key in FILE_PATH_ARG_KEYS:
        value = args.get(key)
        if isinstance(value, str) and value:
            return ToolArgs(file_path=value)
    return ToolArgs()


ChatMessageHandler = Callable[[ChatMessageInput, ChatMessageOutput], Awaitable[None]]
SystemPromptHandler = Callable[[SystemPromptInput, SystemPromptOutput], Awaitable[None]]
ToolBeforeHandler = Callable[[ToolExecuteInput, ToolExecuteBeforeOutput], Awaitable[None]]
ToolAfterHandler = Callable[[ToolExecuteInput, ToolExecuteAfterOutput], Awaitable[None]]
CompactingHandler = Callable[[CompactingInput, CompactingOutput], Awaitable[None]]
EventHandler = Callable[[SessionEvent], Awaitable[None]]
