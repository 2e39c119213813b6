"""Host integrations for preload-skills."""

# Note: We use lazy imports here so that importing preload_skills does not
# import claude_agent_sdk until the bridge is explicitly requested.


def __getattr__(name):
    """Lazy import to avoid loading host SDKs at package import time."""
    if name in ("ClaudeSDKHookBridge", "translate_tool_input"):
        from . import claude_sdk
        return getattr(claude_sdk, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ClaudeSDKHookBridge", "translate_tool_input"]
