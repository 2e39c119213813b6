"""Tools exposed to the agent."""

from .loaded_skills import TOOL_NAME, LoadedSkillsTool, ToolContext

__all__ = ["LoadedSkillsTool", "TOOL_NAME", "ToolContext"]
