"""preload-skills - Inject skill documents into AI coding agent sessions.

Skills (SKILL.md files) are injected at controlled points of a session's
lifecycle, selected by triggers and limited by a token budget.

Main modules:
    - core: Configuration, file discovery and condition checks
    - skills: Skill loading, rendering, trigger resolution and budgeting
    - session: Per-session state and usage analytics
    - hooks: Host lifecycle handlers and create_plugin()
    - tools: The loaded_skills inspection tool
    - adapters: Claude Agent SDK integration
    - cli: Command-line interface (preload-skills command)
"""

__version__ = "0.1.0"

from .hooks import HookSet, create_plugin

__all__ = ["HookSet", "create_plugin", "__version__"]
