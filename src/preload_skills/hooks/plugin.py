"""Plugin entry point: builds the hook set for one project."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..core.conditions import resolve_conditional_skills
from ..core.config import PreloadConfig, TriggerType
from ..core.paths import get_analytics_file
from ..session.analytics import AnalyticsRecorder
from ..session.store import SessionStore
from ..skills.budget import BudgetAllocator
from ..skills.formatter import RenderOptions, render_skills
from ..skills.loader import SkillStore
from ..skills.models import Skill
from ..skills.triggers import expand_groups, is_group_reference
from ..tools.loaded_skills import TOOL_NAME, LoadedSkillsTool
from .base import PluginContext
from .chat_message import ChatMessageHook
from .lifecycle import LifecycleHooks
from .system_prompt import SystemPromptHook
from .tool_execute import ToolExecuteHooks
from .types import (
    ChatMessageHandler,
    CompactingHandler,
    EventHandler,
    SystemPromptHandler,
    ToolAfterHandler,
    ToolBeforeHandler,
)

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "preload_skills"


@dataclass
class HookSet:
    """The handlers exposed to the host.

    ``system_transform`` is only set for the ``systemPrompt`` injection
    method and ``tools`` is empty when tools are disabled.
    """

    context: PluginContext
    chat_message: ChatMessageHandler
    tool_execute_before: ToolBeforeHandler
    tool_execute_after: ToolAfterHandler
    session_compacting: CompactingHandler
    event: EventHandler
    system_transform: Optional[SystemPromptHandler] = None
    tools: Dict[str, LoadedSkillsTool] = field(default_factory=dict)


def _initial_skill_names(config: PreloadConfig, project_dir: Path) -> Tuple[List[str], Dict[str, TriggerType]]:
    """Always-loaded names followed by satisfied conditional skills."""
    conditional = resolve_conditional_skills(config.conditional_skills, project_dir)
    names = list(config.skills) + conditional
    trigger_types = {name: TriggerType.CONDITIONAL for name in conditional}
    for name in config.skills:
        trigger_types[name] = TriggerType.INITIAL
    return names, trigger_types


def find_missing_skills(
    skill_names: List[str],
    config: PreloadConfig,
    store: SkillStore,
) -> List[str]:
    """Names that could not be loaded from disk.

    Group references are expanded first; references to unknown groups are
    not reported.
    """
    missing = []
    for name in expand_groups(skill_names, config.groups):
        if is_group_reference(name):
            continue
        if store.load(name) is None:
            missing.append(name)
    return missing


def create_hooks(ctx: PluginContext) -> HookSet:
    """Build the hook set from a prepared context."""
    tool_hooks = ToolExecuteHooks(ctx)
    lifecycle = LifecycleHooks(ctx)

    tools: Dict[str, LoadedSkillsTool] = {}
    if ctx.config.enable_tools:
        tools[TOOL_NAME] = LoadedSkillsTool(ctx.session_store, ctx.allocator)

    return HookSet(
        context=ctx,
        chat_message=ChatMessageHook(ctx),
        tool_execute_before=tool_hooks.before,
        tool_execute_after=tool_hooks.after,
        session_compacting=lifecycle.compacting,
        event=lifecycle.event,
        system_transform=SystemPromptHook(ctx) if ctx.config.uses_system_prompt else None,
        tools=tools,
    )


def create_context(
    project_dir: Union[str, Path],
    config: Optional[PreloadConfig] = None,
    skill_search_dirs: Optional[List[Path]] = None,
) -> PluginContext:
    """Load config and initial skills and wire the stores together.

    Args:
        project_dir: Project root
        config: Configuration to use. Defaults to PreloadConfig.load()
        skill_search_dirs: Override for the skill search path

    Returns:
        A ready PluginContext
    """
    project_dir = Path(project_dir)
    if config is None:
        config = PreloadConfig.load(project_dir)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if config.debug else logging.INFO)

    skill_store = SkillStore(project_dir, search_dirs=skill_search_dirs)
    analytics = AnalyticsRecorder(get_analytics_file(project_dir), enabled=config.analytics)
    allocator = BudgetAllocator(config, skill_store, analytics)

    names, trigger_types = _initial_skill_names(config, project_dir)
    initial_skills: List[Skill] = []
    initial_tokens = 0
    missing: List[str] = []

    if names:
        result = allocator.load_with_budget(names, 0, TriggerType.INITIAL)
        initial_skills = result.skills
        initial_tokens = result.tokens_used
        missing = find_missing_skills(names, config, skill_store)

        logger.info(
            f"Loaded {len(initial_skills)} initial skills "
            f"{[s.name for s in initial_skills]} ({initial_tokens} tokens)"
        )
        if missing:
            logger.warning(f"Skills not found: {missing}")
    elif not config.has_triggers:
        logger.warning("No skills configured. Create .opencode/preload-skills.json")

    session_store = SessionStore(
        skill_store,
        analytics,
        initial_skills=initial_skills,
        initial_trigger_types=trigger_types,
    )

    return PluginContext(
        config=config,
        project_dir=project_dir,
        skill_store=skill_store,
        session_store=session_store,
        allocator=allocator,
        initial_skills=initial_skills,
        initial_formatted_content=render_skills(initial_skills, RenderOptions.from_config(config)),
        initial_tokens_used=initial_tokens,
        missing_skills=missing,
    )


def create_plugin(
    project_dir: Union[str, Path],
    config: Optional[PreloadConfig] = None,
    skill_search_dirs: Optional[List[Path]] = None,
) -> HookSet:
    """Create the preload-skills hook set for a project.

    Never fails: a missing or malformed config yields a hook set that
    injects nothing.

    Example:
        hooks = create_plugin(Path("."))
        await hooks.chat_message(ChatMessageInput(session_id="s1"), output)
    """
    return create_hooks(create_context(project_dir, config, skill_search_dirs))
