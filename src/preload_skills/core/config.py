"""Configuration for preload-skills.

The config is a JSON document discovered at one of the locations returned
by :func:`preload_skills.core.paths.get_config_search_paths`. It is loaded
once per plugin instance and treated as read-only afterwards.

Malformed documents never fail plugin startup: they are treated as an empty
config and merged over the defaults.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .paths import find_config_file

logger = logging.getLogger(__name__)


class InjectionMethod(str, Enum):
    """Where rendered skill text is delivered."""
    SYSTEM_PROMPT = "systemPrompt"  # Appended to the model instruction list
    CHAT_MESSAGE = "chatMessage"    # Prepended to the user message


class TriggerType(str, Enum):
    """Why a skill was loaded. Recorded in analytics."""
    INITIAL = "initial"
    FILE_TYPE = "fileType"
    AGENT = "agent"
    PATH = "path"
    CONTENT = "content"
    CONDITIONAL = "conditional"


@dataclass
class ConditionCheck:
    """Checks that must all pass for a conditional skill to load.

    Attributes:
        file_exists: Path relative to the project root that must exist
        package_has_dependency: Package that must appear in package.json
        env_var: Environment variable that must be set
    """
    file_exists: Optional[str] = None
    package_has_dependency: Optional[str] = None
    env_var: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConditionCheck":
        def _str(key: str) -> Optional[str]:
            value = data.get(key)
            return value if isinstance(value, str) and value else None

        return cls(
            file_exists=_str("fileExists"),
            package_has_dependency=_str("packageHasDependency"),
            env_var=_str("envVar"),
        )


@dataclass
class ConditionalSkill:
    """A skill loaded at startup only when its condition holds."""
    skill: str
    condition: ConditionCheck


@dataclass
class SkillSettings:
    """Per-skill overrides of global settings."""
    use_summary: Optional[bool] = None


def _parse_string_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def _parse_string_list_map(raw: Any) -> Dict[str, List[str]]:
    """Keep only list values, and only their string items."""
    if not isinstance(raw, dict):
        return {}
    return {
        key: _parse_string_list(value)
        for key, value in raw.items()
        if isinstance(value, list)
    }


def _parse_conditional_skills(raw: Any) -> List[ConditionalSkill]:
    if not isinstance(raw, list):
        return []

    result = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        if not isinstance(item.get("skill"), str) or not isinstance(item.get("if"), dict):
            continue
        result.append(
            ConditionalSkill(skill=item["skill"], condition=ConditionCheck.from_dict(item["if"]))
        )
    return result


def _parse_skill_settings(raw: Any) -> Dict[str, SkillSettings]:
    if not isinstance(raw, dict):
        return {}

    result = {}
    for skill_name, settings in raw.items():
        if isinstance(settings, dict) and isinstance(settings.get("useSummary"), bool):
            result[skill_name] = SkillSettings(use_summary=settings["useSummary"])
    return result


def _parse_max_tokens(raw: Any) -> Optional[int]:
    # bool is an int subclass; reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if not math.isfinite(raw):
        return None
    tokens = math.floor(raw)
    if tokens < 1:
        return None
    return tokens


def _parse_injection_method(raw: Any) -> InjectionMethod:
    try:
        return InjectionMethod(raw)
    except ValueError:
        return InjectionMethod.SYSTEM_PROMPT


@dataclass
class PreloadConfig:
    """Plugin configuration.

    Field names are snake_case versions of the JSON keys, e.g.
    ``fileTypeSkills`` becomes ``file_type_skills``.
    """

    # Skills injected at the start of every session
    skills: List[str] = field(default_factory=list)

    # Triggers
    file_type_skills: Dict[str, List[str]] = field(default_factory=dict)
    agent_skills: Dict[str, List[str]] = field(default_factory=dict)
    path_patterns: Dict[str, List[str]] = field(default_factory=dict)
    content_triggers: Dict[str, List[str]] = field(default_factory=dict)
    groups: Dict[str, List[str]] = field(default_factory=dict)
    conditional_skills: List[ConditionalSkill] = field(default_factory=list)
    skill_settings: Dict[str, SkillSettings] = field(default_factory=dict)

    # Global settings
    injection_method: InjectionMethod = InjectionMethod.SYSTEM_PROMPT
    max_tokens: Optional[int] = None
    use_summaries: bool = False
    use_minification: bool = False
    enable_tools: bool = True
    analytics: bool = False
    persist_after_compaction: bool = True
    debug: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreloadConfig":
        """Create config from a parsed JSON document.

        Values of the wrong type are ignored and the default is kept.

        Args:
            data: Dictionary with camelCase config keys.

        Returns:
            PreloadConfig instance.
        """
        defaults = cls()

        def _bool(key: str, default: bool) -> bool:
            value = data.get(key)
            return value if isinstance(value, bool) else default

        return cls(
            skills=_parse_string_list(data.get("skills")),
            file_type_skills=_parse_string_list_map(data.get("fileTypeSkills")),
            agent_skills=_parse_string_list_map(data.get("agentSkills")),
            path_patterns=_parse_string_list_map(data.get("pathPatterns")),
            content_triggers=_parse_string_list_map(data.get("contentTriggers")),
            groups=_parse_string_list_map(data.get("groups")),
            conditional_skills=_parse_conditional_skills(data.get("conditionalSkills")),
            skill_settings=_parse_skill_settings(data.get("skillSettings")),
            injection_method=_parse_injection_method(data.get("injectionMethod")),
            max_tokens=_parse_max_tokens(data.get("maxTokens")),
            use_summaries=_bool("useSummaries", defaults.use_summaries),
            use_minification=_bool("useMinification", defaults.use_minification),
            enable_tools=_bool("enableTools", defaults.enable_tools),
            analytics=_bool("analytics", defaults.analytics),
            persist_after_compaction=_bool(
                "persistAfterCompaction", defaults.persist_after_compaction
            ),
            debug=_bool("debug", defaults.debug),
        )

    @classmethod
    def load(cls, project_dir: Path, path: Optional[Path] = None) -> "PreloadConfig":
        """Load configuration for a project.

        Args:
            project_dir: Project root used for config discovery.
            path: Explicit config file. Defaults to the first discovered one.

        Returns:
            PreloadConfig instance. Defaults if no file exists or it is
            malformed.
        """
        if path is None:
            path = find_config_file(project_dir)

        if path is None or not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable config at {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config at {path}: expected a JSON object")
            return cls()

        logger.debug(f"Loaded config from {path}")
        return cls.from_dict(data)

    @property
    def uses_system_prompt(self) -> bool:
        return self.injection_method is InjectionMethod.SYSTEM_PROMPT

    @property
    def has_triggers(self) -> bool:
        """Whether any trigger map has entries."""
        return bool(
            self.file_type_skills
            or self.agent_skills
            or self.path_patterns
            or self.content_triggers
        )
