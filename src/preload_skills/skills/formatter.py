"""Rendering of skills into the injected text block."""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..core.config import PreloadConfig, SkillSettings
from .loader import strip_header
from .models import Skill

SKILL_TAG = "preloaded-skill"
WRAPPER_TAG = "preloaded-skills"
PREAMBLE = "The following skills have been automatically loaded for this session:"


@dataclass
class RenderOptions:
    """Options controlling how skill bodies are rendered."""

    use_summaries: bool = False
    use_minification: bool = False
    skill_settings: Dict[str, SkillSettings] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: PreloadConfig) -> "RenderOptions":
        return cls(
            use_summaries=config.use_summaries,
            use_minification=config.use_minification,
            skill_settings=config.skill_settings,
        )

    def should_use_summary(self, skill_name: str) -> bool:
        """Per-skill setting wins over the global flag."""
        settings = self.skill_settings.get(skill_name)
        if settings is not None and settings.use_summary is not None:
            return settings.use_summary
        return self.use_summaries


def minify_content(text: str) -> str:
    """Strip comments, the header block and redundant whitespace."""
    text = re.sub(r"<!--.*?-->", "", text, flags=re.DOTALL)
    text = strip_header(text)
    text = re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    return text.strip("\n")


def _skill_body(skill: Skill, options: RenderOptions) -> str:
    if options.should_use_summary(skill.name) and skill.summary:
        content = skill.summary
    else:
        content = skill.content
    if options.use_minification:
        content = minify_content(content)
    return content


def render_skills(skills: Iterable[Skill], options: Optional[RenderOptions] = None) -> str:
    """Render skills into one wrapped block.

    Args:
        skills: Skills to render, in order
        options: Rendering options. Defaults to full, unminified content

    Returns:
        The rendered block, or "" when there is nothing to render
    """
    skills = list(skills)
    if not skills:
        return ""

    options = options or RenderOptions()
    parts: List[str] = [
        f'<{SKILL_TAG} name="{skill.name}">\n{_skill_body(skill, options)}\n</{SKILL_TAG}>'
        for skill in skills
    ]
    body = "\n\n".join(parts)
    return f"<{WRAPPER_TAG}>\n{PREAMBLE}\n\n{body}\n</{WRAPPER_TAG}>"
