"""
Skill store: loads SKILL.md files from the skill search path.

A skill file starts with a header block delimited by ``---`` lines holding
``name``, ``description`` and an optional ``summary``, followed by free-form
markdown. Missing or unreadable skills are reported as None, never raised.
"""

import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.paths import find_skill_file, get_skill_search_dirs
from .models import Skill

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 500

_HEADER_RE = re.compile(r"\A---\s*\n(.*?)\n---", re.DOTALL)
_HEADER_BLOCK_RE = re.compile(r"\A---\s*\n.*?\n---\s*\n?", re.DOTALL)
_HEADER_LINE_RE = re.compile(r"^(name|description|summary):\s*(.+)$", re.MULTILINE)
_HEADER_KEYS = ("name", "description", "summary")


def estimate_tokens(text: str) -> int:
    """Estimate the token count of text as ceil(len / 4)."""
    return math.ceil(len(text) / 4)


def strip_header(content: str) -> str:
    """Remove the leading header block, if any."""
    return _HEADER_BLOCK_RE.sub("", content, count=1)


def _parse_header_lines(header: str) -> Dict[str, str]:
    """Line-wise ``key: value`` parsing for headers that are not valid YAML."""
    result = {}
    for key, value in _HEADER_LINE_RE.findall(header):
        result.setdefault(key, value.strip())
    return result


def parse_frontmatter(content: str) -> Dict[str, str]:
    """Parse name, description and summary from the header block.

    Headers are read as YAML so quoted and folded values work. Descriptions
    like ``Use when: editing`` are not valid YAML, so a plain line parser
    is used as a fallback.

    Args:
        content: Full skill file text

    Returns:
        Dict containing whichever of name/description/summary are present
    """
    match = _HEADER_RE.match(content)
    if not match:
        return {}

    header = match.group(1)
    try:
        data: Any = yaml.safe_load(header)
    except yaml.YAMLError:
        data = None

    if not isinstance(data, dict):
        return _parse_header_lines(header)

    result = {}
    for key in _HEADER_KEYS:
        value = data.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            result[key] = text
    return result


def extract_auto_summary(content: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """Build a summary from the first section of the skill body.

    Takes the text before the first ``## `` heading, drops a leading ``# ``
    title and collapses newlines. Long text is cut on a whitespace boundary
    and marked with an ellipsis.
    """
    body = strip_header(content)
    first_section = re.split(r"\n##\s", body, maxsplit=1)[0]
    cleaned = re.sub(r"^#\s+.+\n?", "", first_section, count=1)
    cleaned = re.sub(r"\n+", " ", cleaned).strip()

    if len(cleaned) <= max_length:
        return cleaned
    return re.sub(r"\s+\S*$", "", cleaned[:max_length]) + "..."


class SkillStore:
    """
    Loads skills by name and caches them for the plugin lifetime.

    The cache is shared by every session of a plugin instance; a skill that
    was loaded once is never read from disk again.

    Example usage:
        store = SkillStore(project_dir=Path("."))
        skill = store.load("testing")
        skills = store.load_many(["testing", "react"])
    """

    def __init__(
        self,
        project_dir: Path,
        search_dirs: Optional[List[Path]] = None,
    ) -> None:
        """
        Initialize the skill store.

        Args:
            project_dir: Project root used for the default search path
            search_dirs: Directories to search, in priority order. Defaults
                         to get_skill_search_dirs(project_dir)
        """
        self.project_dir = project_dir
        self.search_dirs = search_dirs or get_skill_search_dirs(project_dir)
        self._cache: Dict[str, Skill] = {}

    def _read_skill(self, skill_name: str) -> Optional[Skill]:
        file_path = find_skill_file(skill_name, self.search_dirs)
        if file_path is None:
            logger.debug(f"Skill not found: {skill_name}")
            return None

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read skill {skill_name} at {file_path}: {e}")
            return None

        header = parse_frontmatter(content)
        summary = header.get("summary")
        return Skill(
            name=header.get("name", skill_name),
            description=header.get("description", ""),
            summary=summary if summary is not None else extract_auto_summary(content),
            content=content,
            file_path=file_path,
            token_count=estimate_tokens(content),
        )

    def load(self, skill_name: str) -> Optional[Skill]:
        """
        Load a skill by name.

        Args:
            skill_name: Skill directory name

        Returns:
            The Skill, or None if no readable SKILL.md exists
        """
        cached = self._cache.get(skill_name)
        if cached is not None:
            return cached

        skill = self._read_skill(skill_name)
        if skill is None:
            return None

        self._cache[skill_name] = skill
        # The header name may differ from the directory name
        self._cache.setdefault(skill.name, skill)
        return skill

    def load_many(self, skill_names: Any) -> List[Skill]:
        """
        Load several skills, preserving order and skipping missing ones.

        Args:
            skill_names: List of skill names. Anything else yields []

        Returns:
            Loaded skills in input order
        """
        if not isinstance(skill_names, (list, tuple)):
            return []

        skills = []
        for name in skill_names:
            skill = self.load(name)
            if skill is not None:
                skills.append(skill)
        return skills

    def get_cached(self, skill_name: str) -> Optional[Skill]:
        """Get a previously loaded skill without touching the disk."""
        return self._cache.get(skill_name)

    def cache_skill(self, skill: Skill) -> None:
        """Add a skill to the cache under its name."""
        self._cache[skill.name] = skill
