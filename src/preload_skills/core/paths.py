"""File discovery for preload-skills.

All lookups are ordered; the first existing file wins.

Directory structure:
    <project>/.opencode/
    ├── preload-skills.json              # Project config (preferred)
    ├── preload-skills-analytics.json    # Usage analytics (when enabled)
    └── skills/{name}/SKILL.md           # Project skills
    <project>/.claude/skills/{name}/SKILL.md
    <project>/preload-skills.json        # Project-root config fallback
    ~/.config/opencode/
    ├── preload-skills.json              # Global config fallback
    └── skills/{name}/SKILL.md           # Global skills
    ~/.claude/skills/{name}/SKILL.md
"""

from pathlib import Path
from typing import List, Optional

CONFIG_FILENAME = "preload-skills.json"
ANALYTICS_FILENAME = "preload-skills-analytics.json"
SKILL_FILENAME = "SKILL.md"

PROJECT_DIR_NAME = ".opencode"
ALT_PROJECT_DIR_NAME = ".claude"


def get_global_config_dir() -> Path:
    """Get the global configuration directory.

    Returns:
        Path to ~/.config/opencode.
    """
    return Path.home() / ".config" / "opencode"


def get_config_search_paths(project_dir: Path) -> List[Path]:
    """Get candidate config file locations in priority order.

    Args:
        project_dir: Project root directory.

    Returns:
        List of config file paths, most specific first.
    """
    return [
        project_dir / PROJECT_DIR_NAME / CONFIG_FILENAME,
        project_dir / CONFIG_FILENAME,
        get_global_config_dir() / CONFIG_FILENAME,
    ]


def find_config_file(project_dir: Path) -> Optional[Path]:
    """Find the first existing config file for a project.

    Args:
        project_dir: Project root directory.

    Returns:
        Path to the config file, or None if no config exists.
    """
    for path in get_config_search_paths(project_dir):
        if path.is_file():
            return path
    return None


def get_skill_search_dirs(project_dir: Path) -> List[Path]:
    """Get skill directories in priority order.

    Args:
        project_dir: Project root directory.

    Returns:
        Project skill directories followed by the global ones.
    """
    return [
        project_dir / PROJECT_DIR_NAME / "skills",
        project_dir / ALT_PROJECT_DIR_NAME / "skills",
        get_global_config_dir() / "skills",
        Path.home() / ALT_PROJECT_DIR_NAME / "skills",
    ]


def find_skill_file(skill_name: str, search_dirs: List[Path]) -> Optional[Path]:
    """Find the SKILL.md file for a skill name.

    Args:
        skill_name: Skill directory name.
        search_dirs: Directories to search, in priority order.

    Returns:
        Path to the first SKILL.md found, or None.
    """
    for skill_dir in search_dirs:
        skill_path = skill_dir / skill_name / SKILL_FILENAME
        if skill_path.is_file():
            return skill_path
    return None


def get_analytics_file(project_dir: Path) -> Path:
    """Get the path to the analytics file for a project."""
    return project_dir / PROJECT_DIR_NAME / ANALYTICS_FILENAME


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        The same path.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
