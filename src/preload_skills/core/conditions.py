"""Condition checks for conditional skills.

A condition may carry any subset of:
- fileExists: path relative to the project root
- packageHasDependency: package name in package.json
- envVar: environment variable name

All present checks must pass. Every failure, including an unreadable
manifest, evaluates to False.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .config import ConditionalSkill, ConditionCheck

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


def _read_dependencies(project_dir: Path) -> Dict[str, Any]:
    """Merge the dependency maps of the project manifest.

    Raises:
        OSError, ValueError: If the manifest is missing or malformed.
    """
    manifest = project_dir / MANIFEST_FILENAME
    with open(manifest, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{manifest} is not a JSON object")

    deps: Dict[str, Any] = {}
    for section in DEPENDENCY_SECTIONS:
        value = data.get(section)
        if isinstance(value, dict):
            deps.update(value)
    return deps


def _has_dependency(project_dir: Path, package: str) -> bool:
    try:
        deps = _read_dependencies(project_dir)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.debug(f"Dependency check for {package!r} failed: {e}")
        return False
    return package in deps


def evaluate_condition(condition: ConditionCheck, project_dir: Path) -> bool:
    """Evaluate a condition against a project.

    Args:
        condition: Checks to apply (absent checks are skipped)
        project_dir: Project root for file and manifest lookups

    Returns:
        True if every present check passes, False otherwise
    """
    if condition.file_exists:
        if not (project_dir / condition.file_exists).exists():
            return False

    if condition.package_has_dependency:
        if not _has_dependency(project_dir, condition.package_has_dependency):
            return False

    if condition.env_var:
        if condition.env_var not in os.environ:
            return False

    return True


def resolve_conditional_skills(
    conditional_skills: List[ConditionalSkill],
    project_dir: Path,
) -> List[str]:
    """Return the names of conditional skills whose condition holds, in order."""
    return [
        entry.skill
        for entry in conditional_skills
        if evaluate_condition(entry.condition, project_dir)
    ]
