"""Pytest configuration for preload-skills tests.

Every test runs with HOME pointed at a temporary directory so the global
config and skill directories of the machine running the tests are never
read.
"""
import json
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty project root."""
    path = tmp_path / "project"
    path.mkdir()
    return path


def write_skill(
    project_dir: Path,
    name: str,
    content: str,
    root: str = ".opencode",
) -> Path:
    """Write <project>/<root>/skills/<name>/SKILL.md."""
    skill_dir = project_dir / root / "skills" / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_file = skill_dir / "SKILL.md"
    skill_file.write_text(content)
    return skill_file


def simple_skill(name: str, body: str = "Content", description: str = "Test") -> str:
    """Skill file text with a minimal header."""
    return f"---\nname: {name}\ndescription: {description}\n---\n{body}"


def write_config(project_dir: Path, data: Dict[str, Any]) -> Path:
    """Write <project>/.opencode/preload-skills.json."""
    config_dir = project_dir / ".opencode"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "preload-skills.json"
    config_file.write_text(json.dumps(data))
    return config_file
