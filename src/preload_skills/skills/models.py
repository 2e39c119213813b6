"""Data models for skills."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Skill:
    """A parsed SKILL.md document.

    Skills are immutable once loaded and shared by reference across
    sessions through the skill store cache.
    """

    name: str
    description: str
    content: str  # Full file text, header included
    file_path: Path
    token_count: int  # Estimated, see estimate_tokens()
    summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        d = {
            "name": self.name,
            "description": self.description,
            "file_path": str(self.file_path),
            "token_count": self.token_count,
        }
        if self.summary:
            d["summary"] = self.summary
        return d
