"""Trigger resolution: map files, paths and message text to skill names.

All functions here are pure. Results are deduplicated and keep the order
in which names were first seen.

Glob patterns support:
- ``**/``  zero or more leading path segments
- ``**``   anything, including slashes
- ``*``    anything except a slash
- ``?``    one character except a slash
"""

import re
from functools import lru_cache
from typing import Dict, Iterable, List, Pattern

GROUP_PREFIX = "@"

_GLOB_TOKEN_RE = re.compile(r"(\*\*/|\*\*|\*|\?)")
_GLOB_TOKENS = {
    "**/": "(?:[^/]+/)*",
    "**": ".*",
    "*": "[^/]*",
    "?": "[^/]",
}


def _dedupe(names: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(names))


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> Pattern[str]:
    """Compile a glob pattern into a fully anchored regex."""
    parts = []
    for piece in _GLOB_TOKEN_RE.split(pattern):
        if piece in _GLOB_TOKENS:
            parts.append(_GLOB_TOKENS[piece])
        elif piece:
            parts.append(re.escape(piece))
    return re.compile("^" + "".join(parts) + "$")


def match_glob_pattern(file_path: str, pattern: str) -> bool:
    """Case-sensitive glob match against the path exactly as given."""
    return glob_to_regex(pattern).match(file_path) is not None


def extension_match(ext: str, file_type_skills: Dict[str, List[str]]) -> List[str]:
    """Get skills for a file extension.

    Args:
        ext: Extension including the dot, e.g. ".ts"
        file_type_skills: Map of comma-separated extension lists to skills,
            e.g. {".ts,.tsx": ["typescript"]}

    Returns:
        Matching skill names
    """
    ext = ext.lower()
    skills: List[str] = []
    for pattern, skill_names in file_type_skills.items():
        extensions = [e.strip().lower() for e in pattern.split(",")]
        if ext in extensions:
            skills.extend(skill_names)
    return _dedupe(skills)


def path_match(file_path: str, path_patterns: Dict[str, List[str]]) -> List[str]:
    """Get skills for every glob pattern that matches a file path."""
    skills: List[str] = []
    for pattern, skill_names in path_patterns.items():
        if match_glob_pattern(file_path, pattern):
            skills.extend(skill_names)
    return _dedupe(skills)


def expand_groups(skill_names: List[str], groups: Dict[str, List[str]]) -> List[str]:
    """Replace ``@group`` references with the group's members.

    Expansion is one level deep. A reference to an unknown group is kept
    as a literal name.
    """
    resolved: List[str] = []
    for name in skill_names:
        group = name[len(GROUP_PREFIX):] if name.startswith(GROUP_PREFIX) else None
        if group is not None and group in groups:
            resolved.extend(groups[group])
        else:
            resolved.append(name)
    return _dedupe(resolved)


def is_group_reference(name: str) -> bool:
    return name.startswith(GROUP_PREFIX)


def text_contains_keyword(text: str, keywords: List[str]) -> bool:
    """Case-insensitive substring match for any keyword."""
    lower_text = text.lower()
    return any(keyword.lower() in lower_text for keyword in keywords)


def keyword_matches(text: str, content_triggers: Dict[str, List[str]]) -> List[List[str]]:
    """Get the skill lists of every keyword found in text, in config order."""
    return [
        skill_names
        for keyword, skill_names in content_triggers.items()
        if text_contains_keyword(text, [keyword])
    ]
