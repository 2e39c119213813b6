"""Core modules for preload-skills.

This package contains:
    - config: Typed plugin configuration and its JSON loader
    - paths: Config, skill and analytics file discovery
    - conditions: Condition checks for conditional skills
"""

from . import conditions
from . import config
from . import paths

__all__ = [
    "conditions",
    "config",
    "paths",
]
