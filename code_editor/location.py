# code_editor/location.py
from __future__ import annotations
from fnmatch import fnmatchcase
from typing import List

# Modules shipped with the platform; their files are hidden from listings by default
BUILTIN_MODULES = (
    "analytics",
    "basic-skills",
    "builtin",
    "channel-messenger",
    "channel-slack",
    "channel-teams",
    "channel-telegram",
    "channel-web",
    "code-editor",
    "examples",
    "extensions",
    "history",
    "hitl",
    "nlu",
    "qna",
    "testing",
)


def builtin_exclusion() -> List[str]:
    """Glob patterns matching files that belong to a built-in module folder."""
    patterns: List[str] = []
    for mod in BUILTIN_MODULES:
        patterns.extend([f"{mod}/*", f"*/{mod}/*"])
    return patterns


def is_builtin(path: str) -> bool:
    path = path.lstrip("/")
    return any(fnmatchcase(path, pattern) for pattern in builtin_exclusion())
