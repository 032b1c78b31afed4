"""tools: locate the external utilities optimz drives.

Each role lists candidate executable names in order of preference. LLVM
flavored binutils come first since they are the only ones available on some
systems (e.g. Termux), GNU binutils are the fallback.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Optional


TOOL_CANDIDATES = {
    "strip": ["llvm-strip", "strip"],
    "objcopy": ["llvm-objcopy", "objcopy"],
    "patchelf": ["patchelf"],
    "sstrip": ["sstrip"],
    "upx": ["upx"],
}

log = logging.getLogger("ToolLocator")


@dataclass(frozen=True)
class ToolSet:
    """resolved path per tool role, None when the role is unavailable"""

    strip: Optional[str] = None
    objcopy: Optional[str] = None
    patchelf: Optional[str] = None
    sstrip: Optional[str] = None
    upx: Optional[str] = None

    def get(self, role: str) -> Optional[str]:
        return getattr(self, role, None)

    def available(self) -> list[str]:
        """roles which resolved to an executable"""
        return [f.name for f in fields(self) if getattr(self, f.name)]

    def __bool__(self):
        return bool(self.available())


def which(name: str, path: Optional[str] = None) -> Optional[str]:
    """first regular, executable file called `name` on the search path"""
    if path is None:
        path = os.environ.get("PATH", "")
    if not path:
        return None
    for directory in path.split(os.pathsep):
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return None


def locate_tools(path: Optional[str] = None) -> ToolSet:
    """resolve every role in TOOL_CANDIDATES against the search path"""
    resolved = {}
    for role, candidates in TOOL_CANDIDATES.items():
        for name in candidates:
            found = which(name, path)
            if found:
                log.debug("%s: %s", role, found)
                resolved[role] = found
                break
        else:
            log.debug("%s: not found (tried %s)", role, ", ".join(candidates))
    return ToolSet(**resolved)
