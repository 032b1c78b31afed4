"""elf: check that a path is an executable ELF binary."""

import os
from pathlib import Path

from .config import ELF_MAGIC
from .errors import NotElfError, NotExecutableError, TargetNotFound


def is_executable_file(path: Path | str) -> bool:
    """returns True if path is a regular file we may execute."""
    return os.path.isfile(path) and os.access(path, os.X_OK)


def is_elf(path: Path | str) -> bool:
    """returns True if file starts with the ELF magic."""
    try:
        with open(path, "rb") as fopen:
            prefix = fopen.read(len(ELF_MAGIC))
    except OSError:
        return False
    return prefix == ELF_MAGIC


def validate_target(path: Path | str) -> Path:
    """raise unless path is an existing, executable ELF file"""
    path = Path(path)
    if not os.path.exists(path):
        raise TargetNotFound(f"Target not found: {path}")
    if not is_executable_file(path):
        raise NotExecutableError(
            "Target is not an executable file "
            f"(or lacks execute permission): {path}"
        )
    if not is_elf(path):
        raise NotElfError(f"Target is not an ELF binary: {path}")
    return path
