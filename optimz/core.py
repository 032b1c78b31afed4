#!/usr/bin/env python3
"""core.py

Step
    data-only descriptor: (name, tool role, argument template)

PassExecutor(target, tools)
    runs every STEPS entry whose tool role is available, once,
    recording the file size around each invocation

Optimizer(path, passes)
    validate -> locate tools -> backup -> repeat PassExecutor.run()
    until `passes` are done or a pass shrinks nothing
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional

from .config import BACKUP_SUFFIX, DEFAULT_PASSES
from .elf import validate_target
from .errors import BackupError, NoToolsError
from .shell import ShellCmd
from .tools import TOOL_CANDIDATES, ToolSet, locate_tools


class Step(NamedTuple):
    """one external invocation, completed by appending the target path"""

    name: str
    role: str
    args: tuple[str, ...] = ()

    def command(self, tool: str, target: Path | str) -> list[str]:
        return [tool, *self.args, str(target)]


# fmt: off
STEPS = (
    # symbols: unneeded first, then all
    Step("strip unneeded symbols", "strip", ("--strip-unneeded",)),
    Step("strip all symbols", "strip", ("--strip-all",)),
    # debug info and non-essential metadata sections
    Step("strip debug info", "objcopy", ("--strip-debug",)),
    Step("remove metadata sections", "objcopy", (
        "--remove-section=.comment",
        "--remove-section=.note",
        "--remove-section=.note.*",
        "--remove-section=.gnu_debuglink",
    )),
    Step("compress debug sections", "objcopy", ("--compress-debug-sections",)),
    Step("shrink rpath", "patchelf", ("--shrink-rpath",)),
    Step("super-strip", "sstrip"),
    # packing must stay last: packed executables are opaque to the rest
    Step("pack executable", "upx", ("--best", "--lzma")),
)
# fmt: on


@dataclass
class StepResult:
    """outcome of a single executed step"""

    name: str
    command: list[str]
    returncode: int
    size_before: int
    size_after: int

    @property
    def productive(self) -> bool:
        """tool succeeded and the file got strictly smaller"""
        return self.returncode == 0 and self.size_after < self.size_before


@dataclass
class PassResult:
    """outcome of one full run of the step sequence"""

    index: int
    size_before: int
    size_after: int = 0
    steps: list[StepResult] = field(default_factory=list)

    @property
    def productive(self) -> bool:
        """some step shrank the file and the pass did not grow it overall"""
        return (
            any(step.productive for step in self.steps)
            and self.size_after <= self.size_before
        )


class PassExecutor:
    """Runs the fixed step sequence once against a target."""

    def __init__(
        self,
        target: Path | str,
        tools: ToolSet,
        shell: Optional[ShellCmd] = None,
        steps: tuple[Step, ...] = STEPS,
    ):
        self.target = Path(target)
        self.tools = tools
        self.steps = steps
        self.log = logging.getLogger(self.__class__.__name__)
        self.cmd = shell or ShellCmd(self.log)

    def commands(self) -> list[list[str]]:
        """command lines of the steps which would execute"""
        return [
            step.command(self.tools.get(step.role), self.target)
            for step in self.steps
            if self.tools.get(step.role)
        ]

    def run_step(self, step: Step) -> Optional[StepResult]:
        """run step if its tool is available, None if skipped"""
        tool = self.tools.get(step.role)
        if not tool:
            return None
        command = step.command(tool, self.target)
        size_before = self.cmd.file_size(self.target)
        returncode = self.cmd.run(command)
        size_after = self.cmd.file_size(self.target)
        self.log.debug(
            "%s: %d -> %d bytes (exit %d)",
            step.name, size_before, size_after, returncode,
        )
        return StepResult(step.name, command, returncode, size_before, size_after)

    def run(self, index: int = 1) -> PassResult:
        """run every available step once"""
        result = PassResult(index, self.cmd.file_size(self.target))
        for step in self.steps:
            step_result = self.run_step(step)
            if step_result:
                result.steps.append(step_result)
        result.size_after = self.cmd.file_size(self.target)
        self.log.info("Size: %d bytes", result.size_after)
        return result


class Optimizer:
    """Shrink an ELF executable by repeated passes of external tools.

    Args:
        path: ELF executable, optimized in place
        passes: maximum number of passes (clamped to at least 1)
        tools: pre-resolved tools, located on PATH when omitted
    """

    def __init__(
        self,
        path: Path | str,
        passes: int = DEFAULT_PASSES,
        tools: Optional[ToolSet] = None,
        shell: Optional[ShellCmd] = None,
    ):
        self.path = Path(path)
        self.passes = max(1, passes)
        self.tools = tools
        self.log = logging.getLogger(self.__class__.__name__)
        self.cmd = shell or ShellCmd(self.log)

    def __repr__(self):
        return f"<{self.__class__.__name__}:'{self.path}'>"

    @property
    def backup_path(self) -> Path:
        """sibling `<target>.bak`"""
        return self.path.with_name(self.path.name + BACKUP_SUFFIX)

    def backup(self) -> Path:
        """copy target to backup_path unless a backup already exists"""
        if self.backup_path.exists():
            self.log.debug("backup exists: %s", self.backup_path)
            return self.backup_path
        try:
            self.cmd.copy(self.path, self.backup_path)
        except OSError as e:
            raise BackupError(f"Failed to create backup: {e}") from e
        return self.backup_path

    def prepare(self) -> ToolSet:
        """validate target and resolve tools, raising if unusable"""
        validate_target(self.path)
        if self.tools is None:
            self.tools = locate_tools()
        if not self.tools:
            names = sorted({n for c in TOOL_CANDIDATES.values() for n in c})
            raise NoToolsError(
                f"No optimization tools found in PATH ({', '.join(names)})"
            )
        self.log.debug("tools: %s", ", ".join(self.tools.available()))
        return self.tools

    def plan(self) -> list[list[str]]:
        """commands a single pass would run, without touching the target"""
        tools = self.prepare()
        return PassExecutor(self.path, tools, self.cmd).commands()

    def process(self) -> list[PassResult]:
        """main process: backup then run passes until nothing shrinks."""
        tools = self.prepare()
        self.backup()

        executor = PassExecutor(self.path, tools, self.cmd)
        initial_size = self.cmd.file_size(self.path)
        results = []
        for i in range(1, self.passes + 1):
            self.log.info("Pass %d/%d", i, self.passes)
            result = executor.run(i)
            results.append(result)
            if not result.productive:
                self.log.info("No further changes; stopping early.")
                break

        self.log.info("BEFORE: %d bytes", initial_size)
        self.log.info("AFTER:  %d bytes", self.cmd.file_size(self.path))
        self.log.info("Done.")
        return results
