"""optimz: shrink ELF executables with external binutils-style tools."""

__version__ = "0.1"

from .core import Optimizer, PassExecutor, PassResult, Step, StepResult, STEPS
from .tools import ToolSet, locate_tools
