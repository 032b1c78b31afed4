"""errors: fatal conditions reported by optimz.

Each one aborts the run with exit status 1 before the target is touched.
Failures of individual optimization steps are not errors.
"""


class OptimzError(Exception):
    """base class of all fatal optimz errors"""


class UsageError(OptimzError):
    """malformed command line"""


class TargetNotFound(OptimzError):
    """target path does not exist"""


class NotExecutableError(OptimzError):
    """target is not a regular file with execute permission"""


class NotElfError(OptimzError):
    """target does not start with the ELF magic"""


class NoToolsError(OptimzError):
    """none of the external optimization tools could be found"""


class BackupError(OptimzError):
    """the backup copy of the target could not be written"""
