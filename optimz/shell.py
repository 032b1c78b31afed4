import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Optional


class ShellCmd:
    """Runs external tools and handles the target file on disk."""

    def __init__(self, log: Optional[logging.Logger] = None):
        if not log:
            self.log = logging.getLogger(self.__class__.__name__)
        else:
            self.log = log

    def run(self, arglist: list[str], quiet: bool = True) -> int:
        """Run command (no shell) and return its exit status.

        With `quiet` the tool's own stdout/stderr go to the null device.
        A tool that cannot be launched at all reports status 127.
        """
        self.log.debug("[exec] %s", shlex.join(arglist))
        stream = subprocess.DEVNULL if quiet else None
        try:
            res = subprocess.run(arglist, stdout=stream, stderr=stream, check=False)
        except OSError as e:
            self.log.debug("could not launch %s: %s", arglist[0], e)
            return 127
        return res.returncode

    __call__ = run

    def file_size(self, path: Path | str) -> int:
        """size of file in bytes, 0 if it cannot be stat'ed"""
        try:
            return os.stat(path).st_size
        except OSError:
            return 0

    def copy(self, src: Path | str, dst: Path | str):
        """copy file contents and permission bits from src to dst"""
        self.log.info("copy %s to %s", src, dst)
        shutil.copy2(src, dst)
