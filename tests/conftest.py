import logging
import stat

import pytest

from optimz.config import ELF_MAGIC
from optimz.shell import ShellCmd

# ----------------------------------------------------------------------------
# helpers

SHRINK_TOOL = """\
#!/bin/sh
PATH=/usr/bin:/bin
for f; do :; done
echo "$(basename "$0") $*" >> "{calls}"
size=$(wc -c < "$f")
if [ "$size" -gt {floor} ]; then
    head -c $((size - {amount})) "$f" > "$f.tmp" && cat "$f.tmp" > "$f" && rm -f "$f.tmp"
fi
exit {status}
"""

GROW_TOOL = """\
#!/bin/sh
PATH=/usr/bin:/bin
for f; do :; done
echo "$(basename "$0") $*" >> "{calls}"
printf '%0{amount}d' 0 >> "$f"
exit {status}
"""


def make_executable(path, content="#!/bin/sh\nexit 0\n"):
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FakeShell(ShellCmd):
    """ShellCmd which simulates tools by name instead of running them.

    effects maps a tool path to (exit status, size change). The simulated
    size never drops below floor.
    """

    def __init__(self, size, effects=None, floor=0):
        super().__init__()
        self.size = size
        self.floor = floor
        self.effects = effects or {}
        self.calls = []

    def run(self, arglist, quiet=True):
        self.calls.append(arglist)
        status, delta = self.effects.get(arglist[0], (0, 0))
        self.size = max(self.floor, self.size + delta)
        return status

    def file_size(self, path):
        return self.size

NOISY_TOOL = """\
#!/bin/sh
echo "{marker} on stdout"
echo "{marker} on stderr" >&2
exit {status}
"""

# ----------------------------------------------------------------------------
# the fixtures


@pytest.fixture
def elf_file(tmp_path):
    path = tmp_path / "a.out"
    path.write_bytes(ELF_MAGIC + b"\x02\x01\x01" + b"\x00" * 249)
    path.chmod(0o755)
    return path


@pytest.fixture
def bin_dir(tmp_path, monkeypatch):
    """private, otherwise empty PATH"""
    path = tmp_path / "bin"
    path.mkdir()
    monkeypatch.setenv("PATH", str(path))
    return path


@pytest.fixture
def calls_log(tmp_path):
    return tmp_path / "calls.log"


@pytest.fixture
def shrink_tool(bin_dir, calls_log):
    """install a fake tool removing `amount` bytes while size > floor"""

    def _install(name, amount=16, floor=200, status=0):
        script = SHRINK_TOOL.format(
            calls=calls_log, amount=amount, floor=floor, status=status
        )
        return make_executable(bin_dir / name, script)

    return _install


@pytest.fixture
def grow_tool(bin_dir, calls_log):
    """install a fake tool appending `amount` bytes"""

    def _install(name, amount=32, status=0):
        script = GROW_TOOL.format(calls=calls_log, amount=amount, status=status)
        return make_executable(bin_dir / name, script)

    return _install


def read_calls(calls_log):
    if not calls_log.exists():
        return []
    return calls_log.read_text().splitlines()


@pytest.fixture(autouse=True)
def restore_logging():
    """undo configure_logging() done by the command line"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def noisy_tool(bin_dir):
    """install a fake tool printing `marker` on stdout and stderr"""

    def _install(name, marker="NOISY-TOOL-OUTPUT", status=0):
        script = NOISY_TOOL.format(marker=marker, status=status)
        return make_executable(bin_dir / name, script)

    return _install
