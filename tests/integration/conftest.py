"""Fixtures for integration tests."""

import stat
from pathlib import Path
from typing import Protocol

import pytest

from referendum.harnesses.config import HarnessConfig

FAKE_RUSTUP = """#!/bin/sh
toolkit="$2"
dir="$(dirname "$0")/toolkits/$toolkit"
if [ ! -d "$dir" ]; then
    echo "error: toolchain '$toolkit' is not installed" >&2
    exit 1
fi
printf '%s\\n' "$@" > "$dir/args"
pwd > "$dir/cwd"
if [ -f "$dir/after" ]; then
    while [ ! -f "$(cat "$dir/after")" ]; do
        sleep 0.05
    done
fi
if [ -f "$dir/sleep" ]; then
    exec sleep "$(cat "$dir/sleep")"
fi
if [ -f "$dir/child_sleep" ]; then
    sleep "$(cat "$dir/child_sleep")" &
    echo $! > "$dir/child_pid.tmp"
    mv "$dir/child_pid.tmp" "$dir/child_pid"
    cat "$dir/stdout"
    wait
    exit "$(cat "$dir/exit_code")"
fi
cat "$dir/stdout"
if [ -f "$dir/stderr" ]; then
    cat "$dir/stderr" >&2
fi
exit "$(cat "$dir/exit_code")"
"""


class InstallToolkitFn(Protocol):
    """Protocol for fake toolkit installation function."""

    def __call__(
        self,
        toolkit: str,
        stdout: str | bytes,
        *,
        exit_code: int = 0,
        stderr: str = "",
        sleep: float | None = None,
        child_sleep: float | None = None,
        after: Path | None = None,
    ) -> Path:
        """Install a toolkit that prints stdout and exits with exit_code.

        With after set, the toolkit waits for that file to exist before it
        prints anything.
        """


@pytest.fixture
def rustup_dir(tmp_path: Path) -> Path:
    """Create a directory holding a fake rustup executable."""
    rustup = tmp_path / "rustup"
    rustup.write_text(FAKE_RUSTUP)
    rustup.chmod(rustup.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    (tmp_path / "toolkits").mkdir()
    return tmp_path


@pytest.fixture
def harness_config(rustup_dir: Path) -> HarnessConfig:
    """Create harness configuration using the fake rustup."""
    return HarnessConfig(rustup=str(rustup_dir / "rustup"), working_dir=rustup_dir)


@pytest.fixture
def install_toolkit(rustup_dir: Path) -> InstallToolkitFn:
    """Return a function installing fake toolkits."""

    def _install(
        toolkit: str,
        stdout: str | bytes,
        *,
        exit_code: int = 0,
        stderr: str = "",
        sleep: float | None = None,
        child_sleep: float | None = None,
        after: Path | None = None,
    ) -> Path:
        toolkit_dir = rustup_dir / "toolkits" / toolkit
        toolkit_dir.mkdir()
        if isinstance(stdout, bytes):
            (toolkit_dir / "stdout").write_bytes(stdout)
        else:
            (toolkit_dir / "stdout").write_text(stdout)
        (toolkit_dir / "exit_code").write_text(str(exit_code))
        if stderr:
            (toolkit_dir / "stderr").write_text(stderr)
        if sleep is not None:
            (toolkit_dir / "sleep").write_text(str(sleep))
        if child_sleep is not None:
            (toolkit_dir / "child_sleep").write_text(str(child_sleep))
        if after is not None:
            (toolkit_dir / "after").write_text(str(after))
        return toolkit_dir

    return _install
