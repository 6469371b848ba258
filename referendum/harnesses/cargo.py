"""Harness running ``cargo test`` under a rustup toolchain."""

import asyncio
import logging
import os
import re
import signal
from collections.abc import Sequence
from contextlib import suppress
from dataclasses import dataclass, field

from referendum.errors import RunFailureError
from referendum.harnesses.base import Harness, Transcript
from referendum.harnesses.config import HarnessConfig

log = logging.getLogger(__name__)

TEST_FAILURE_SUMMARY_RE = re.compile(r"^test result: FAILED\.", re.MULTILINE)
STDERR_TAIL_LINES = 20


@dataclass(frozen=True, kw_only=True)
class CargoHarness(Harness):
    """Runs a Rust crate's test suite with ``rustup run <toolkit> cargo test``.

    Tests run on a single thread with ``--show-output`` so that captured
    stdout of passing tests is included in the transcript.
    """

    config: HarnessConfig = field(default_factory=HarnessConfig)

    def build_command(self, toolkit: str) -> Sequence[str]:
        """Build the command line for running the suite under a toolkit."""
        command = [self.config.rustup, "run", toolkit, "cargo", "test"]
        if self.config.manifest_path is not None:
            command += ["--manifest-path", str(self.config.manifest_path)]
        command += ["--no-fail-fast", *self.config.cargo_args]
        command += ["--", "--test-threads=1", "--show-output"]
        return command

    async def run_transcript(self, toolkit: str) -> Transcript:
        """Run ``cargo test`` and capture its stdout as the transcript."""
        command = self.build_command(toolkit)
        log.debug("Executing: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=self.config.working_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise RunFailureError(toolkit, f"cannot execute {command[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.timeout
            )
        except TimeoutError as e:
            await _kill_process_group(process)
            raise RunFailureError(
                toolkit, f"did not complete within {self.config.timeout} seconds"
            ) from e
        except asyncio.CancelledError:
            log.info("Stopping test run for toolkit %s", toolkit)
            await _kill_process_group(process)
            raise

        try:
            text = stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RunFailureError(toolkit, "transcript is not valid UTF-8") from e

        if process.returncode == 0:
            return Transcript(toolkit=toolkit, text=text, success=True)

        if self.config.tolerate_test_failures and TEST_FAILURE_SUMMARY_RE.search(text):
            log.info("Toolkit %s reported failing tests", toolkit)
            return Transcript(toolkit=toolkit, text=text, success=True)

        return Transcript(
            toolkit=toolkit,
            text=text,
            success=False,
            reason=_describe_failure(process.returncode, stderr),
        )


def _describe_failure(returncode: int | None, stderr: bytes) -> str:
    lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
    tail = "\n".join(lines[-STDERR_TAIL_LINES:])
    message = f"exited with status {returncode}"
    return f"{message}:\n{tail}" if tail else message


async def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    # Test binaries run as grandchildren and hold the output pipes open.
    with suppress(ProcessLookupError):
        os.killpg(process.pid, signal.SIGKILL)
    await process.wait()
