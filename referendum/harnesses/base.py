"""Abstract base class for test harnesses."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from referendum.errors import RunFailureError
from referendum.models.record import TestRecord
from referendum.transcript import parse_transcript

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Transcript:
    """Raw output of running the test suite under one toolkit."""

    toolkit: str
    text: str
    success: bool
    reason: str | None = None


@dataclass(frozen=True, kw_only=True)
class Harness(ABC):
    """Abstract base for harnesses that run a test suite under a toolkit."""

    @abstractmethod
    async def run_transcript(self, toolkit: str) -> Transcript:
        """Run the test suite under a toolkit and capture its transcript.

        Args:
            toolkit: Toolkit identifier (e.g., "stable", "nightly-2021-06-03")

        Returns:
            The captured transcript and whether the run succeeded

        Raises:
            RunFailureError: If the harness cannot be started at all

        """

    async def collect(self, toolkit: str) -> Sequence[TestRecord]:
        """Run the test suite under a toolkit and parse it into records.

        Raises:
            RunFailureError: If the run did not succeed
            ExtractionFailureError: If the transcript cannot be parsed

        """
        log.info("Running tests with toolkit %s", toolkit)
        transcript = await self.run_transcript(toolkit)

        if not transcript.success:
            raise RunFailureError(
                toolkit, transcript.reason or "test harness exited unsuccessfully"
            )

        records = parse_transcript(toolkit, transcript.text)
        log.info("Collected %d test(s) from toolkit %s", len(records), toolkit)
        return records
