"""Orchestrates collecting test records across toolkits and voting on them."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from referendum.harnesses.base import Harness
from referendum.models.record import TestRecord, VoteResult
from referendum.voting import vote

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Referendum:
    """Runs one test suite under several toolkits and compares the results."""

    harness: Harness
    max_concurrency: int = 1

    async def collect_records(self, toolkits: Sequence[str]) -> tuple[TestRecord, ...]:
        """Collect test records from every toolkit.

        The first failure stops the comparison: toolkits still running or
        waiting for a slot are cancelled.

        Args:
            toolkits: Toolkit identifiers; duplicates are run once

        Returns:
            All records from all toolkits

        Raises:
            ReferendumError: The first failure, in toolkit order, among the
                toolkits that failed before the rest were cancelled

        """
        unique_toolkits = list(dict.fromkeys(toolkits))
        semaphore = asyncio.Semaphore(self.max_concurrency)

        log.info(
            "Collecting tests for %d toolkit(s): %s",
            len(unique_toolkits),
            ", ".join(unique_toolkits),
        )
        tasks = [
            asyncio.create_task(self._collect(toolkit, semaphore))
            for toolkit in unique_toolkits
        ]
        try:
            _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if pending:
            log.info("Cancelled %d toolkit(s) after a failure", len(pending))

        return self._process_results(unique_toolkits, tasks)

    def _process_results(
        self,
        toolkits: Sequence[str],
        tasks: Sequence[asyncio.Task[Sequence[TestRecord]]],
    ) -> tuple[TestRecord, ...]:
        """Fold per-toolkit records together, raising the first failure."""
        failures: list[BaseException] = []
        records: list[TestRecord] = []

        for toolkit, task in zip(toolkits, tasks, strict=True):
            if task.cancelled():
                log.debug("Toolkit %s was cancelled", toolkit)
            elif (error := task.exception()) is not None:
                log.error("Toolkit %s failed: %s", toolkit, error)
                failures.append(error)
            else:
                records.extend(task.result())

        if failures:
            raise failures[0]

        return tuple(records)

    async def _collect(
        self, toolkit: str, semaphore: asyncio.Semaphore
    ) -> Sequence[TestRecord]:
        async with semaphore:
            return await self.harness.collect(toolkit)

    async def run(self, toolkits: Sequence[str]) -> VoteResult:
        """Collect records from every toolkit and vote on them.

        Raises:
            RunFailureError: If any toolkit's test run failed
            ExtractionFailureError: If any transcript could not be parsed
            TestsNotFoundError: If no toolkit reported any test

        """
        records = await self.collect_records(toolkits)
        return vote(records)
