"""Tests for the harness base class."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import pytest

from referendum.errors import ExtractionFailureError, RunFailureError
from referendum.harnesses.base import Harness, Transcript


@dataclass(frozen=True, kw_only=True)
class StaticHarness(Harness):
    """Harness returning canned transcripts keyed by toolkit."""

    transcripts: Mapping[str, Transcript]

    async def run_transcript(self, toolkit: str) -> Transcript:
        """Return the canned transcript for the toolkit."""
        return self.transcripts[toolkit]


async def test_collect_parses_successful_transcript(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Parses a successful transcript into records."""
    harness = StaticHarness(
        transcripts={
            "stable": Transcript(
                toolkit="stable",
                text="test tests::test_1 ... ok\ntest tests::test_2 ... FAILED",
                success=True,
            )
        }
    )

    with caplog.at_level(logging.INFO):
        records = await harness.collect("stable")

    assert [(r.name, r.outcome) for r in records] == [
        ("tests::test_1", True),
        ("tests::test_2", False),
    ]
    assert "Collected 2 test(s) from toolkit stable" in caplog.text


async def test_collect_raises_for_failed_run() -> None:
    """Treats an unsuccessful run as a fatal run failure, not an empty result."""
    harness = StaticHarness(
        transcripts={
            "nightly": Transcript(
                toolkit="nightly",
                text="test tests::test_1 ... ok",
                success=False,
                reason="exited with status 101",
            )
        }
    )

    with pytest.raises(RunFailureError) as exc_info:
        await harness.collect("nightly")

    assert exc_info.value.toolkit == "nightly"
    assert "exited with status 101" in str(exc_info.value)


async def test_collect_raises_for_unparseable_transcript() -> None:
    """Propagates extraction failures from the parser."""
    harness = StaticHarness(
        transcripts={
            "stable": Transcript(
                toolkit="stable", text="test tests::test_1 ... ignored", success=True
            )
        }
    )

    with pytest.raises(ExtractionFailureError):
        await harness.collect("stable")
