"""Parse the free-text transcript of a ``cargo test`` run into test records."""

import logging
import re
from collections.abc import Sequence

from referendum.errors import ExtractionFailureError
from referendum.models.record import TestRecord

log = logging.getLogger(__name__)

QUALIFIED_NAME = r"[A-Za-z0-9_]+(?:::[A-Za-z0-9_]+)+"

TEST_NAME_RE = re.compile(rf"\btest ({QUALIFIED_NAME})")
RESULT_RE = re.compile(rf"({QUALIFIED_NAME}) \.\.\. (ok|FAILED)")
SHOULD_PANIC_RESULT_RE = re.compile(
    rf"({QUALIFIED_NAME}) - should panic \.\.\. (ok|FAILED)"
)
OUTPUT_MARKER_RE = re.compile(rf"---- {QUALIFIED_NAME} stdout ----")
SECTION_HEADERS = frozenset({"failures:", "successes:"})


def split_lines(text: str) -> list[str]:
    """Split a transcript into lines on newline characters only."""
    return text.split("\n")


def extract_test_names(lines: Sequence[str]) -> list[str]:
    """Return the sorted, distinct test names mentioned in the transcript.

    A name is the qualified identifier that follows the word ``test``,
    e.g. ``tests::test_1`` in ``test tests::test_1 ... ok``.
    """
    names: set[str] = set()
    for line in lines:
        names.update(TEST_NAME_RE.findall(line))
    return sorted(names)


def extract_results(lines: Sequence[str]) -> list[tuple[str, bool]]:
    """Return every ``(name, passed)`` result line in transcript order.

    Plain result lines come first, followed by ``should panic`` results.
    """
    plain: list[tuple[str, bool]] = []
    should_panic: list[tuple[str, bool]] = []
    for line in lines:
        plain.extend(
            (name, status == "ok") for name, status in RESULT_RE.findall(line)
        )
        should_panic.extend(
            (name, status == "ok")
            for name, status in SHOULD_PANIC_RESULT_RE.findall(line)
        )
    return plain + should_panic


def extract_test_outcome(name: str, lines: Sequence[str]) -> bool:
    """Return whether the named test passed.

    Raises:
        ExtractionFailureError: If no result line reports the test

    """
    return _lookup_outcome(name, extract_results(lines))


def _lookup_outcome(name: str, results: Sequence[tuple[str, bool]]) -> bool:
    for result_name, passed in results:
        if result_name == name:
            return passed
    raise ExtractionFailureError(name)


def extract_test_output(name: str, lines: Sequence[str]) -> str:
    """Return the captured stdout block of the named test.

    The block starts after ``---- <name> stdout ----`` and stops before the
    next test's marker or a ``failures:``/``successes:`` header, whichever
    comes first. Lines are joined without separators. Tests that printed
    nothing have no block and yield an empty string.
    """
    start_marker = f"---- {name} stdout ----"
    start: int | None = None
    end = len(lines)

    for index, line in enumerate(lines):
        if start is None:
            if start_marker in line:
                start = index + 1
            continue
        if OUTPUT_MARKER_RE.search(line) or line.rstrip() in SECTION_HEADERS:
            end = index
            break

    if start is None:
        return ""
    return "".join(lines[start : max(start, end)])


def parse_transcript(toolkit: str, text: str) -> Sequence[TestRecord]:
    """Parse one toolkit's transcript into fingerprinted records.

    Args:
        toolkit: Identifier of the toolkit that produced the transcript
        text: Raw transcript text

    Returns:
        One record per distinct test name, sorted by name

    Raises:
        ExtractionFailureError: If a discovered test has no result line

    """
    lines = split_lines(text)
    results = extract_results(lines)
    records = [
        TestRecord.create(
            name=name,
            toolkit=toolkit,
            outcome=_lookup_outcome(name, results),
            output=extract_test_output(name, lines),
        )
        for name in extract_test_names(lines)
    ]
    log.debug("Parsed %d test(s) for toolkit %s", len(records), toolkit)
    return records
