"""Majority voting over test records collected from several toolkits."""

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence

from referendum.errors import TestsNotFoundError
from referendum.models.record import ConsensusEntry, TestRecord, VoteResult

log = logging.getLogger(__name__)


def consensus_fingerprint(records: Sequence[TestRecord]) -> int | None:
    """Return the majority fingerprint among records for one test name.

    Returns None when no fingerprint occurs more than once. When several
    fingerprints share the highest count, the one reported by the
    lexicographically smallest toolkit wins.
    """
    if not records:
        return None

    counts = Counter(record.fingerprint for record in records)
    highest = max(counts.values())
    if highest == 1:
        return None

    tied = {value for value, count in counts.items() if count == highest}
    winner = min(
        (record for record in records if record.fingerprint in tied),
        key=lambda record: (record.toolkit, record.fingerprint),
    )
    return winner.fingerprint


def vote(records: Iterable[TestRecord]) -> VoteResult:
    """Classify every record as matching, dissenting or without consensus.

    Args:
        records: All records across all toolkits

    Returns:
        Partition of the records, each bucket sorted by name and toolkit

    Raises:
        TestsNotFoundError: If there are no records at all

    """
    by_name: defaultdict[str, list[TestRecord]] = defaultdict(list)
    for record in records:
        by_name[record.name].append(record)

    if not by_name:
        raise TestsNotFoundError()

    matches: list[TestRecord] = []
    non_matches: list[TestRecord] = []
    no_consensus: list[TestRecord] = []

    for name in sorted(by_name):
        group = sorted(by_name[name], key=lambda record: record.toolkit)
        consensus = consensus_fingerprint(group)

        if consensus is None:
            log.debug("No consensus for %s across %d toolkit(s)", name, len(group))
            no_consensus.extend(group)
            continue

        for record in group:
            if record.fingerprint == consensus:
                matches.append(record)
            else:
                log.debug("Toolkit %s dissents on %s", record.toolkit, name)
                non_matches.append(record)

    result = VoteResult(
        matches=tuple(matches),
        non_matches=tuple(non_matches),
        no_consensus=tuple(no_consensus),
    )
    log.info(
        "Voted on %d test(s): %d matching, %d dissenting, %d without consensus",
        len(by_name),
        len(result.matches),
        len(result.non_matches),
        len(result.no_consensus),
    )
    return result


def build_consensus_map(matches: Iterable[TestRecord]) -> Mapping[str, ConsensusEntry]:
    """Reduce matching records to one consensus entry per test name.

    All matching records for a name share the same outcome and output, so
    the first one seen represents the group.
    """
    consensus_map: dict[str, ConsensusEntry] = {}
    for record in matches:
        if record.name not in consensus_map:
            consensus_map[record.name] = ConsensusEntry(
                name=record.name,
                outcome=record.outcome,
                output=record.output,
            )
    return consensus_map
