"""Human-readable and JSON renderings of a vote."""

from collections.abc import Iterable, Mapping
from typing import Any

from referendum.errors import MissingConsensusError
from referendum.models.record import ConsensusEntry, TestRecord, VoteResult

CONSENSUS_TAG = "consensus"

CONSENSUS_HEADER = "Consensus Test Results...\n"
DISSENT_HEADER = "Dissenting Test Results...\n"
NO_CONSENSUS_HEADER = "No Consensus Results...\n"

NO_CONSENSUS_FOUND = "No consensus determined among test outputs ...\n"
NO_DISSENT_FOUND = "No dissenting test outputs found ...\n"
NO_UNRESOLVED_FOUND = "No unresolved test outputs found ...\n"


def format_result_line(name: str, outcome: bool, tag: str | None = None) -> str:
    """Format a ``test <name> @ <tag> ... ok|FAILED`` line."""
    label = f" @ {tag}" if tag is not None else " "
    status = "ok" if outcome else "FAILED"
    return f"test {name}{label} ... {status}"


def format_output_block(name: str, output: str, tag: str | None = None) -> str:
    """Format the indented stdout block of a test."""
    label = f" @ {tag}" if tag is not None else ""
    return f"\n\t---- test {name}{label} stdout ----\n\t{output}\n"


def render_consensus(consensus_map: Mapping[str, ConsensusEntry]) -> str:
    """Render the agreed-upon result of every test that reached consensus."""
    parts = [CONSENSUS_HEADER]
    for name, entry in consensus_map.items():
        parts.append(format_result_line(name, entry.outcome, CONSENSUS_TAG))
        if entry.output:
            parts.append(format_output_block(name, entry.output, CONSENSUS_TAG))
        parts.append("\n")
    return "".join(parts)


def render_dissent(
    dissenting: Iterable[TestRecord],
    consensus_map: Mapping[str, ConsensusEntry],
) -> str:
    """Render each dissenting record next to the consensus it disagrees with.

    Raises:
        MissingConsensusError: If a dissenting record's test has no consensus

    """
    parts = [DISSENT_HEADER]
    for record in dissenting:
        if (consensus := consensus_map.get(record.name)) is None:
            raise MissingConsensusError(record.name)

        parts.append(
            format_result_line(consensus.name, consensus.outcome, CONSENSUS_TAG)
        )
        parts.append("\n")
        parts.append(format_result_line(record.name, record.outcome, record.toolkit))
        parts.append(
            format_output_block(consensus.name, consensus.output, CONSENSUS_TAG)
        )
        parts.append(format_output_block(record.name, record.output, record.toolkit))
        parts.append("\n")
    return "".join(parts)


def render_no_consensus(unresolved: Iterable[TestRecord]) -> str:
    """Render every record of tests on which no two toolkits agreed."""
    parts = [NO_CONSENSUS_HEADER]
    for record in unresolved:
        parts.append(format_result_line(record.name, record.outcome, record.toolkit))
        parts.append(format_output_block(record.name, record.output, record.toolkit))
        parts.append("\n")
    return "".join(parts)


def render_report(
    vote_result: VoteResult, consensus_map: Mapping[str, ConsensusEntry]
) -> list[str]:
    """Render the consensus, dissent and no-consensus sections in order.

    Empty sections are replaced by a fixed message.
    """
    return [
        render_consensus(consensus_map)
        if vote_result.matches
        else NO_CONSENSUS_FOUND,
        render_dissent(vote_result.non_matches, consensus_map)
        if vote_result.non_matches
        else NO_DISSENT_FOUND,
        render_no_consensus(vote_result.no_consensus)
        if vote_result.no_consensus
        else NO_UNRESOLVED_FOUND,
    ]


def format_output(vote_result: VoteResult) -> dict[str, Any]:
    """Format a vote for JSON output."""
    buckets = (
        ("consensus", vote_result.matches),
        ("dissent", vote_result.non_matches),
        ("no-consensus", vote_result.no_consensus),
    )
    all_results: list[dict[str, Any]] = [
        {
            "name": record.name,
            "toolkit": record.toolkit,
            "status": status,
            "outcome": "ok" if record.outcome else "FAILED",
            "fingerprint": f"{record.fingerprint:016x}",
            "output": record.output,
        }
        for status, records in buckets
        for record in records
    ]

    return {
        "total": len(all_results),
        "consensus": len(vote_result.matches),
        "dissent": len(vote_result.non_matches),
        "no_consensus": len(vote_result.no_consensus),
        "results": all_results,
    }
