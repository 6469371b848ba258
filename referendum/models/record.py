"""Models for per-toolkit test records and vote outcomes."""

from dataclasses import dataclass

from referendum.fingerprint import fingerprint


@dataclass(frozen=True, kw_only=True)
class TestRecord:
    """One observed execution of one test under one toolkit."""

    __test__ = False

    name: str
    toolkit: str
    outcome: bool
    output: str
    fingerprint: int

    @classmethod
    def create(
        cls, *, name: str, toolkit: str, outcome: bool, output: str
    ) -> "TestRecord":
        """Build a record, fingerprinting its outcome and output."""
        return cls(
            name=name,
            toolkit=toolkit,
            outcome=outcome,
            output=output,
            fingerprint=fingerprint(outcome, output),
        )


@dataclass(frozen=True, kw_only=True)
class ConsensusEntry:
    """The agreed-upon result for one test name."""

    name: str
    outcome: bool
    output: str


@dataclass(frozen=True, kw_only=True)
class VoteResult:
    """Partition of all records into agreeing, dissenting and unresolved."""

    matches: tuple[TestRecord, ...] = ()
    non_matches: tuple[TestRecord, ...] = ()
    no_consensus: tuple[TestRecord, ...] = ()

    @property
    def total(self) -> int:
        """Number of records across all three buckets."""
        return len(self.matches) + len(self.non_matches) + len(self.no_consensus)
