"""Test factories for generating test data."""

from typing import Any

from polyfactory.factories import DataclassFactory

from referendum.fingerprint import fingerprint
from referendum.models.record import ConsensusEntry, TestRecord


class TestRecordFactory(DataclassFactory[TestRecord]):
    """Factory for TestRecord with a fingerprint matching its content."""

    __test__ = False
    __model__ = TestRecord

    name = "tests::test_name"
    outcome = True
    output = ""

    @classmethod
    def build(cls, *args: Any, **kwargs: Any) -> TestRecord:
        """Build a record, fingerprinting it unless a fingerprint is given."""
        if "fingerprint" not in kwargs:
            kwargs["fingerprint"] = fingerprint(
                kwargs.get("outcome", cls.outcome),
                kwargs.get("output", cls.output),
            )
        return super().build(*args, **kwargs)


class ConsensusEntryFactory(DataclassFactory[ConsensusEntry]):
    """Factory for ConsensusEntry."""

    __model__ = ConsensusEntry

    output = ""
