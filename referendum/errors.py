"""Errors raised while collecting and comparing test results."""


class ReferendumError(Exception):
    """Base class for all errors raised by referendum."""


class RunFailureError(ReferendumError):
    """Raised when the test harness for a toolkit did not run successfully."""

    def __init__(self, toolkit: str, reason: str) -> None:
        self.toolkit = toolkit
        self.reason = reason
        super().__init__(f"Test run failed for toolkit '{toolkit}': {reason}")


class ExtractionFailureError(ReferendumError):
    """Raised when a test name has no result line in its transcript."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Could not extract a result for test '{name}'")


class TestsNotFoundError(ReferendumError):
    """Raised when there are no test records to vote on."""

    __test__ = False

    def __init__(self) -> None:
        super().__init__("No tests found")


class MissingConsensusError(ReferendumError):
    """Raised when a dissenting record has no consensus to compare against."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Dissenting test '{name}' has no consensus entry")
