"""Test harnesses that produce transcripts for a toolkit."""

from referendum.harnesses.base import Harness, Transcript
from referendum.harnesses.cargo import CargoHarness
from referendum.harnesses.config import HarnessConfig

__all__ = ["CargoHarness", "Harness", "HarnessConfig", "Transcript"]
