"""Configuration for test harnesses."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import Field

from referendum.models.base import Model


class HarnessConfig(Model):
    """Configuration for running a test suite under a toolkit."""

    working_dir: Path | None = Field(
        default=None, description="Directory to run the test suite in"
    )
    manifest_path: Path | None = Field(
        default=None, description="Path to Cargo.toml (None uses cargo's lookup)"
    )
    timeout: float | None = Field(
        default=None, gt=0, description="Per-toolkit run timeout in seconds"
    )
    tolerate_test_failures: bool = Field(
        default=True,
        description="Accept a non-zero exit when the suite reported failing tests",
    )
    rustup: str = Field(default="rustup", description="rustup executable")
    cargo_args: Sequence[str] = Field(
        default_factory=tuple,
        description="Extra arguments passed to 'cargo test' before '--'",
    )
