"""Tests for outcome fingerprints."""

import hashlib

import pytest

from referendum.fingerprint import fingerprint


def test_identical_content_has_identical_fingerprint() -> None:
    """Produces the same value for the same outcome and output."""
    assert fingerprint(True, "Hello, Earthlings!") == fingerprint(
        True, "Hello, Earthlings!"
    )


def test_fingerprint_hashes_outcome_then_output() -> None:
    """Hashes the lowercase outcome immediately followed by the output."""
    expected = hashlib.blake2b(b"falseboom", digest_size=8).digest()

    assert fingerprint(False, "boom") == int.from_bytes(expected, "big")


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ((True, "output"), (False, "output")),
        ((True, "output"), (True, "output!")),
        ((False, ""), (True, "")),
    ],
)
def test_different_content_has_different_fingerprint(
    first: tuple[bool, str], second: tuple[bool, str]
) -> None:
    """Changing either the outcome or the output changes the fingerprint."""
    assert fingerprint(*first) != fingerprint(*second)


def test_fingerprint_fits_in_64_bits() -> None:
    """Produces an unsigned 64-bit value."""
    assert 0 <= fingerprint(False, "x" * 10_000) < 2**64
