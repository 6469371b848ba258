"""Content fingerprints for test outcomes."""

import hashlib

DIGEST_SIZE = 8


def fingerprint(outcome: bool, output: str) -> int:
    """Return a stable 64-bit fingerprint of a test outcome and its output.

    The hashed content is the lowercase outcome (``true``/``false``)
    immediately followed by the captured output, so identical results
    from different toolkits always produce the same value.
    """
    content = ("true" if outcome else "false") + output
    digest = hashlib.blake2b(content.encode("utf-8"), digest_size=DIGEST_SIZE)
    return int.from_bytes(digest.digest(), "big")
