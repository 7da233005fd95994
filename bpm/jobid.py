"""Reversible encoding of job and process names into valid container IDs."""

from __future__ import annotations

import string

__all__ = ["InvalidJobIDError", "encode", "decode"]

_PREFIX = "bpm-"
# "." is deliberately absent because it introduces an escape sequence.
_ALLOWED = frozenset((string.ascii_letters + string.digits + "_-").encode("ascii"))


class InvalidJobIDError(ValueError):
    """Raised when a job ID cannot be decoded."""


def encode(name: str) -> str:
    """Encode an arbitrary name into a container-safe job ID."""
    raw = name.encode("utf-8", "surrogateescape")
    body = "".join(
        chr(byte) if byte in _ALLOWED else f".{byte:02x}" for byte in raw
    )
    return _PREFIX + body


def decode(job_id: str) -> str:
    """Decode a job ID produced by :func:`encode` back into the original name."""
    if not job_id.startswith(_PREFIX):
        raise InvalidJobIDError(f"invalid job ID (missing prefix): {job_id!r}")

    body = job_id[len(_PREFIX):]
    out = bytearray()
    chars = iter(enumerate(body))
    for index, char in chars:
        if char != ".":
            out.extend(char.encode("utf-8", "surrogateescape"))
            continue
        code = body[index + 1:index + 3]
        if len(code) < 2:
            raise InvalidJobIDError(
                f"invalid job ID (incomplete escape sequence): {body!r}"
            )
        try:
            out.extend(bytes.fromhex(code))
        except ValueError:
            pass
        next(chars, None)
        next(chars, None)

    return out.decode("utf-8", "surrogateescape")