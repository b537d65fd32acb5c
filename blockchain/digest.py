import hashlib
from typing import Union

from errors.exceptions import InvalidLength

DIGEST_SIZE = 32


def sha256d(b: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(b).digest()).digest()


class Digest:
    """
    32-byte double-SHA256 digest.

    ``raw`` keeps the byte order produced by the hash function, which is also
    the order found on the wire. The display string is the reversed bytes in
    hex, the form block explorers and RPC interfaces print.
    """

    __slots__ = ("_raw", "_display")

    def __init__(self, raw: Union[bytes, bytearray, memoryview]):
        raw = bytes(raw)
        if len(raw) != DIGEST_SIZE:
            raise InvalidLength(len(raw))
        self._raw = raw
        self._display = raw[::-1].hex()

    @classmethod
    def from_bytes(cls, raw: Union[bytes, bytearray, memoryview]) -> "Digest":
        return cls(raw)

    @classmethod
    def from_display_string(cls, value: str) -> "Digest":
        """big-endian hex ➜ internal little-endian bytes"""
        return cls(bytes.fromhex(value)[::-1])

    @classmethod
    def from_data(cls, data: Union[bytes, bytearray, memoryview]) -> "Digest":
        return cls(sha256d(bytes(data)))

    @property
    def raw(self) -> bytes:
        return self._raw

    def display_string(self) -> str:
        return self._display

    def is_null(self) -> bool:
        return self._raw == b"\x00" * DIGEST_SIZE

    def __str__(self) -> str:
        return self._display

    def __repr__(self) -> str:
        return f"Digest({self._display})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Digest):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._display)

    def __setattr__(self, name, value):
        if hasattr(self, "_display"):
            raise AttributeError("Digest is immutable")
        object.__setattr__(self, name, value)
