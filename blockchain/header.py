from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from blockchain.cursor import Cursor
from blockchain.digest import Digest

HEADER_SIZE = 80


@dataclass
class BlockHeader:
    version: int
    prev_hash: Digest
    merkle_root: Digest
    timestamp: int
    bits: int
    nonce: int
    hash: Digest
    raw: bytes = field(repr=False)
    size: int
    height: Optional[int] = None

    def assign_height(self, height: int) -> None:
        """Heights are assigned once and never change afterwards."""
        if self.height is not None:
            raise ValueError(f"Block {self.hash} already has height {self.height}")
        if height < 0:
            raise ValueError(f"Invalid height {height}")
        self.height = height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "hash": str(self.hash),
            "version": self.version,
            "previous_hash": str(self.prev_hash),
            "merkle_root": str(self.merkle_root),
            "timestamp": self.timestamp,
            "bits": self.bits,
            "nonce": self.nonce,
            "size": self.size,
            "raw": self.raw.hex(),
        }


def parse_block_header(raw: bytes, size: int) -> BlockHeader:
    """Decode an 80-byte serialized header. ``size`` is the declared block size."""
    r = Cursor(raw)
    header_bytes = r.read(HEADER_SIZE)
    r.seek(0)
    version = r.read_uint32_le()
    prev_hash = Digest(r.read(32))
    merkle_root = Digest(r.read(32))
    timestamp = r.read_uint32_le()
    bits = r.read_uint32_le()
    nonce = r.read_uint32_le()

    return BlockHeader(
        version=version,
        prev_hash=prev_hash,
        merkle_root=merkle_root,
        timestamp=timestamp,
        bits=bits,
        nonce=nonce,
        hash=Digest.from_data(header_bytes),
        raw=header_bytes,
        size=size,
    )


def read_block_header(cursor: Cursor, size: int) -> BlockHeader:
    return parse_block_header(cursor.read(HEADER_SIZE), size)
