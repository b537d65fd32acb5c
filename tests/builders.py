"""
Helpers that serialize headers, transactions and block records for tests
"""
from __future__ import annotations

import struct

from blockchain.digest import sha256d

MAIN_MAGIC = 0xf9beb4d9
NULL_HASH = b"\x00" * 32

# Bitcoin mainnet genesis block
GENESIS_HEADER_HEX = (
    "01000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "3ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa4b1e5e4a"
    "29ab5f49" "ffff001d" "1dac2b7c"
)
GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
GENESIS_COINBASE_HEX = (
    "01000000010000000000000000000000000000000000000000000000000000000000000000ffffffff"
    "4d04ffff001d0104455468652054696d65732030332f4a616e2f32303039204368616e63656c6c6f72"
    "206f6e206272696e6b206f66207365636f6e64206261696c6f757420666f722062616e6b73ffffffff"
    "0100f2052a01000000434104678afdb0fe5548271967f1a67130b7105cd6a828e03909a67962e0ea1f"
    "61deb649f6bc3f4cef38c4f35504e51ec112de5c384df7ba0b8d578a4c702b6bf11d5fac00000000"
)
GENESIS_COINBASE_TXID = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"

# One input, one P2WPKH-shaped output, two witness elements
SEGWIT_TX_HEX = (
    "02000000" "0001" "01"
    "1111111111111111111111111111111111111111111111111111111111111111" "00000000" "00" "ffffffff"
    "01" "e803000000000000" "16" "0014" "6222222222222222222222222222222222222222"
    "02" "03aabbcc" "02ddee"
    "00000000"
)
SEGWIT_TX_LEGACY_HEX = (
    "02000000" "01"
    "1111111111111111111111111111111111111111111111111111111111111111" "00000000" "00" "ffffffff"
    "01" "e803000000000000" "16" "0014" "6222222222222222222222222222222222222222"
    "00000000"
)
SEGWIT_TX_TXID = "184cac5f9226337ce351e165e7f440240c7ee2feb5138e16174726639b1b828c"
SEGWIT_TX_WTXID = "c2e65c6056fb2d8724ada2f50288eca4cfda95b8e66c92621e76c3befe06a624"


def varint(n: int) -> bytes:
    if n < 0xfd:
        return bytes([n])
    if n <= 0xffff:
        return b"\xfd" + struct.pack("<H", n)
    if n <= 0xffffffff:
        return b"\xfe" + struct.pack("<I", n)
    return b"\xff" + struct.pack("<Q", n)


def var_bytes(b: bytes) -> bytes:
    return varint(len(b)) + b


def make_header(prev: bytes = NULL_HASH, nonce: int = 0, version: int = 1,
                merkle_root: bytes = NULL_HASH, timestamp: int = 1231006505,
                bits: int = 0x1d00ffff) -> bytes:
    return (
        struct.pack("<I", version) + prev + merkle_root +
        struct.pack("<III", timestamp, bits, nonce)
    )


def header_hash(header: bytes) -> bytes:
    return sha256d(header)


def make_chain(length: int, prev: bytes = NULL_HASH, start_nonce: int = 0) -> list[bytes]:
    """``length`` linked headers, first one pointing at ``prev``"""
    headers = []
    for i in range(length):
        h = make_header(prev=prev, nonce=start_nonce + i)
        headers.append(h)
        prev = header_hash(h)
    return headers


def make_tx(inputs: list[tuple[bytes, int, bytes, int]] | None = None,
            outputs: list[tuple[int, bytes]] | None = None,
            witnesses: list[list[bytes]] | None = None,
            version: int = 1, locktime: int = 0) -> bytes:
    """Serialize a transaction. Passing ``witnesses`` produces the segwit form."""
    if inputs is None:
        inputs = [(NULL_HASH, 0xffffffff, b"\x51", 0xffffffff)]
    if outputs is None:
        outputs = [(5000000000, b"\x51")]

    body = varint(len(inputs))
    for txid, vout, script_sig, sequence in inputs:
        body += txid + struct.pack("<I", vout) + var_bytes(script_sig) + struct.pack("<I", sequence)
    body += varint(len(outputs))
    for amount, script_pubkey in outputs:
        body += struct.pack("<q", amount) + var_bytes(script_pubkey)

    raw = struct.pack("<I", version)
    if witnesses is not None:
        raw += b"\x00\x01" + body
        for stack in witnesses:
            raw += varint(len(stack)) + b"".join(var_bytes(item) for item in stack)
    else:
        raw += body
    return raw + struct.pack("<I", locktime)


def make_record(header: bytes, txs: list[bytes] | None = None, magic: int = MAIN_MAGIC) -> bytes:
    """``[magic][size][header][tx count][txs]`` as stored in blk*.dat files"""
    if txs is None:
        txs = [make_tx()]
    block = header + varint(len(txs)) + b"".join(txs)
    return struct.pack(">I", magic) + struct.pack("<I", len(block)) + block
