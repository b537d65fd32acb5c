from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from blockchain.cursor import Cursor
from blockchain.digest import Digest

# bytes 00 01 after the version, read as a little-endian u16
SEGWIT_MARKER = 0x0100
COINBASE_VOUT = 0xffffffff


@dataclass(frozen=True)
class TxIn:
    txid: Digest
    vout: int
    script_sig: bytes
    sequence: int
    witness: Tuple[bytes, ...] = ()

    @property
    def is_coinbase(self) -> bool:
        return self.vout == COINBASE_VOUT and self.txid.is_null()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txid": str(self.txid),
            "vout": self.vout,
            "script_sig": self.script_sig.hex(),
            "sequence": self.sequence,
            "witness": [w.hex() for w in self.witness],
        }


@dataclass(frozen=True)
class TxOut:
    amount: int
    script_pubkey: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "script_pubkey": self.script_pubkey.hex(),
        }


@dataclass(frozen=True)
class Transaction:
    version: int
    segwit: bool
    vin: Tuple[TxIn, ...]
    vout: Tuple[TxOut, ...]
    locktime: int
    txid: Digest
    hash: Digest
    raw: bytes = field(repr=False)
    raw_legacy: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.raw)

    @property
    def stripped_size(self) -> int:
        return len(self.raw_legacy)

    @property
    def weight(self) -> int:
        return self.stripped_size * 3 + self.size

    @property
    def vsize(self) -> int:
        return (self.weight + 3) // 4

    @property
    def is_coinbase(self) -> bool:
        return len(self.vin) == 1 and self.vin[0].is_coinbase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txid": str(self.txid),
            "hash": str(self.hash),
            "version": self.version,
            "segwit": self.segwit,
            "size": self.size,
            "vsize": self.vsize,
            "weight": self.weight,
            "locktime": self.locktime,
            "vin": [i.to_dict() for i in self.vin],
            "vout": [o.to_dict() for o in self.vout],
        }


def parse_transaction(r: Cursor) -> Transaction:
    """
    Decode one transaction starting at the cursor position.

    Segwit transactions are detected by the ``00 01`` marker following the
    version. For those the legacy serialization (the txid preimage) is
    rebuilt from slices of the underlying buffer: version, inputs and outputs
    without the marker, and locktime. Witness data only ends up in ``raw``
    and therefore only in ``hash``.
    """
    buf = r.buffer
    start = r.tell()
    version = r.read_uint32_le()

    segwit = r.read_uint16_le() == SEGWIT_MARKER
    if not segwit:
        r.move(-2)

    vin_cnt = r.read_varint()
    inputs = []
    for _ in range(vin_cnt):
        txid = Digest(r.read(32))
        vout = r.read_uint32_le()
        script_sig = r.read_var_bytes()
        sequence = r.read_uint32_le()
        inputs.append((txid, vout, script_sig, sequence))

    vout_cnt = r.read_varint()
    outputs = []
    for _ in range(vout_cnt):
        amount = r.read_int64_le()
        script_pubkey = r.read_var_bytes()
        outputs.append(TxOut(amount=amount, script_pubkey=script_pubkey))

    witness_start = r.tell()
    witnesses: List[Tuple[bytes, ...]] = []
    if segwit:
        for _ in inputs:
            stack = [r.read_var_bytes() for _ in range(r.read_varint())]
            witnesses.append(tuple(stack))
    else:
        witnesses = [()] * len(inputs)

    vin = tuple(
        TxIn(txid=txid, vout=vout, script_sig=script_sig, sequence=sequence, witness=witness)
        for (txid, vout, script_sig, sequence), witness in zip(inputs, witnesses)
    )

    locktime = r.read_uint32_le()
    end = r.tell()

    raw = buf[start:end]
    if segwit:
        raw_legacy = buf[start:start + 4] + buf[start + 6:witness_start] + buf[end - 4:end]
    else:
        raw_legacy = raw

    return Transaction(
        version=version,
        segwit=segwit,
        vin=vin,
        vout=tuple(outputs),
        locktime=locktime,
        txid=Digest.from_data(raw_legacy),
        hash=Digest.from_data(raw),
        raw=raw,
        raw_legacy=raw_legacy,
    )
