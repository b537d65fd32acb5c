# tests/conftest.py
"""
Shared fixtures for the test suite.

Key design points
─────────────────
1.  Make project-root importable so `from blockchain.cursor import …` works no
    matter where pytest is launched.
2.  Provide an event bus that records what consumers received, in order.
3.  Write synthetic blk*.dat files into a temporary blocks directory.
"""

from __future__ import annotations
import pathlib
import sys
import pytest

# ─────────────────────────────────────────────────────────────────────────────
#  Ensure the repo root is on sys.path
# ─────────────────────────────────────────────────────────────────────────────
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))                 # for `import blockchain`, `import scanner` …

# Only now import modules that live in the repo
from events.event_bus import EventBus, EventTypes


# ───────────────────────────── recording bus ────────────────────────────────
@pytest.fixture
def recording_bus():
    """EventBus plus a list of (event_type, record) in delivery order."""
    bus = EventBus()
    received: list[tuple[str, object]] = []

    def on_header(header):
        received.append((EventTypes.BLOCK_HEADER, header))

    def on_tx(tx):
        received.append((EventTypes.TRANSACTION, tx))

    bus.subscribe(EventTypes.BLOCK_HEADER, on_header)
    bus.subscribe(EventTypes.TRANSACTION, on_tx)
    return bus, received


# ─────────────────────────── block file writer ──────────────────────────────
@pytest.fixture
def block_files(tmp_path):
    """Directory plus a helper writing blk?????.dat files into it."""
    directory = tmp_path / "blocks"
    directory.mkdir()

    def write(index: int, *records: bytes, padding: int = 0) -> str:
        path = directory / f"blk{index:05d}.dat"
        path.write_bytes(b"".join(records) + b"\x00" * padding)
        return str(path)

    return directory, write
