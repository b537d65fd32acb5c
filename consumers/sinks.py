"""
Bundled consumers for decoded headers and transactions
"""

import json
import logging
from typing import Optional, TextIO

from blockchain.header import BlockHeader
from blockchain.transaction import Transaction
from events.event_bus import EventBus, EventTypes

logger = logging.getLogger(__name__)


class JsonLinesSink:
    """Writes one JSON object per header or transaction"""

    def __init__(self, stream: TextIO, include_transactions: bool = True):
        self.stream = stream
        self.include_transactions = include_transactions

    def attach(self, bus: EventBus):
        bus.subscribe(EventTypes.BLOCK_HEADER, self.on_block_header)
        if self.include_transactions:
            bus.subscribe(EventTypes.TRANSACTION, self.on_transaction)

    def _write(self, record_type: str, data: dict):
        self.stream.write(json.dumps({"type": record_type, **data}) + "\n")

    def on_block_header(self, header: BlockHeader):
        self._write(EventTypes.BLOCK_HEADER, header.to_dict())

    def on_transaction(self, tx: Transaction):
        self._write(EventTypes.TRANSACTION, tx.to_dict())


class ProgressLogger:
    """Logs resolved heights every ``every`` headers"""

    def __init__(self, every: int = 10000):
        self.every = max(1, every)
        self.headers = 0
        self.transactions = 0
        self.last_height: Optional[int] = None

    def attach(self, bus: EventBus):
        bus.subscribe(EventTypes.BLOCK_HEADER, self.on_block_header)
        bus.subscribe(EventTypes.TRANSACTION, self.on_transaction)

    def on_block_header(self, header: BlockHeader):
        self.headers += 1
        self.last_height = header.height
        if self.headers % self.every == 0:
            logger.info(
                f"Resolved {self.headers} headers, last height {header.height}, "
                f"{self.transactions} transactions",
                extra={"block_hash": str(header.hash), "height": header.height}
            )

    def on_transaction(self, tx: Transaction):
        self.transactions += 1
