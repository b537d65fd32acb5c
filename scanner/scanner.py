"""
Archive Scan Driver - walks block files record by record and feeds consumers
"""
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from blockchain.cursor import Cursor
from blockchain.header import read_block_header
from blockchain.height_resolver import HeightResolver
from blockchain.transaction import parse_transaction
from config.config import NetworkParams, network_for_magic
from errors.exceptions import DecodeError, MagicMismatch, ScanError
from events.event_bus import EventBus, EventTypes
from log_utils import get_logger, log_performance
from monitoring import metrics
from scanner.archive import read_archive

logger = get_logger(__name__)


@dataclass
class ScanStats:
    files: int = 0
    blocks: int = 0
    transactions: int = 0
    resolved_headers: int = 0
    orphan_headers: int = 0


class ArchiveScanner:
    """
    Decodes every block record of an ordered sequence of block files.

    Each record is ``[magic][size][80-byte header][varint tx count][txs]``.
    Headers go through the height resolver and are emitted once they have a
    height; transactions are emitted as soon as they are decoded. Every
    emission is awaited before decoding continues.
    """

    def __init__(self, network: NetworkParams, bus: EventBus, resolver: Optional[HeightResolver] = None):
        self.network = network
        self.bus = bus
        self.resolver = resolver if resolver is not None else HeightResolver()
        self.stats = ScanStats()

    @log_performance(logger, "scan")
    async def scan(self, paths: Sequence[str]) -> ScanStats:
        total = len(paths)
        for i, path in enumerate(paths):
            file_name = os.path.basename(path)
            logger.info(f"Parsing {file_name} ({i + 1}/{total})", extra={"file_name": file_name})
            buf = read_archive(path)
            with metrics.file_scan_seconds.time():
                await self.scan_buffer(buf, file_name, is_last=(i + 1 == total))
            del buf
            self.stats.files += 1
            metrics.files_scanned_total.inc()
            logger.info(
                f"Finished block file, total blocks: {self.resolver.resolved_count}, "
                f"orphan blocks: {self.resolver.orphan_count}",
                extra={"file_name": file_name}
            )

        self.stats.resolved_headers = self.resolver.resolved_count
        self.stats.orphan_headers = self.resolver.orphan_count
        return self.stats

    async def scan_buffer(self, buf: bytes, file_name: str, is_last: bool = True) -> int:
        """Scan the records of one file's contents. Returns the number of blocks read."""
        log = logger.with_context(file_name=file_name)
        r = Cursor(buf)
        block_index = 0

        while not r.at_end:
            try:
                magic = r.read_uint32_be()
            except DecodeError as e:
                raise ScanError(file_name, block_index, str(e)) from e

            if magic == 0 and is_last:
                log.info(f"Zero padding after {block_index} blocks, stopping")
                break
            if magic != self.network.magic:
                match = network_for_magic(magic)
                error = MagicMismatch(file_name, block_index, magic, self.network.magic,
                                      match.name if match else None)
                log.error(error.message, extra={"block_index": block_index})
                raise error

            try:
                await self._scan_block(r, log, block_index)
            except DecodeError as e:
                log.error(f"Decode failure: {e}", extra={"block_index": block_index})
                raise ScanError(file_name, block_index, str(e)) from e

            block_index += 1

        return block_index

    async def _scan_block(self, r: Cursor, log, block_index: int):
        size = r.read_uint32_le()
        header = read_block_header(r, size)
        self.stats.blocks += 1
        metrics.blocks_scanned_total.inc()

        resolved = self.resolver.admit(header)
        if not resolved:
            log.debug(f"Holding orphan header {header.hash}",
                      extra={"block_index": block_index, "block_hash": str(header.hash)})
        for h in resolved:
            await self.bus.emit(EventTypes.BLOCK_HEADER, h)
        metrics.headers_resolved_total.inc(len(resolved))
        metrics.orphan_headers.set(self.resolver.orphan_count)
        if self.resolver.best_height is not None:
            metrics.best_height.set(self.resolver.best_height)

        tx_count = r.read_varint()
        for _ in range(tx_count):
            tx = parse_transaction(r)
            self.stats.transactions += 1
            metrics.transactions_scanned_total.inc()
            if tx.segwit:
                metrics.segwit_transactions_total.inc()
            await self.bus.emit(EventTypes.TRANSACTION, tx)
