#!/usr/bin/env python3

import argparse
import asyncio
import sys
from contextlib import ExitStack

from pydantic import ValidationError

from config.config import BITCOIN_DATADIR, DEFAULT_NETWORK, LOG_LEVEL, PROGRESS_EVERY, blocks_dir, get_network
from consumers.sinks import JsonLinesSink, ProgressLogger
from errors.exceptions import BlockchainError
from events.event_bus import EventBus
from log_utils import setup_logging
from models.validation import ScanRequest
from monitoring.metrics import start_metrics_server
from scanner.archive import list_block_files
from scanner.scanner import ArchiveScanner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Decode Bitcoin Core block files')
    parser.add_argument('--network', type=str, default=DEFAULT_NETWORK,
                        help=f'main, test, signet or regtest (default: {DEFAULT_NETWORK})')
    parser.add_argument('--datadir', type=str, default=BITCOIN_DATADIR,
                        help=f'Bitcoin data directory (default: {BITCOIN_DATADIR})')
    parser.add_argument('--files', nargs='+', default=None,
                        help='Scan these block files instead of the network blocks directory')
    parser.add_argument('--output', type=str, default=None,
                        help="Write decoded records as JSON lines to this file ('-' for stdout)")
    parser.add_argument('--headers-only', action='store_true',
                        help='Only write headers to the output')
    parser.add_argument('--progress-every', type=int, default=PROGRESS_EVERY,
                        help=f'Log progress every N headers (default: {PROGRESS_EVERY})')
    parser.add_argument('--metrics-port', type=int, default=None,
                        help='Expose Prometheus metrics on this port')
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        help=f'Log level (default: {LOG_LEVEL})')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Also write logs to this file')
    parser.add_argument('--plain', action='store_true',
                        help='Plain text logs instead of JSON')
    return parser


async def run_scan(request: ScanRequest, bus: EventBus):
    network = get_network(request.network)
    if request.files:
        paths = request.files
    else:
        paths = list_block_files(blocks_dir(network, request.datadir))
    scanner = ArchiveScanner(network, bus)
    return await scanner.scan(paths)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        enable_console=True,
        enable_structured=not args.plain
    )

    try:
        request = ScanRequest(
            network=args.network,
            datadir=args.datadir,
            files=args.files,
            output=args.output,
            include_transactions=not args.headers_only,
            progress_every=args.progress_every,
            metrics_port=args.metrics_port,
        )
    except ValidationError as e:
        logger.error(f"Invalid arguments: {e}")
        return 2

    logger.info(f"Starting block file scan on {request.network}")

    if request.metrics_port:
        start_metrics_server(request.metrics_port)

    bus = EventBus()
    ProgressLogger(every=request.progress_every).attach(bus)

    with ExitStack() as stack:
        if request.output:
            if request.output == '-':
                stream = sys.stdout
            else:
                stream = stack.enter_context(open(request.output, 'w', encoding='utf-8'))
            JsonLinesSink(stream, include_transactions=request.include_transactions).attach(bus)

        try:
            stats = asyncio.run(run_scan(request, bus))
        except (BlockchainError, OSError) as e:
            logger.error(f"Scan aborted: {e}", exc_info=True)
            return 1

    logger.info(
        f"Scan completed: {stats.files} files, {stats.blocks} blocks, {stats.transactions} transactions, "
        f"{stats.resolved_headers} resolved headers, {stats.orphan_headers} orphans"
    )
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
