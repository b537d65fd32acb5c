"""
Prometheus metrics for block file scans
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from log_utils import get_logger

logger = get_logger(__name__)

files_scanned_total = Counter('blkscan_files_scanned_total', 'Block files fully scanned')
blocks_scanned_total = Counter('blkscan_blocks_scanned_total', 'Block records decoded')
transactions_scanned_total = Counter('blkscan_transactions_scanned_total', 'Transactions decoded')
segwit_transactions_total = Counter('blkscan_segwit_transactions_total', 'Segwit transactions decoded')
headers_resolved_total = Counter('blkscan_headers_resolved_total', 'Headers that received a height')
orphan_headers = Gauge('blkscan_orphan_headers', 'Headers waiting for their parent')
best_height = Gauge('blkscan_best_height', 'Highest resolved height')
file_scan_seconds = Histogram('blkscan_file_scan_seconds', 'Time spent scanning one block file')


def start_metrics_server(port: int, addr: str = "0.0.0.0"):
    """Expose metrics over HTTP for Prometheus scraping"""
    start_http_server(port, addr=addr)
    logger.info(f"Metrics exporter listening on {addr}:{port}")
