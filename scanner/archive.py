import os
import pathlib
from typing import List

from config.config import BLOCK_FILE_PATTERN
from log_utils import get_logger, log_performance

logger = get_logger(__name__)


def list_block_files(directory: str) -> List[str]:
    """blk*.dat files of ``directory``, ordered by their file number"""
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Block directory not found: {directory}")

    numbered = []
    for name in os.listdir(directory):
        match = BLOCK_FILE_PATTERN.match(name)
        if match:
            numbered.append((int(match.group(1)), name))

    return [os.path.join(directory, name) for _, name in sorted(numbered)]


@log_performance(logger, "read_archive")
def read_archive(path: str) -> bytes:
    return pathlib.Path(path).read_bytes()
