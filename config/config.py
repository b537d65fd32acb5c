import os
import re
from dataclasses import dataclass
from typing import Optional

from errors.exceptions import UnsupportedNetworkError


@dataclass(frozen=True)
class NetworkParams:
    name: str
    magic: int      # first 4 bytes of every block record, read big-endian
    datadir: str    # subfolder of the data directory, "" for mainnet


NETWORKS = {
    "main":    NetworkParams("main", 0xf9beb4d9, ""),
    "test":    NetworkParams("test", 0x0b110907, "testnet3"),
    "signet":  NetworkParams("signet", 0x0a03cf40, "signet"),
    "regtest": NetworkParams("regtest", 0xfabfb5da, "regtest"),
}

BITCOIN_DATADIR = os.environ.get("BITCOIN_DATADIR", os.path.join(os.path.expanduser("~"), ".bitcoin"))
DEFAULT_NETWORK = os.environ.get("BLKSCAN_NETWORK", "main")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
PROGRESS_EVERY = int(os.environ.get("BLKSCAN_PROGRESS_EVERY", "10000"))
BLOCK_FILE_PATTERN = re.compile(r"^blk([0-9]+)\.dat$")


def get_network(name: str) -> NetworkParams:
    try:
        return NETWORKS[name]
    except KeyError:
        raise UnsupportedNetworkError(name) from None


def network_for_magic(magic: int) -> Optional[NetworkParams]:
    for params in NETWORKS.values():
        if params.magic == magic:
            return params
    return None


def blocks_dir(network: NetworkParams, base: Optional[str] = None) -> str:
    base = base if base is not None else BITCOIN_DATADIR
    return os.path.join(os.path.expanduser(base), network.datadir, "blocks")
