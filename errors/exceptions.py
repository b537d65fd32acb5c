"""
Custom exception classes for blkscan
"""

from typing import Optional


class BlockchainError(Exception):
    """Base exception for block file operations"""
    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or "BLOCKCHAIN_ERROR"


class DecodeError(BlockchainError):
    """Binary decoding failed"""
    def __init__(self, message: str):
        super().__init__(message, "DECODE_ERROR")


class UnexpectedEndOfBuffer(DecodeError):
    """Buffer exhausted in the middle of a read"""
    def __init__(self, position: int, requested: int, available: int):
        message = (f"Unexpected end of buffer at offset {position}: "
                   f"need {requested} bytes, have {available}")
        super().__init__(message)
        self.position = position
        self.requested = requested
        self.available = available


class ValueTooLarge(DecodeError):
    """Variable-length integer cannot be represented without loss"""
    def __init__(self, value: int):
        super().__init__(f"Too large 64bit integer: {value}")
        self.value = value


class InvalidLength(DecodeError):
    """Digest built from something other than 32 bytes"""
    def __init__(self, length: int, expected: int = 32):
        super().__init__(f"Invalid digest length {length}, expected {expected}")
        self.length = length
        self.expected = expected


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class MagicMismatch(BlockchainError):
    """Archive framing lost: record does not start with the network magic"""
    def __init__(self, file_name: str, block_index: int, found: int, expected: int,
                 matching_network: Optional[str] = None):
        message = (f"Magic bytes of the {_ordinal(block_index + 1)} block in {file_name} "
                   f"(0x{found:08x}) didn't match the network's magic bytes 0x{expected:08x}")
        if matching_network:
            message += f". It does match the ones of {matching_network}"
        super().__init__(message, "MAGIC_MISMATCH")
        self.file_name = file_name
        self.block_index = block_index
        self.found = found
        self.expected = expected
        self.matching_network = matching_network


class ScanError(BlockchainError):
    """Decode failure while scanning a block file"""
    def __init__(self, file_name: str, block_index: int, reason: str):
        message = f"Failed to decode block {block_index} in {file_name}: {reason}"
        super().__init__(message, "SCAN_ERROR")
        self.file_name = file_name
        self.block_index = block_index


class UnsupportedNetworkError(BlockchainError):
    """Unknown network name"""
    def __init__(self, network: str):
        super().__init__(f'Unsupported network "{network}"', "CONFIG_ERROR")
        self.network = network
