import struct
from typing import Union

from errors.exceptions import UnexpectedEndOfBuffer, ValueTooLarge

# (width, signed, byteorder) -> struct format
_INT_FORMATS = {
    (1, False, "little"): struct.Struct("<B"),
    (1, True, "little"): struct.Struct("<b"),
    (2, False, "little"): struct.Struct("<H"),
    (2, True, "little"): struct.Struct("<h"),
    (4, False, "little"): struct.Struct("<I"),
    (4, True, "little"): struct.Struct("<i"),
    (8, False, "little"): struct.Struct("<Q"),
    (8, True, "little"): struct.Struct("<q"),
    (1, False, "big"): struct.Struct(">B"),
    (1, True, "big"): struct.Struct(">b"),
    (2, False, "big"): struct.Struct(">H"),
    (2, True, "big"): struct.Struct(">h"),
    (4, False, "big"): struct.Struct(">I"),
    (4, True, "big"): struct.Struct(">i"),
    (8, False, "big"): struct.Struct(">Q"),
    (8, True, "big"): struct.Struct(">q"),
}

# varint prefix byte -> width of the little-endian value that follows
_VARINT_WIDTHS = {0xfd: 2, 0xfe: 4, 0xff: 8}


def is_exact_float(value: int) -> bool:
    """True when ``value`` survives a round trip through a double."""
    return int(float(value)) == value


class Cursor:
    """Forward-only reader over an immutable byte buffer."""

    def __init__(self, buf: Union[bytes, bytearray, memoryview], offset: int = 0):
        self._buf = bytes(buf) if not isinstance(buf, bytes) else buf
        self._pos = 0
        self.seek(offset)

    @property
    def buffer(self) -> bytes:
        return self._buf

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._buf)

    def tell(self) -> int:
        return self._pos

    def seek(self, pos: int) -> None:
        if pos < 0 or pos > len(self._buf):
            raise UnexpectedEndOfBuffer(pos, 0, len(self._buf))
        self._pos = pos

    def move(self, delta: int) -> None:
        self.seek(self._pos + delta)

    def read(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {n}")
        if n > self.remaining:
            raise UnexpectedEndOfBuffer(self._pos, n, self.remaining)
        start = self._pos
        self._pos += n
        return self._buf[start:self._pos]

    def read_int(self, width: int, signed: bool = False, byteorder: str = "little") -> int:
        fmt = _INT_FORMATS[(width, signed, byteorder)]
        if width > self.remaining:
            raise UnexpectedEndOfBuffer(self._pos, width, self.remaining)
        value = fmt.unpack_from(self._buf, self._pos)[0]
        self._pos += width
        return value

    def read_uint8(self) -> int:
        return self.read_int(1)

    def read_uint16_le(self) -> int:
        return self.read_int(2)

    def read_uint32_le(self) -> int:
        return self.read_int(4)

    def read_uint64_le(self) -> int:
        return self.read_int(8)

    def read_int32_le(self) -> int:
        return self.read_int(4, signed=True)

    def read_int64_le(self) -> int:
        return self.read_int(8, signed=True)

    def read_uint32_be(self) -> int:
        return self.read_int(4, byteorder="big")

    def read_int32_be(self) -> int:
        return self.read_int(4, signed=True, byteorder="big")

    def read_varint(self) -> int:
        """
        Read a compact size unsigned integer (1, 3, 5 or 9 bytes).

        Nine-byte values are only accepted when they are exactly representable
        as a double; anything else raises ``ValueTooLarge`` instead of losing
        precision further down the line.
        """
        prefix = self.read_uint8()
        width = _VARINT_WIDTHS.get(prefix)
        if width is None:
            return prefix
        value = self.read_int(width)
        if width == 8 and not is_exact_float(value):
            raise ValueTooLarge(value)
        return value

    def read_var_bytes(self) -> bytes:
        return self.read(self.read_varint())
