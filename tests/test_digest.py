"""
Tests for the 32-byte digest wrapper
"""
import pytest

from blockchain.digest import Digest, sha256d
from errors.exceptions import InvalidLength, DecodeError
from builders import GENESIS_HASH, GENESIS_HEADER_HEX


class TestDigestConstruction:
    """Byte order and length handling"""

    def test_display_string_is_reversed_hex(self):
        raw = bytes(range(32))
        d = Digest.from_bytes(raw)
        assert d.raw == raw
        assert d.display_string() == raw[::-1].hex()
        assert str(d) == d.display_string()

    def test_from_display_string_reverses_back(self):
        d = Digest.from_display_string(GENESIS_HASH)
        assert d.raw == bytes.fromhex(GENESIS_HASH)[::-1]
        assert d.display_string() == GENESIS_HASH

    @pytest.mark.parametrize("length", [0, 31, 33, 64])
    def test_wrong_length_rejected(self, length):
        with pytest.raises(InvalidLength) as exc:
            Digest.from_bytes(b"\x01" * length)
        assert exc.value.length == length
        assert isinstance(exc.value, DecodeError)

    def test_short_display_string_rejected(self):
        with pytest.raises(InvalidLength):
            Digest.from_display_string("abcd")

    def test_non_hex_display_string_rejected(self):
        with pytest.raises(ValueError):
            Digest.from_display_string("zz" * 32)


class TestDigestFromData:
    """Double SHA-256 of arbitrary data"""

    def test_genesis_header_hash(self):
        d = Digest.from_data(bytes.fromhex(GENESIS_HEADER_HEX))
        assert d.display_string() == GENESIS_HASH

    def test_matches_sha256d(self):
        data = b"block file scanner"
        assert Digest.from_data(data).raw == sha256d(data)

    def test_empty_input(self):
        assert Digest.from_data(b"").raw == sha256d(b"")


class TestDigestValueSemantics:
    """Equality, hashing and immutability"""

    def test_equality_is_bytewise(self):
        a = Digest(b"\xaa" * 32)
        b = Digest(bytearray(b"\xaa" * 32))
        assert a == b
        assert a != Digest(b"\xab" * 32)
        assert a != "aa" * 32

    def test_usable_as_dict_key(self):
        a = Digest(b"\x01" * 32)
        lookup = {a: "found"}
        assert lookup[Digest(b"\x01" * 32)] == "found"

    def test_immutable(self):
        d = Digest(b"\x02" * 32)
        with pytest.raises(AttributeError):
            d._raw = b"\x03" * 32

    def test_is_null(self):
        assert Digest(b"\x00" * 32).is_null()
        assert not Digest(b"\x00" * 31 + b"\x01").is_null()
