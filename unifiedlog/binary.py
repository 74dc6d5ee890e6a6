"""Low-level helpers for reading little- and big-endian binary records."""

from __future__ import annotations


class ParseError(ValueError):
    """Raised when binary data is truncated or malformed."""


class ByteReader:
    """Sequential reader over an immutable byte buffer."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._pos

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def take(self, size: int) -> bytes:
        """Consume and return exactly ``size`` bytes."""
        if size < 0:
            raise ParseError(f"cannot take a negative number of bytes: {size}")
        end = self._pos + size
        if end > len(self._data):
            raise ParseError(f"needed {size} bytes, only {len(self)} available")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _le(self, size: int) -> int:
        return int.from_bytes(self.take(size), "little")

    def u8(self) -> int:
        return self._le(1)

    def u16(self) -> int:
        return self._le(2)

    def u32(self) -> int:
        return self._le(4)

    def u64(self) -> int:
        return self._le(8)

    def be_uint(self, size: int) -> int:
        """Consume ``size`` bytes as an unsigned big-endian integer."""
        return int.from_bytes(self.take(size), "big")

    def remaining(self) -> bytes:
        """Return the unconsumed bytes without consuming them."""
        return self._data[self._pos:]


def extract_string(data: bytes) -> str:
    """Decode a NUL-terminated string; without a terminator the whole input is used."""
    raw = bytes(data)
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    return raw.decode("utf-8", errors="replace")


def padding_size_8(count: int, item_size: int) -> int:
    """Bytes of padding needed to align ``count`` items of ``item_size`` to 8 bytes."""
    return (8 - (count * item_size) % 8) % 8