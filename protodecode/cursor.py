"""
Bounds-checked reader over a protobuf buffer.
"""

from typing import Tuple, Union

from protodecode.errors import TruncatedFixed, TruncatedVarint, VarintOverflow

BytesLike = Union[bytes, bytearray, memoryview]

_MASK64 = (1 << 64) - 1


class Cursor:
    """Reads varints and fixed-size runs from a buffer, tracking position.

    The buffer is copied to ``bytes`` once on construction; every slice
    handed out afterwards is an independent ``bytes`` object, so decoded
    values never depend on the caller keeping the input alive.
    """

    def __init__(self, data: BytesLike):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def bytes_consumed(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read_varint(self) -> int:
        """Read an unsigned 64-bit varint (at most 10 bytes)."""
        value, _ = self._read_raw_varint()
        return value

    def read_varint_bytes(self) -> bytes:
        """Read a varint and return the exact bytes it occupied."""
        _, raw = self._read_raw_varint()
        return raw

    def read_bytes(self, n: int) -> bytes:
        if n < 0 or n > self.remaining:
            raise TruncatedFixed(n, self.remaining, self._pos)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def _read_raw_varint(self) -> Tuple[int, bytes]:
        start = self._pos
        data = self._data
        result = 0
        shift = 0
        while True:
            if self._pos >= len(data):
                raise TruncatedVarint(start)
            b = data[self._pos]
            self._pos += 1
            result |= (b & 0x7F) << shift
            if not b & 0x80:
                break
            shift += 7
            if shift >= 64:
                raise VarintOverflow(start)
        return result & _MASK64, data[start:self._pos]
