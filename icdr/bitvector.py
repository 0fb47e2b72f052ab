"""A growable bit vector with bit-level, Elias, run-length and variable-byte codes."""

from __future__ import annotations

import struct
from typing import BinaryIO

MAX_ELIAS_VALUE = 33554430
"""Largest integer the Elias gamma and delta encoders accept."""

_LENGTH = struct.Struct("<I")
_U32 = 0xFFFFFFFF


def getlog2(n: int) -> int:
    """Return floor(log2(n)) of a 32-bit unsigned value, or 0 when n is 0."""
    return max((n & _U32).bit_length() - 1, 0)


def tzp_encode2(z1: int, z2: int, p1: int, p2: int) -> int:
    """Pack two (zone, position) hits into one 32-bit word."""
    return ((p2 << 19) | (p1 << 6) | (z2 << 3) | z1) & _U32


def tzp_encode(n: int, z: int, p: int, turn: int) -> int:
    """Pack one hit into ``n``: turn 1 starts a new word, turn 2 adds to it."""
    if turn == 1:
        n = (p << 19) | (z << 16)
    elif turn == 2:
        n |= (p << 3) | z
    return n & _U32


def tzp_decode(n: int) -> tuple[int, int, int, int]:
    """Unpack a word built by :func:`tzp_encode2` into (z1, z2, p1, p2)."""
    return n & 0x7, (n >> 3) & 0x7, (n >> 6) & 0x1FFF, (n >> 19) & 0x1FFF


def encode_hit(zone: int, pos: int) -> int:
    """Pack a zone (3 bits) and a position into one 32-bit value."""
    return ((pos << 3) | zone) & _U32


def decode_hit(n: int) -> tuple[int, int]:
    """Unpack a value built by :func:`encode_hit` into (zone, pos)."""
    return n & 0x7, n >> 3


class BitVector:
    """A byte buffer written and read one bit (or group of bits) at a time.

    ``length`` is the number of meaningful bits, fixed by :meth:`pad` or by
    :meth:`read`; the readers refuse to go past it.  ``last`` holds the
    previous value for run-length coding.
    """

    def __init__(self, size: int = 100) -> None:
        self._buf = bytearray(max(size, 1))
        self._pos = 0
        self._bit = 0
        self._cur = 0
        self.length = 0
        self.last = 0

    # -- buffer management -------------------------------------------------

    def _ensure(self) -> None:
        while self._pos >= len(self._buf):
            self._buf.extend(bytes(len(self._buf)))

    def _byte(self, index: int) -> int:
        return self._buf[index] if index < len(self._buf) else 0

    @property
    def data(self) -> bytes:
        """The bytes that :meth:`write` stores after the length field."""
        count = self.length // 8 + 1
        chunk = bytes(self._buf[:count])
        return chunk + bytes(count - len(chunk))

    def reset(self) -> None:
        """Move the cursor back to the first bit."""
        self.last = 0
        self._pos = 0
        self._bit = 0
        self._cur = self._byte(0)

    def seek(self, bit: int) -> None:
        """Move the cursor to an absolute bit offset."""
        self.last = 0
        self._pos = bit // 8
        self._bit = bit - self._pos * 8
        self._cur = self._byte(self._pos)

    def clear(self) -> None:
        """Erase the contents and reset every counter."""
        self._buf[:] = bytes(len(self._buf))
        self._pos = 0
        self._bit = 0
        self._cur = 0
        self.length = 0
        self.last = 0

    def pad(self) -> None:
        """Flush the partial byte and fix ``length`` at the current bit."""
        self._ensure()
        self._buf[self._pos] = self._cur
        self.length = 8 * self._pos + self._bit

    def disk_size(self) -> int:
        """Number of bytes :meth:`write` produces."""
        return _LENGTH.size + self.length // 8 + 1

    def write(self, stream: BinaryIO) -> None:
        """Write the bit length and the padded bytes. Call :meth:`pad` first."""
        stream.write(_LENGTH.pack(self.length & _U32))
        stream.write(self.data)

    @classmethod
    def read(cls, stream: BinaryIO) -> "BitVector":
        """Read a vector stored by :meth:`write`, positioned at its first bit."""
        header = stream.read(_LENGTH.size)
        if len(header) < _LENGTH.size:
            raise EOFError("truncated bit vector header")
        (length,) = _LENGTH.unpack(header)
        count = length // 8 + 1
        payload = stream.read(count)
        if len(payload) < count:
            raise EOFError("truncated bit vector data")
        vector = cls(max(4 * ((length // 8 + 8) // 4), count))
        vector._buf[:count] = payload
        vector.length = length
        vector.reset()
        return vector

    # -- raw bit access ----------------------------------------------------

    def put_bit(self, b: int) -> int:
        """Append one bit; return the number of bits written."""
        self._cur |= (b & 0x1) << (7 - self._bit)
        self._bit += 1
        if self._bit == 8:
            self._ensure()
            self._buf[self._pos] = self._cur
            self._cur = 0
            self._pos += 1
            self._bit = 0
        return 1

    def get_bit(self) -> int:
        """Read one bit; raise EOFError past the end."""
        if 8 * self._pos + self._bit >= self.length:
            raise EOFError("end of bit vector")
        b = (self._cur >> (7 - self._bit)) & 0x1
        self._bit += 1
        if self._bit == 8:
            self._pos += 1
            self._bit = 0
            self._cur = self._byte(self._pos)
        return b

    def put_bits(self, number: int, bits: int) -> int:
        """Append the low ``bits`` bits of ``number``, most significant first."""
        if bits < 0:
            raise ValueError(f"bit count must not be negative: {bits}")
        n = number & ((1 << bits) - 1)
        remaining = bits
        shift = 8 - self._bit
        while remaining >= shift:
            self._ensure()
            rest = remaining - shift
            self._cur |= n >> rest
            self._buf[self._pos] = self._cur
            n &= (1 << rest) - 1
            self._bit = 0
            self._pos += 1
            self._cur = 0
            remaining = rest
            shift = 8
        if remaining > 0:
            self._cur |= n << (shift - remaining)
            self._bit += remaining
        return bits

    def get_bits(self, num: int) -> int:
        """Read ``num`` bits as an unsigned integer; raise EOFError past the end."""
        value = 0
        shift = 8 - self._bit
        while num >= shift:
            if 8 * self._pos + self._bit >= self.length:
                raise EOFError("end of bit vector")
            value = (value << shift) | (self._cur & ((1 << shift) - 1))
            self._bit = 0
            self._pos += 1
            self._cur = self._byte(self._pos)
            num -= shift
            shift = 8
        if num > 0:
            temp = ((self._cur << self._bit) & 0xFF) >> (8 - num)
            value = (value << num) | temp
            self._bit += num
        return value

    # -- integer codes -----------------------------------------------------

    def unary_encode(self, n: int) -> int:
        """Write ``n`` zero bits followed by a one."""
        return self.put_bits(0, n) + self.put_bits(1, 1)

    def unary_decode(self) -> int:
        """Read a unary code."""
        count = 0
        while self.get_bit() != 1:
            count += 1
        return count

    def gamma_encode(self, n: int) -> int:
        """Write ``n`` with Elias gamma; return the number of bits written."""
        if n < 1 or n > MAX_ELIAS_VALUE:
            raise ValueError(f"value out of range for Elias coding: {n}")
        mag = getlog2(n)
        return self.put_bits(0, mag) + self.put_bits(n, mag + 1)

    def gamma_decode(self) -> int:
        """Read an Elias gamma code."""
        mag = 0
        while self.get_bit() == 0:
            mag += 1
        return (1 << mag) | self.get_bits(mag)

    def delta_encode(self, n: int) -> int:
        """Write ``n`` with Elias delta; return the number of bits written."""
        if n < 1 or n > MAX_ELIAS_VALUE:
            raise ValueError(f"value out of range for Elias coding: {n}")
        mag = getlog2(n)
        return self.gamma_encode(mag + 1) + self.put_bits(n, mag)

    def delta_decode(self) -> int:
        """Read an Elias delta code."""
        mag = self.gamma_decode() - 1
        return (1 << mag) | self.get_bits(mag)

    def run_length_encode(self, n: int) -> int:
        """Write the gap from ``last`` to ``n``; return 0 if ``n`` does not grow."""
        if n <= self.last:
            return 0
        written = self.delta_encode(n - self.last)
        self.last = n
        return written

    def run_length_decode(self) -> int:
        """Read a gap and return the running value it leads to."""
        self.last += self.delta_decode()
        return self.last

    def vbyte_encode(self, n: int) -> int:
        """Write ``n`` as variable bytes at the current byte; return bits written."""
        if n < 0:
            raise ValueError(f"variable byte coding needs a non-negative value: {n}")
        written = 0
        while n >= 128:
            self._ensure()
            self._buf[self._pos] = (n & 0x7F) | 0x80
            self._pos += 1
            n >>= 7
            written += 8
        self._ensure()
        self._buf[self._pos] = n & 0x7F
        self._pos += 1
        return written + 8

    def vbyte_decode(self) -> int:
        """Read a variable-byte value from the current byte."""
        result = 0
        shift = 0
        while True:
            byte = self._byte(self._pos)
            self._pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7