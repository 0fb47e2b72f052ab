"""Inverted lists of (document ID, frequency) postings and their compression."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from itertools import accumulate, pairwise
from typing import BinaryIO, Iterable, Optional, Sequence

from .bitvector import BitVector

DEFAULT_BLOCK_SIZE = 128
"""Block size used when a list is shown without one being known."""

_HEADER = struct.Struct("<4I")


def vbyte_pack(values: Iterable[int]) -> list[int]:
    """Encode non-negative integers as variable bytes packed into 32-bit words.

    Each value is stored low seven bits first, with the high bit of a byte
    set while more bytes follow.  The byte stream is zero-padded to a whole
    number of little-endian words.
    """
    out = bytearray()
    for n in values:
        if n < 0:
            raise ValueError(f"variable byte coding needs a non-negative value: {n}")
        while n >= 128:
            out.append((n & 0x7F) | 0x80)
            n >>= 7
        out.append(n)
    out.extend(bytes(-len(out) % 4))
    return list(struct.unpack(f"<{len(out) // 4}I", out))


def vbyte_unpack(data: Sequence[int], count: int) -> list[int]:
    """Decode ``count`` integers from words produced by :func:`vbyte_pack`."""
    raw = struct.pack(f"<{len(data)}I", *data)
    values: list[int] = []
    pos = 0
    for _ in range(count):
        value = 0
        shift = 0
        while True:
            if pos >= len(raw):
                raise ValueError("truncated variable-byte data")
            byte = raw[pos]
            pos += 1
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
        values.append(value)
    return values


def _read_exact(stream: BinaryIO, count: int) -> bytes:
    data = stream.read(count)
    if len(data) < count:
        raise EOFError("truncated inverted list")
    return data


@dataclass
class SkipEntry:
    """Where one block of a long list starts and which document ends it."""

    block_size: int = 0
    last: int = 0
    dwrd: int = 0
    fwrd: int = 0


class InvertedList:
    """The postings of one term: increasing document IDs with frequencies.

    Postings are gathered uncompressed in ``doc_ids`` and ``freqs``.  After
    :meth:`compress` they live as gap-coded 32-bit words in ``doc_words`` and
    ``freq_words``; lists of more than one block also carry a skip table.
    """

    def __init__(self) -> None:
        self.doc_ids: list[int] = []
        self.freqs: list[int] = []
        self.doc_words: list[int] = []
        self.freq_words: list[int] = []
        self.skip_table: list[SkipEntry] = []
        self.num_postings = 0
        self.compressed = False
        self.block_size: Optional[int] = None

    @property
    def dwrd(self) -> int:
        """Number of words holding the compressed document gaps."""
        return len(self.doc_words)

    @property
    def fwrd(self) -> int:
        """Number of words holding the compressed frequencies."""
        return len(self.freq_words)

    def add_posting(self, doc_id: int) -> int:
        """Record an occurrence in ``doc_id``.

        Return 1 when a new posting was started, 2 when the last posting's
        frequency was raised.
        """
        if self.compressed:
            raise ValueError("cannot add postings to a compressed list")
        if self.doc_ids and self.doc_ids[-1] == doc_id:
            self.freqs[-1] += 1
            return 2
        self.doc_ids.append(doc_id)
        self.freqs.append(1)
        self.num_postings += 1
        return 1

    def num_blocks(self, block_size: int) -> int:
        """Number of blocks of ``block_size`` postings the list spans."""
        if block_size < 1:
            raise ValueError(f"block size must be positive: {block_size}")
        return -(-self.num_postings // block_size)

    def compress(self, block_size: int) -> None:
        """Replace the postings by their compressed form."""
        if self.compressed:
            raise ValueError("list is already compressed")
        blocks = self.num_blocks(block_size)
        gaps = [b - a for a, b in pairwise([0, *self.doc_ids])]
        self.skip_table = []
        if blocks <= 1:
            self.doc_words = vbyte_pack(gaps)
            self.freq_words = vbyte_pack(self.freqs)
        else:
            self.doc_words = []
            self.freq_words = []
            for start in range(0, self.num_postings, block_size):
                gap_block = gaps[start:start + block_size]
                freq_block = self.freqs[start:start + block_size]
                count = len(gap_block)
                padding = [0] * (block_size - count)
                self.skip_table.append(
                    SkipEntry(
                        block_size=count,
                        last=self.doc_ids[start + count - 1],
                        dwrd=len(self.doc_words),
                        fwrd=len(self.freq_words),
                    )
                )
                self.doc_words.extend(vbyte_pack(gap_block + padding))
                self.freq_words.extend(vbyte_pack(freq_block + padding))
        self.doc_ids = []
        self.freqs = []
        self.compressed = True
        self.block_size = block_size

    def _decode(self, block_size: int) -> tuple[list[int], list[int]]:
        count = self.num_postings
        if not self.skip_table:
            doc_ids = list(accumulate(vbyte_unpack(self.doc_words, count)))
            return doc_ids, vbyte_unpack(self.freq_words, count)
        doc_ids: list[int] = []
        freqs: list[int] = []
        previous = 0
        for entry in self.skip_table:
            gaps = vbyte_unpack(self.doc_words[entry.dwrd:], block_size)
            doc_ids.extend(list(accumulate(gaps, initial=previous))[1:])
            freqs.extend(vbyte_unpack(self.freq_words[entry.fwrd:], block_size))
            previous = entry.last
        return doc_ids[:count], freqs[:count]

    def decompress(self, block_size: int) -> None:
        """Restore the plain postings from their compressed form."""
        if not self.compressed:
            raise ValueError("list is not compressed")
        self.doc_ids, self.freqs = self._decode(block_size)
        self.doc_words = []
        self.freq_words = []
        self.skip_table = []
        self.compressed = False

    def write(self, stream: BinaryIO, block_size: int) -> None:
        """Store the compressed list, with its skip table for long lists."""
        if not self.compressed:
            raise ValueError("compress the list before writing it")
        blocks = self.num_blocks(block_size)
        if blocks > 1 and len(self.skip_table) != blocks:
            raise ValueError("block size does not match the compressed list")
        stream.write(_HEADER.pack(self.num_postings, blocks, self.dwrd, self.fwrd))
        if blocks > 1:
            vector = BitVector(100)
            for entry in self.skip_table:
                vector.vbyte_encode(entry.block_size)
                vector.vbyte_encode(entry.last)
                vector.vbyte_encode(entry.dwrd)
                vector.vbyte_encode(entry.fwrd)
            vector.pad()
            vector.write(stream)
        stream.write(struct.pack(f"<{self.dwrd}I", *self.doc_words))
        stream.write(struct.pack(f"<{self.fwrd}I", *self.freq_words))

    @classmethod
    def read(cls, stream: BinaryIO) -> "InvertedList":
        """Load a list stored by :meth:`write`, still compressed."""
        num_postings, blocks, dwrd, fwrd = _HEADER.unpack(_read_exact(stream, _HEADER.size))
        postings = cls()
        postings.num_postings = num_postings
        if blocks > 1:
            vector = BitVector.read(stream)
            postings.skip_table = [
                SkipEntry(
                    block_size=vector.vbyte_decode(),
                    last=vector.vbyte_decode(),
                    dwrd=vector.vbyte_decode(),
                    fwrd=vector.vbyte_decode(),
                )
                for _ in range(blocks)
            ]
            postings.block_size = postings.skip_table[0].block_size
        postings.doc_words = list(struct.unpack(f"<{dwrd}I", _read_exact(stream, 4 * dwrd)))
        postings.freq_words = list(struct.unpack(f"<{fwrd}I", _read_exact(stream, 4 * fwrd)))
        postings.compressed = True
        return postings

    def display(self, block_size: Optional[int] = None) -> None:
        """Print the postings, decoding them if the list is compressed."""
        size = block_size or self.block_size or DEFAULT_BLOCK_SIZE
        if self.compressed:
            doc_ids, freqs = self._decode(size)
        else:
            doc_ids, freqs = self.doc_ids, self.freqs
        body = "".join(
            f"P-{i}: ({d}, {f}) " for i, (d, f) in enumerate(zip(doc_ids, freqs), start=1)
        )
        print(f"[ {body}]", end="", flush=True)