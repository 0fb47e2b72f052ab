"""The lexicon: a chained hash table of the distinct terms of a collection."""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterator, Optional

from .params import InputParams
from .postings import InvertedList
from .word import Word

_U32 = 0xFFFFFFFF
_LENGTH = struct.Struct("<I")

_KAZLIB_RANDBOX = (
    0x49848F1B, 0xE6255DBA, 0x36DA5BDC, 0x47BF94E9,
    0x8CBCCE22, 0x559FC06A, 0xD268F536, 0xE10AF79A,
    0xC1AF4D69, 0x1D2917B5, 0xEC4C304D, 0x9EE5016C,
    0x69232F74, 0xFEAD7BB3, 0xE9089AB6, 0xF012F6AE,
)


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def _signed_chars(text: str) -> Iterator[int]:
    for byte in _encode(text):
        yield byte - 256 if byte >= 128 else byte


def djb2(text: str) -> int:
    """The DJB2 string hash, reduced to 32 bits."""
    value = 5381
    for c in _signed_chars(text):
        value = (value * 33 + c) & _U32
    return value


def kazlib_hash(text: str) -> int:
    """The Kazlib string hash (32 bits)."""
    acc = 0
    for c in _signed_chars(text):
        acc ^= _KAZLIB_RANDBOX[(c + acc) & 0xF]
        acc = ((acc << 1) | (acc >> 31)) & _U32
        acc ^= _KAZLIB_RANDBOX[((c >> 4) + acc) & 0xF]
        acc = ((acc << 2) | (acc >> 30)) & _U32
    return acc


def jz_hash(text: str) -> int:
    """The JZ string hash (32 bits)."""
    value = 1315423911
    for c in _signed_chars(text):
        value ^= ((value << 5) + c + (value >> 2)) & _U32
        value &= _U32
    return value


class Lexicon:
    """Distinct terms hashed by DJB2 into chains, most recently used first."""

    def __init__(self, params: InputParams) -> None:
        size = params.lexicon_table_size
        if size < 1:
            raise ValueError(f"lexicon table size must be positive: {size}")
        self.num_slots = size
        self.mask = size - 1
        self.min_term_length = params.min_term_length
        self.compression_block_size = params.compression_block_size
        self.num_words = 0
        self.num_chains = 0
        self._table: dict[int, list[Word]] = {}

    def __len__(self) -> int:
        return self.num_words

    def __iter__(self) -> Iterator[Word]:
        for slot in sorted(self._table):
            yield from self._table[slot]

    def _slot(self, term: str) -> int:
        return djb2(term) & self.mask

    def _chain(self, slot: int) -> list[Word]:
        chain = self._table.get(slot)
        if chain is None:
            chain = self._table[slot] = []
            self.num_chains += 1
        return chain

    def insert(self, doc_id: int, term: str) -> int:
        """Record an occurrence of ``term`` in ``doc_id``.

        Return 0 when the term is too short to index, 1 when a new posting
        was started and 2 when an existing posting's frequency was raised.
        """
        if len(_encode(term)) <= self.min_term_length:
            return 0
        chain = self._chain(self._slot(term))
        for index, word in enumerate(chain):
            if word.text == term:
                result = word.add_posting(doc_id)
                if index:
                    chain.insert(0, chain.pop(index))
                return result
        word = Word(term)
        word.add_posting(doc_id)
        chain.insert(0, word)
        self.num_words += 1
        return 1

    def add_list(self, term: str, postings: InvertedList) -> Word:
        """Attach a ready inverted list to a new term; keep an existing term as is."""
        chain = self._chain(self._slot(term))
        for word in chain:
            if word.text == term:
                return word
        word = Word(term, postings)
        chain.insert(0, word)
        self.num_words += 1
        return word

    def search(self, term: str) -> Optional[Word]:
        """Return the term's entry, or None if it is not in the lexicon."""
        for word in self._table.get(self._slot(term), ()):
            if word.text == term:
                return word
        return None

    def compress(self) -> None:
        """Compress every inverted list with the configured block size."""
        for word in self:
            word.compress(self.compression_block_size)

    def write(self, stream: BinaryIO) -> None:
        """Store every term followed by its compressed inverted list."""
        for word in self:
            word.write(stream)
            word.write_list(stream, self.compression_block_size)

    def read(self, stream: BinaryIO) -> None:
        """Load terms and lists stored by :meth:`write` until the stream ends."""
        while True:
            header = stream.read(_LENGTH.size)
            if len(header) < _LENGTH.size:
                break
            (length,) = _LENGTH.unpack(header)
            raw = stream.read(length)
            if len(raw) < length:
                raise EOFError("truncated index file")
            term = raw.decode("utf-8", "surrogateescape")
            self.add_list(term, InvertedList.read(stream))

    def display(self) -> None:
        """Print every term with its postings."""
        for word in self:
            word.display()
            print()