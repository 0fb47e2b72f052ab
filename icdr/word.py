"""A term of the collection together with its inverted list."""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional

from .postings import InvertedList

_U32 = struct.Struct("<I")


class Word:
    """A distinct term and the postings of the records that contain it."""

    def __init__(self, text: str, postings: Optional[InvertedList] = None) -> None:
        self.text = text
        self.postings = postings if postings is not None else InvertedList()

    @property
    def freq(self) -> int:
        """Number of records the term occurs in."""
        return self.postings.num_postings

    def add_posting(self, doc_id: int) -> int:
        """Record an occurrence; see :meth:`InvertedList.add_posting`."""
        return self.postings.add_posting(doc_id)

    def compress(self, block_size: int) -> None:
        """Compress the term's inverted list."""
        self.postings.compress(block_size)

    def write(self, stream: BinaryIO) -> None:
        """Store the term string preceded by its byte length."""
        encoded = self.text.encode("utf-8", "surrogateescape")
        stream.write(_U32.pack(len(encoded)))
        stream.write(encoded)

    def write_list(self, stream: BinaryIO, block_size: int) -> None:
        """Store the term's compressed inverted list."""
        self.postings.write(stream, block_size)

    def display(self) -> None:
        """Print the term and its postings."""
        print(f"\n\nWord: {self.text}, Inverted List:", flush=True)
        self.postings.display()