"""Block-wise traversal of a compressed inverted list during query processing."""

from __future__ import annotations

from itertools import accumulate

from .postings import InvertedList, vbyte_unpack


class PostingIterator:
    """A cursor over a compressed inverted list that decodes one block at a time.

    Short lists (a single block) are decoded whole.  Long lists are decoded
    block by block, with the skip table used to jump ahead.  Positions past
    the decoded block read as the list's final document ID.
    """

    def __init__(self, postings: InvertedList, block_size: int) -> None:
        if block_size < 1:
            raise ValueError(f"block size must be positive: {block_size}")
        if not postings.compressed:
            raise ValueError("iterate over a compressed list")
        self.postings = postings
        self.block_size = block_size
        self.num_blocks = postings.num_blocks(block_size)
        if self.num_blocks > 1 and len(postings.skip_table) != self.num_blocks:
            raise ValueError("block size does not match the compressed list")
        self._doc_ids = [0] * block_size
        self._freqs = [0] * block_size
        self.offset = 0
        self.cur_block = 0
        self.freqs_decoded = False
        self.final_doc_id = postings.skip_table[-1].last if self.num_blocks > 1 else 0

    @property
    def doc_id(self) -> int:
        """The document ID under the cursor."""
        if self.offset < len(self._doc_ids):
            return self._doc_ids[self.offset]
        return self.final_doc_id

    @property
    def freq(self) -> int:
        """Number of postings in the list."""
        return self.postings.num_postings

    def decode_doc_ids(self, block: int) -> list[int]:
        """Decode a block of document IDs and put the cursor at its start."""
        postings = self.postings
        if self.num_blocks <= 1:
            count = postings.num_postings
            ids = list(accumulate(vbyte_unpack(postings.doc_words, count)))
            self._doc_ids = ids + [0] * (self.block_size - count)
            self.final_doc_id = ids[-1] if ids else 0
        else:
            entry = postings.skip_table[block]
            previous = postings.skip_table[block - 1].last if block else 0
            gaps = vbyte_unpack(postings.doc_words[entry.dwrd:], self.block_size)
            self._doc_ids = list(accumulate(gaps, initial=previous))[1:]
        self.offset = 0
        return list(self._doc_ids)

    def decode_frequencies(self, block: int) -> list[int]:
        """Decode a block of frequencies."""
        postings = self.postings
        if self.num_blocks <= 1:
            count = postings.num_postings
            freqs = vbyte_unpack(postings.freq_words, count)
            self._freqs = freqs + [0] * (self.block_size - count)
        else:
            entry = postings.skip_table[block]
            self._freqs = vbyte_unpack(postings.freq_words[entry.fwrd:], self.block_size)
        self.freqs_decoded = True
        return list(self._freqs)

    def eval_bm25(self, k: float, idf: float, k1: float) -> float:
        """BM25 contribution of the posting under the cursor."""
        if not self.freqs_decoded:
            self.decode_frequencies(self.cur_block)
        tf = self._freqs[self.offset] if self.offset < len(self._freqs) else 0
        return (idf * tf * (k1 + 1)) / (tf + k)

    def forward_seek(self, doc_id: int) -> None:
        """Move forward to the first posting not below ``doc_id``, or to the end."""
        postings = self.postings
        short = self.num_blocks <= 1
        blk_size = self.block_size if short else postings.skip_table[self.cur_block].block_size
        while self.doc_id < doc_id:
            if self.doc_id == self.final_doc_id:
                return
            self.offset += 1
            if short:
                if self.offset == postings.num_postings - 1:
                    return
            elif self.offset == blk_size:
                found = self.search_skip_table(self.cur_block + 1, self.num_blocks - 1, doc_id)
                blk_size = postings.skip_table[self.cur_block].block_size
                if found == 0:
                    break
                self.decode_doc_ids(self.cur_block)

    def advance(self) -> bool:
        """Step to the next posting; return False at the end of the list."""
        postings = self.postings
        if self.num_blocks <= 1:
            if self.offset == postings.num_postings - 1:
                return False
            self.offset += 1
            return True
        self.offset += 1
        if self.offset == postings.skip_table[self.cur_block].block_size:
            if self.cur_block < self.num_blocks - 1:
                self.decode_doc_ids(self.cur_block + 1)
                self.cur_block += 1
                self.freqs_decoded = False
            else:
                return False
        return True

    def search_skip_table(self, first: int, last: int, key: int) -> int:
        """Binary-search the skip table for the block that may hold ``key``.

        The found block becomes the current one and is returned.
        """
        table = self.postings.skip_table
        if not table:
            raise ValueError("a single-block list has no skip table")
        mid = 0
        while first <= last:
            mid = (first + last) // 2
            if key > table[mid].last:
                first = mid + 1
            elif key < table[mid].last:
                last = mid - 1
            else:
                break
        else:
            if table[mid].last < key:
                mid += 1
        mid = min(mid, len(table) - 1)
        self.cur_block = mid
        self.freqs_decoded = False
        return mid

    def is_exhausted(self) -> bool:
        """True once the cursor has reached the list's final document."""
        return self.doc_id >= self.final_doc_id

    def clear(self) -> None:
        """Forget all decoded data and reset the cursor."""
        self._doc_ids = [0] * self.block_size
        self._freqs = [0] * self.block_size
        self.offset = 0
        self.cur_block = 0
        self.final_doc_id = 0
        self.freqs_decoded = False