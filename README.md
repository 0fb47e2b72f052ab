# icdr

`icdr` holds the building blocks of a compressed inverted index over short
texts: bit-level integer codes, posting lists that compress themselves, a
hashed term dictionary that can be stored on disk, a cursor that walks a
compressed posting list and scores postings with BM25, a bounded max-heap
for ranking results, and a small entity type that groups record IDs.

It has no dependencies beyond the standard library.

## Modules

### `icdr.bitvector`

`BitVector` is a growable byte buffer written and read a bit at a time. It
offers raw access (`put_bit`, `get_bit`, `put_bits`, `get_bits`) and the
integer codes `unary_*`, `gamma_*` (Elias gamma), `delta_*` (Elias delta),
`run_length_*` (Elias delta gaps from the previous value) and `vbyte_*`
(variable byte).

```python
from icdr.bitvector import BitVector

vector = BitVector()
vector.gamma_encode(5)
vector.delta_encode(17)
vector.pad()      # flush the last byte and fix the bit length
vector.reset()    # back to the first bit
assert vector.gamma_decode() == 5
assert vector.delta_decode() == 17
```

Elias codes accept values from 1 to 33554430 and raise `ValueError`
otherwise. Reading past the padded length raises `EOFError`.
`write(stream)` stores the bit length followed by the bytes, and
`BitVector.read(stream)` loads them back.

The module also has helpers that pack zone and position "hits" into 32-bit
words: `tzp_encode2`, `tzp_encode`, `tzp_decode`, `encode_hit`,
`decode_hit`, and `getlog2`.

### `icdr.params`

`InputParams` is a dataclass holding the settings used by the other pieces:
lexicon table size, minimum and maximum term length, compression block size,
number of requested results, similarity bounds and a few flags.
`write(stream)` and `InputParams.read(stream)` store and load it in binary
form. The server host and port are kept in memory only.

### `icdr.postings`

`InvertedList` collects the postings of one term: increasing document IDs,
each with a frequency. `add_posting(doc_id)` returns 1 when a new posting is
started and 2 when the last posting's frequency is raised.

`compress(block_size)` replaces the postings with gap-coded variable-byte
data packed into 32-bit words. A list longer than one block is coded block
by block and gets a skip table (`SkipEntry` objects) that records, for each
block, its size, its last document ID and where its data starts.
`decompress(block_size)` restores the plain postings. `write(stream,
block_size)` and `InvertedList.read(stream)` store and load a compressed
list.

`vbyte_pack(values)` and `vbyte_unpack(data, count)` expose the word-packed
variable-byte coding on its own.

### `icdr.word`

`Word` pairs a term string with its `InvertedList`. Its `freq` property is
the number of documents the term occurs in.

### `icdr.lexicon`

`Lexicon` is the term dictionary: a chained hash table keyed by the DJB2
hash, with the most recently used term moved to the front of its chain.

```python
import io

from icdr.lexicon import Lexicon
from icdr.params import InputParams

params = InputParams(lexicon_table_size=1024, min_term_length=1,
                     compression_block_size=128)
lexicon = Lexicon(params)
lexicon.insert(1, "cable")   # 1: new posting
lexicon.insert(1, "cable")   # 2: frequency raised
lexicon.insert(2, "cable")   # 1: new posting
lexicon.insert(2, "c")       # 0: too short to index
assert lexicon.search("cable").freq == 2

lexicon.compress()
stream = io.BytesIO()
lexicon.write(stream)

stream.seek(0)
loaded = Lexicon(params)
loaded.read(stream)
assert len(loaded) == 1
```

Terms no longer than `min_term_length` bytes are not indexed. `search`
returns `None` for an unknown term. The module also provides the string
hashes `djb2`, `kazlib_hash` and `jz_hash`.

### `icdr.iterator`

`PostingIterator` walks a compressed `InvertedList` and decodes one block at
a time. `decode_doc_ids(block)` and `decode_frequencies(block)` decode a
block. `doc_id` is the document under the cursor. `advance()` steps to the
next posting and returns `False` at the end. `forward_seek(doc_id)` jumps
ahead, using the skip table on long lists. `eval_bm25(k, idf, k1)` gives the
BM25 contribution of the current posting, and `is_exhausted()` tells when
the cursor has reached the list's last document.

```python
from icdr.iterator import PostingIterator

cursor = PostingIterator(loaded.search("cable").postings, 128)
cursor.decode_doc_ids(0)
cursor.decode_frequencies(0)
assert cursor.doc_id == 1
assert cursor.advance()
assert cursor.doc_id == 2
```

### `icdr.heap`

`Result` is a dataclass holding a document ID, its text and its score.
`MaxHeap(capacity)` keeps results ordered by score: `insert` adds one and
`pop` removes the best. Inserting into a full heap or popping from an empty
one raises `IndexError`.

### `icdr.entity`

`Entity` holds an entity code and the IDs of the records that match it.
`add_matching_record` extends the group, and `write(stream)` and
`Entity.read(stream)` store and load it.

## What the package does not do

The package provides the parts of an index, not a whole one. It does not
read a data file of records and build an index from it. It has no record
store, no table of entities, and no query parser that intersects several
posting lists and returns ranked results. It also does not save or load a
complete index directory. Each piece stores and loads its own data on a
binary stream that you open yourself. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```