import io
import struct

import pytest

from icdr.postings import InvertedList, SkipEntry, vbyte_pack, vbyte_unpack


def _make_list(doc_ids, repeat_every=3):
    postings = InvertedList()
    for index, doc_id in enumerate(doc_ids):
        postings.add_posting(doc_id)
        if index % repeat_every == 0:
            postings.add_posting(doc_id)
    return postings


def test_vbyte_single_small_value_fits_one_word():
    assert vbyte_pack([1]) == [1]


def test_vbyte_two_byte_value_layout():
    # 128 is stored as 0x80 0x01, little-endian in one word.
    assert vbyte_pack([128]) == [0x0180]


def test_vbyte_empty():
    assert vbyte_pack([]) == []
    assert vbyte_unpack([], 0) == []


@pytest.mark.parametrize(
    "values", [[0], [127, 128, 300], [2**32 - 1, 5, 0, 16384], list(range(200))]
)
def test_vbyte_round_trip(values):
    assert vbyte_unpack(vbyte_pack(values), len(values)) == values


def test_vbyte_rejects_negative():
    with pytest.raises(ValueError):
        vbyte_pack([3, -1])


def test_vbyte_unpack_truncated():
    with pytest.raises(ValueError):
        vbyte_unpack([], 1)


def test_add_posting_return_codes():
    postings = InvertedList()
    assert postings.add_posting(4) == 1
    assert postings.add_posting(4) == 2
    assert postings.add_posting(9) == 1
    assert postings.doc_ids == [4, 9]
    assert postings.freqs == [2, 1]
    assert postings.num_postings == len(postings.doc_ids)


def test_num_blocks_boundaries():
    postings = _make_list(range(1, 129))
    assert postings.num_blocks(128) == 1
    postings.add_posting(500)
    assert postings.num_blocks(128) == 2
    with pytest.raises(ValueError):
        postings.num_blocks(0)


@pytest.mark.parametrize("count,block_size", [(1, 128), (50, 128), (128, 128), (300, 128), (37, 4), (40, 8)])
def test_compress_decompress_round_trip(count, block_size):
    doc_ids = [3 * i + 1 for i in range(count)]
    postings = _make_list(doc_ids)
    expected_freqs = list(postings.freqs)
    postings.compress(block_size)
    assert postings.compressed
    assert postings.doc_ids == []
    postings.decompress(block_size)
    assert postings.doc_ids == doc_ids
    assert postings.freqs == expected_freqs


def test_skip_table_of_long_list():
    doc_ids = [2 * i + 1 for i in range(10)]
    postings = _make_list(doc_ids)
    postings.compress(4)
    assert [e.last for e in postings.skip_table] == [doc_ids[3], doc_ids[7], doc_ids[9]]
    assert [e.block_size for e in postings.skip_table] == [4, 4, len(doc_ids) - 8]
    assert postings.skip_table[0] == SkipEntry(block_size=4, last=doc_ids[3], dwrd=0, fwrd=0)
    offsets = [e.dwrd for e in postings.skip_table]
    assert offsets == sorted(offsets)


def test_short_list_has_no_skip_table():
    postings = _make_list([1, 5, 9])
    postings.compress(128)
    assert postings.skip_table == []


@pytest.mark.parametrize("count,block_size", [(5, 128), (300, 128), (23, 4)])
def test_write_read_round_trip(count, block_size):
    doc_ids = [5 * i + 2 for i in range(count)]
    postings = _make_list(doc_ids)
    freqs = list(postings.freqs)
    postings.compress(block_size)
    stream = io.BytesIO()
    postings.write(stream, block_size)
    raw = stream.getvalue()
    assert raw[:8] == struct.pack("<II", count, postings.num_blocks(block_size))
    stream.seek(0)
    loaded = InvertedList.read(stream)
    assert stream.read() == b""
    assert loaded.num_postings == count
    assert loaded.skip_table == postings.skip_table
    loaded.decompress(block_size)
    assert loaded.doc_ids == doc_ids
    assert loaded.freqs == freqs


def test_write_requires_compression():
    postings = _make_list([1, 2])
    with pytest.raises(ValueError):
        postings.write(io.BytesIO(), 128)


def test_read_truncated():
    with pytest.raises(EOFError):
        InvertedList.read(io.BytesIO(b"\x01\x00"))


def test_add_after_compress_rejected():
    postings = _make_list([1, 2])
    postings.compress(128)
    with pytest.raises(ValueError):
        postings.add_posting(7)
    with pytest.raises(ValueError):
        postings.compress(128)


def test_decompress_requires_compressed():
    with pytest.raises(ValueError):
        InvertedList().decompress(128)


def test_display_compressed(capsys):
    postings = InvertedList()
    postings.add_posting(3)
    postings.add_posting(3)
    postings.add_posting(8)
    postings.compress(128)
    postings.display()
    assert capsys.readouterr().out == "[ P-1: (3, 2) P-2: (8, 1) ]"
    assert postings.compressed