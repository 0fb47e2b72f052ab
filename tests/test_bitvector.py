import io

import pytest

from icdr.bitvector import (
    MAX_ELIAS_VALUE,
    BitVector,
    decode_hit,
    encode_hit,
    getlog2,
    tzp_decode,
    tzp_encode,
    tzp_encode2,
)

VALUES = [1, 2, 3, 4, 5, 7, 8, 100, 127, 128, 255, 256, 1000, 65535, 123456, MAX_ELIAS_VALUE]


def _finish(vector):
    vector.pad()
    vector.reset()
    return vector


def test_getlog2_powers_of_two():
    for k in range(32):
        assert getlog2(1 << k) == k
        assert getlog2((1 << (k + 1)) - 1) == k


def test_getlog2_small_values():
    assert getlog2(0) == 0
    assert getlog2(255) == 7


def test_gamma_round_trip():
    vector = BitVector(4)
    for value in VALUES:
        assert vector.gamma_encode(value) == 2 * getlog2(value) + 1
    _finish(vector)
    assert [vector.gamma_decode() for _ in VALUES] == VALUES


def test_delta_round_trip():
    vector = BitVector(4)
    for value in VALUES:
        vector.delta_encode(value)
    _finish(vector)
    assert [vector.delta_decode() for _ in VALUES] == VALUES


def test_unary_round_trip():
    values = [0, 1, 5, 9, 40]
    vector = BitVector(2)
    for value in values:
        assert vector.unary_encode(value) == value + 1
    _finish(vector)
    assert [vector.unary_decode() for _ in values] == values


def test_run_length_round_trip():
    values = [3, 7, 10, 500, 501, 90000]
    vector = BitVector(8)
    for value in values:
        vector.run_length_encode(value)
    _finish(vector)
    assert [vector.run_length_decode() for _ in values] == values


def test_run_length_ignores_non_increasing():
    vector = BitVector(8)
    vector.run_length_encode(10)
    assert vector.run_length_encode(10) == 0
    assert vector.run_length_encode(4) == 0
    assert vector.last == 10


def test_vbyte_round_trip():
    values = [0, 1, 127, 128, 300, 16383, 16384, 2**31 - 1, 2**40 + 5]
    vector = BitVector(2)
    for value in values:
        written = vector.vbyte_encode(value)
        assert written % 8 == 0
    _finish(vector)
    assert [vector.vbyte_decode() for _ in values] == values


def test_vbyte_single_byte_for_small_values():
    vector = BitVector(4)
    vector.vbyte_encode(127)
    vector.pad()
    assert vector.data[0] == 127


def test_put_and_get_bits_round_trip():
    fields = [(0b101, 3), (0xFF, 8), (0, 5), (0x1234, 16), (1, 1), (0xABCDE, 20), (0xFFFFFFFF, 32)]
    vector = BitVector(1)
    for number, bits in fields:
        assert vector.put_bits(number, bits) == bits
    _finish(vector)
    assert [vector.get_bits(bits) for _, bits in fields] == [n for n, _ in fields]


def test_put_bits_keeps_only_low_bits():
    vector = BitVector(4)
    vector.put_bits(0b11110101, 4)
    _finish(vector)
    assert vector.get_bits(4) == 0b0101


def test_put_bit_round_trip():
    bits = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1, 1]
    vector = BitVector(1)
    for b in bits:
        vector.put_bit(b)
    _finish(vector)
    assert vector.length == len(bits)
    assert [vector.get_bit() for _ in bits] == bits


def test_seek_to_bit_offset():
    vector = BitVector(4)
    vector.put_bits(0b101, 3)
    vector.put_bits(0b11110000, 8)
    vector.put_bits(0b011, 3)
    vector.pad()
    vector.seek(3)
    assert vector.get_bits(8) == 0b11110000
    vector.seek(11)
    assert vector.get_bits(3) == 0b011


def test_write_single_bit_wire_format():
    vector = BitVector(4)
    vector.put_bit(1)
    vector.pad()
    stream = io.BytesIO()
    vector.write(stream)
    assert stream.getvalue() == b"\x01\x00\x00\x00\x80"


def test_write_read_round_trip():
    vector = BitVector(2)
    for value in VALUES:
        vector.gamma_encode(value)
    vector.pad()
    stream = io.BytesIO()
    vector.write(stream)
    assert len(stream.getvalue()) == vector.disk_size()
    stream.seek(0)
    loaded = BitVector.read(stream)
    assert loaded.length == vector.length
    assert [loaded.gamma_decode() for _ in VALUES] == VALUES


def test_read_truncated_raises():
    vector = BitVector(4)
    for value in VALUES:
        vector.delta_encode(value)
    vector.pad()
    stream = io.BytesIO()
    vector.write(stream)
    with pytest.raises(EOFError):
        BitVector.read(io.BytesIO(stream.getvalue()[:-1]))
    with pytest.raises(EOFError):
        BitVector.read(io.BytesIO(b"\x01"))


def test_reading_past_end_raises():
    vector = _finish(BitVector(4))
    with pytest.raises(EOFError):
        vector.get_bit()
    with pytest.raises(EOFError):
        vector.unary_decode()
    with pytest.raises(EOFError):
        vector.get_bits(8)


def test_clear_empties_vector():
    vector = BitVector(4)
    vector.put_bits(0xFFFF, 16)
    vector.pad()
    vector.clear()
    assert vector.length == 0
    vector.reset()
    with pytest.raises(EOFError):
        vector.get_bit()


@pytest.mark.parametrize("value", [0, -3, MAX_ELIAS_VALUE + 1])
def test_elias_range_errors(value):
    vector = BitVector(4)
    with pytest.raises(ValueError):
        vector.gamma_encode(value)
    with pytest.raises(ValueError):
        vector.delta_encode(value)


def test_vbyte_negative_raises():
    with pytest.raises(ValueError):
        BitVector(4).vbyte_encode(-1)


def test_hit_round_trip():
    for zone in range(8):
        for pos in (0, 1, 77, 100000):
            assert decode_hit(encode_hit(zone, pos)) == (zone, pos)


def test_tzp_encode2_round_trip():
    for z1, z2, p1, p2 in [(0, 0, 0, 0), (7, 7, 8191, 8191), (3, 5, 12, 4000)]:
        assert tzp_decode(tzp_encode2(z1, z2, p1, p2)) == (z1, z2, p1, p2)


def test_tzp_encode_turns():
    first = tzp_encode(12345, 3, 40, 1)
    assert first == tzp_encode(0, 3, 40, 1)
    second = tzp_encode(first, 2, 9, 2)
    assert second & first == first
    assert tzp_encode(second, 1, 1, 3) == second