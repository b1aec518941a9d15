import struct

from hypothesis import given, settings
from hypothesis import strategies as st

from fvecrypt.diffuser import (
    diffuser_a_decrypt,
    diffuser_a_encrypt,
    diffuser_b_decrypt,
    diffuser_b_encrypt,
)

sectors = st.integers(min_value=8, max_value=128).flatmap(
    lambda words: st.binary(min_size=words * 4, max_size=words * 4)
)


def test_zero_sector_is_fixed_point():
    zeros = bytes(512)
    assert diffuser_a_decrypt(zeros) == zeros
    assert diffuser_a_encrypt(zeros) == zeros
    assert diffuser_b_decrypt(zeros) == zeros
    assert diffuser_b_encrypt(zeros) == zeros


def test_length_is_preserved():
    sector = bytes(range(256)) * 2
    assert len(diffuser_a_decrypt(sector)) == 512
    assert len(diffuser_a_encrypt(sector)) == 512
    assert len(diffuser_b_decrypt(sector)) == 512
    assert len(diffuser_b_encrypt(sector)) == 512


def test_input_not_modified():
    sector = bytearray(range(256)) * 2
    original = bytes(sector)
    diffuser_a_decrypt(sector)
    assert bytes(sector) == original
    diffuser_a_encrypt(sector)
    assert bytes(sector) == original
    diffuser_b_decrypt(sector)
    assert bytes(sector) == original
    diffuser_b_encrypt(sector)
    assert bytes(sector) == original


def test_trailing_bytes_untouched():
    sector = bytes(range(64)) + b"\xaa\xbb\xcc"
    for out in (
        diffuser_a_decrypt(sector),
        diffuser_a_encrypt(sector),
        diffuser_b_decrypt(sector),
        diffuser_b_encrypt(sector),
    ):
        assert out[-3:] == b"\xaa\xbb\xcc"
        assert len(out) == len(sector)


@settings(max_examples=50)
@given(sectors)
def test_a_round_trip(sector):
    assert diffuser_a_decrypt(diffuser_a_encrypt(sector)) == sector
    assert diffuser_a_encrypt(diffuser_a_decrypt(sector)) == sector


@settings(max_examples=50)
@given(sectors)
def test_b_round_trip(sector):
    assert diffuser_b_decrypt(diffuser_b_encrypt(sector)) == sector
    assert diffuser_b_encrypt(diffuser_b_decrypt(sector)) == sector


@settings(max_examples=30)
@given(sectors)
def test_sector_pipeline_round_trip(sector):
    diffused = diffuser_b_encrypt(diffuser_a_encrypt(sector))
    assert diffuser_a_decrypt(diffuser_b_decrypt(diffused)) == sector


def test_single_word_spreads():
    sector = struct.pack("<I", 1) + bytes(508)
    for out in (
        diffuser_a_decrypt(sector),
        diffuser_a_encrypt(sector),
        diffuser_b_decrypt(sector),
        diffuser_b_encrypt(sector),
    ):
        words = struct.unpack("<128I", out)
        assert sum(1 for w in words if w) > 1


def test_accepts_memoryview():
    sector = bytes(range(256)) * 2
    assert diffuser_a_decrypt(memoryview(sector)) == diffuser_a_decrypt(sector)
    assert diffuser_b_encrypt(bytearray(sector)) == diffuser_b_encrypt(sector)


def test_empty_sector():
    assert diffuser_a_decrypt(b"") == b""
    assert diffuser_b_encrypt(b"") == b""