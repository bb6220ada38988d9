import pytest

from alephkit.primitives import ApiError


def test_decode_key_encodes_as_first_variant():
    assert ApiError.decode_key().encode() == b"\x00"


def test_round_trip():
    error = ApiError.decode_key()
    assert ApiError.decode(error.encode()) == error


def test_variant_name():
    assert ApiError.decode_key().variant == "DecodeKey"


def test_decode_rejects_unknown_index():
    with pytest.raises(ValueError):
        ApiError.decode(b"\x01")


def test_decode_rejects_wrong_length():
    with pytest.raises(ValueError):
        ApiError.decode(b"")
    with pytest.raises(ValueError):
        ApiError.decode(b"\x00\x00")


def test_unknown_variant_rejected():
    with pytest.raises(ValueError):
        ApiError("Other")


def test_can_be_raised_and_caught():
    with pytest.raises(ApiError) as info:
        raise ApiError.decode_key()
    assert info.value == ApiError("DecodeKey")
    assert hash(info.value) == hash(ApiError.decode_key())