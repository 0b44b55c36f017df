import pytest

from serbin import decode, encode
from serbin.serialization import Deserializer, Serializer
from serbin.serialization.adapters import MaxBytesDeserializer, MaxBytesExceededError, MaxBytesSerializer


def test_serializer_within_limit() -> None:
    se = Serializer.build_bytes_serializer().with_max_bytes(3)
    se.write_byte(1)
    se.write_bytes(b'\x02\x03')
    assert se.bytes_left == 0
    assert bytes(se.finalize()) == b'\x01\x02\x03'


def test_serializer_over_limit() -> None:
    inner = Serializer.build_bytes_serializer()
    se = MaxBytesSerializer(inner, 2)
    se.write_byte(1)
    with pytest.raises(MaxBytesExceededError):
        se.write_bytes(b'\x02\x03')
    # the failed write did not reach the inner serializer
    assert inner.cur_pos() == 1


def test_deserializer_within_limit() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03\x04').with_max_bytes(3)
    assert de.read_byte() == 1
    assert bytes(de.read_bytes(2)) == b'\x02\x03'
    with pytest.raises(MaxBytesExceededError):
        de.read_byte()


def test_deserializer_non_exact_read() -> None:
    de = MaxBytesDeserializer(Deserializer.build_bytes_deserializer(b'\x01\x02'), 5)
    assert bytes(de.read_bytes(4, exact=False)) == b'\x01\x02'
    # only what was actually read counts
    assert de.bytes_left == 3


def test_deserializer_read_all() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03').with_max_bytes(3)
    assert bytes(de.read_all()) == b'\x01\x02\x03'
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03').with_max_bytes(2)
    with pytest.raises(MaxBytesExceededError):
        de.read_all()


def test_negative_limit() -> None:
    with pytest.raises(ValueError):
        Serializer.build_bytes_serializer().with_max_bytes(-1)


def test_optional_max_bytes() -> None:
    de = Deserializer.build_bytes_deserializer(b'')
    assert de.with_optional_max_bytes(None) is de
    assert isinstance(de.with_optional_max_bytes(1), MaxBytesDeserializer)


def test_decode_with_max_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    encode(se, list[str], ['abc', 'def'])
    data = bytes(se.finalize())
    assert decode(Deserializer.build_bytes_deserializer(data), list[str], max_bytes=len(data)) == ['abc', 'def']
    with pytest.raises(MaxBytesExceededError):
        decode(Deserializer.build_bytes_deserializer(data), list[str], max_bytes=len(data) - 1)
