import struct

import pytest

from serbin.serialization import Deserializer, OutOfDataError, Serializer, TooLongError
from serbin.serialization.compound_encoding.array import decode_scalar_array, encode_array
from serbin.serialization.compound_encoding.optional import decode_optional, encode_optional
from serbin.serialization.compound_encoding.tuple import encode_tuple
from serbin.serialization.encoding.bool import decode_bool, encode_bool
from serbin.serialization.encoding.bytes import decode_bytes, encode_bytes
from serbin.serialization.encoding.scalar import (
    decode_scalar,
    decode_scalar_run,
    encode_scalar,
    encode_scalar_run,
    scalar_size,
)
from serbin.serialization.encoding.size import decode_size, encode_size
from serbin.serialization.encoding.text import UTF8, UTF16, UTF32, decode_text, encode_text


def _encoded(fn, *args, **kwargs) -> bytes:
    se = Serializer.build_bytes_serializer()
    fn(se, *args, **kwargs)
    return bytes(se.finalize())


@pytest.mark.parametrize('fmt,value', [
    ('b', -1),
    ('B', 255),
    ('h', -300),
    ('H', 65535),
    ('i', -2**31),
    ('I', 2**32 - 1),
    ('q', -2**63),
    ('Q', 2**64 - 1),
    ('N', 2**16),
    ('n', -5),
    ('f', 0.5),
    ('d', 1e300),
    ('e', 1.5),
    ('?', True),
])
def test_scalar_is_native(fmt: str, value: object) -> None:
    data = _encoded(encode_scalar, value, fmt)
    assert data == struct.pack(fmt, value)
    assert len(data) == scalar_size(fmt)
    assert decode_scalar(Deserializer.build_bytes_deserializer(data), fmt) == value


@pytest.mark.parametrize('fmt,value', [('b', 128), ('B', -1), ('H', 2**16), ('e', 1e10), ('i', 'x')])
def test_scalar_out_of_range(fmt: str, value: object) -> None:
    se = Serializer.build_bytes_serializer()
    with pytest.raises(ValueError):
        encode_scalar(se, value, fmt)
    assert se.cur_pos() == 0


def test_scalar_run_matches_single_values() -> None:
    values = [1.0, -2.5, 3.25]
    run = _encoded(encode_scalar_run, values, 'f')
    single = b''.join(_encoded(encode_scalar, v, 'f') for v in values)
    assert run == single
    assert decode_scalar_run(Deserializer.build_bytes_deserializer(run), 3, 'f') == tuple(values)


def test_empty_scalar_run() -> None:
    assert _encoded(encode_scalar_run, [], 'q') == b''
    de = Deserializer.build_bytes_deserializer(b'')
    assert decode_scalar_run(de, 0, 'q') == ()
    with pytest.raises(ValueError):
        decode_scalar_run(de, -1, 'q')


def test_short_scalar_run() -> None:
    de = Deserializer.build_bytes_deserializer(struct.pack('2i', 1, 2))
    with pytest.raises(OutOfDataError):
        decode_scalar_run(de, 3, 'i')


def test_size() -> None:
    assert _encoded(encode_size, 3) == struct.pack('N', 3)
    assert _encoded(encode_size, 3, fmt='H') == struct.pack('H', 3)
    with pytest.raises(ValueError):
        _encoded(encode_size, -1)
    with pytest.raises(ValueError):
        _encoded(encode_size, 1, fmt='i')
    de = Deserializer.build_bytes_deserializer(struct.pack('N', 11))
    with pytest.raises(TooLongError):
        decode_size(de, max_length=10)


def test_bool() -> None:
    assert _encoded(encode_bool, True) == b'\x01'
    assert _encoded(encode_bool, False) == b'\x00'
    assert decode_bool(Deserializer.build_bytes_deserializer(b'\x80')) is True
    assert decode_bool(Deserializer.build_bytes_deserializer(b'\x00')) is False


def test_bytes() -> None:
    data = _encoded(encode_bytes, b'abc', size_format='B')
    assert data == b'\x03abc'
    de = Deserializer.build_bytes_deserializer(data)
    assert decode_bytes(de, size_format='B') == b'abc'
    with pytest.raises(TooLongError):
        decode_bytes(Deserializer.build_bytes_deserializer(data), size_format='B', max_length=2)
    with pytest.raises(OutOfDataError):
        decode_bytes(Deserializer.build_bytes_deserializer(b'\x04abc'), size_format='B')


@pytest.mark.parametrize('encoding,unit_size', [(UTF8, 1), (UTF16, 2), (UTF32, 4)])
def test_text_code_units(encoding, unit_size: int) -> None:
    value = 'añ\U0001f600'
    data = _encoded(encode_text, value, encoding, size_format='B')
    units = data[0]
    assert len(data) == 1 + units * unit_size
    # no byte order mark
    assert data[1:] == value.encode(encoding.codec)
    assert decode_text(Deserializer.build_bytes_deserializer(data), encoding, size_format='B') == value


def test_optional_payload_is_not_read_when_absent() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x00')
    assert decode_optional(de, lambda d: decode_scalar(d, 'q')) is None
    de.finalize()
    assert _encoded(encode_optional, None, lambda s, v: encode_scalar(s, v, 'q')) == b'\x00'


def test_array_length() -> None:
    with pytest.raises(ValueError):
        _encoded(encode_array, [1, 2], lambda s, v: encode_scalar(s, v, 'b'), length=3)
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    assert decode_scalar_array(de, 'b', list, length=2) == [1, 2]


def test_tuple_size_mismatch() -> None:
    with pytest.raises(TypeError):
        _encoded(encode_tuple, (1, 2), (lambda s, v: encode_scalar(s, v, 'b'),))
