import io
import struct

import pytest

from serbin.serialization import BadDataError, ChannelWriteError, Deserializer, OutOfDataError, Serializer
from serbin.serialization.stream_deserializer import StreamDeserializer


class _ChunkCountingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.read_sizes: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        assert size is not None
        self.read_sizes.append(size)
        return super().read(size)


class _PartialWriteStream(io.RawIOBase):
    """Accepts at most `limit` bytes per write call."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:  # type: ignore[no-untyped-def,override]
        chunk = bytes(b[:self.limit])
        self.data += chunk
        return len(chunk)


def test_bytes_serializer() -> None:
    se = Serializer.build_bytes_serializer()
    se.write_byte(1)
    se.write_bytes(b'\x02\x03')
    se.write_struct((4,), 'B')
    assert se.cur_pos() == 4
    assert bytes(se.finalize()) == b'\x01\x02\x03\x04'


def test_bytes_deserializer() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03\x04\x05')
    assert de.peek_byte() == 1
    assert de.read_byte() == 1
    assert bytes(de.peek_bytes(2)) == b'\x02\x03'
    assert bytes(de.read_bytes(2)) == b'\x02\x03'
    assert de.read_struct('B') == (4,)
    assert not de.is_empty()
    assert bytes(de.read_bytes(10, exact=False)) == b'\x05'
    assert de.is_empty()
    de.finalize()


def test_bytes_deserializer_out_of_data() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    with pytest.raises(OutOfDataError):
        de.read_bytes(3)
    # nothing was consumed by the failed read
    assert bytes(de.read_bytes(2)) == b'\x01\x02'
    with pytest.raises(OutOfDataError):
        de.read_byte()
    with pytest.raises(OutOfDataError):
        de.peek_byte()


def test_finalize_with_trailing_data() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01')
    with pytest.raises(BadDataError):
        de.finalize()


def test_typed_helpers() -> None:
    from serbin.types import Int16
    se = Serializer.build_bytes_serializer()
    se.write_type_tuple((Int16, str), (Int16(5), 'x'))
    se.write_type(list[bool], [True])
    data = bytes(se.finalize())
    de = Deserializer.build_bytes_deserializer(data)
    assert de.read_type_tuple((Int16, str)) == (5, 'x')
    assert de.read_type(list[bool]) == [True]
    de.finalize()


def test_typed_helpers_length_mismatch() -> None:
    se = Serializer.build_bytes_serializer()
    with pytest.raises(TypeError):
        se.write_type_tuple((int, str), (1,))


def test_stream_serializer_partial_writes() -> None:
    stream = _PartialWriteStream(limit=3)
    se = Serializer.build_stream_serializer(stream)
    se.write_bytes(bytes(range(10)))
    se.write_byte(0xff)
    assert se.cur_pos() == 11
    assert bytes(stream.data) == bytes(range(10)) + b'\xff'


def test_stream_serializer_no_progress() -> None:
    se = Serializer.build_stream_serializer(_PartialWriteStream(limit=0))
    with pytest.raises(ChannelWriteError):
        se.write_bytes(b'\x01')


def test_stream_serializer_finalize_not_supported() -> None:
    se = Serializer.build_stream_serializer(io.BytesIO())
    with pytest.raises(TypeError):
        se.finalize()


def test_stream_deserializer_reads_in_chunks() -> None:
    data = bytes(range(40))
    stream = _ChunkCountingStream(data)
    de = StreamDeserializer(stream, chunk_size=16)
    assert bytes(de.read_bytes(40)) == data
    assert stream.read_sizes == [16, 16, 8]
    de.finalize()


def test_stream_deserializer_default_chunk_size() -> None:
    # unittests.yml sets STREAM_CHUNK_SIZE to 16
    stream = _ChunkCountingStream(bytes(40))
    de = Deserializer.build_stream_deserializer(stream)
    de.read_bytes(20)
    assert max(stream.read_sizes) == 16


def test_stream_deserializer_garbage_length() -> None:
    from serbin.codecs import ListCodec
    from serbin.codecs.scalar_codec import Int8Codec
    # a huge count with only a few bytes after it, the read fails when the data runs out
    data = struct.pack('N', 2**40) + b'\x01\x02'
    de = Deserializer.build_stream_deserializer(io.BytesIO(data), chunk_size=4)
    with pytest.raises(OutOfDataError):
        ListCodec(Int8Codec('b')).deserialize(de)


def test_stream_deserializer_peek() -> None:
    de = Deserializer.build_stream_deserializer(io.BytesIO(b'\x01\x02\x03'), chunk_size=1)
    assert bytes(de.peek_bytes(2)) == b'\x01\x02'
    assert de.read_byte() == 1
    assert bytes(de.read_all()) == b'\x02\x03'
    assert de.is_empty()
    with pytest.raises(OutOfDataError):
        de.peek_bytes(1)
    assert bytes(de.peek_bytes(1, exact=False)) == b''
    de.finalize()


def test_stream_deserializer_trailing_data() -> None:
    de = Deserializer.build_stream_deserializer(io.BytesIO(b'\x01\x02'))
    de.read_byte()
    with pytest.raises(BadDataError):
        de.finalize()


def test_stream_deserializer_invalid_chunk_size() -> None:
    with pytest.raises(ValueError):
        Deserializer.build_stream_deserializer(io.BytesIO(), chunk_size=0)
