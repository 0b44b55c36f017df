import struct
import sys
from typing import Any, TypeVar
from unittest import TestCase as _TestCase, main as ut_main

from structlog import get_logger

from serbin.codecs import Codec, make_codec
from serbin.serialization import Deserializer, Serializer

logger = get_logger()
main = ut_main

T = TypeVar('T')

# the exact layouts used in tests assume the most common platform
IS_LITTLE_ENDIAN_64 = sys.byteorder == 'little' and struct.calcsize('N') == 8
SIZE_BYTES = struct.calcsize('N')


def size_prefix(n: int) -> bytes:
    return struct.pack('N', n)


class TestCase(_TestCase):
    def _run_test(self, type_: type[T], value: T) -> bytes:
        """Round trip `value` through the codec of `type_` and return the encoded bytes."""
        codec = make_codec(type_)
        return self._run_test_codec(codec, value)

    def _run_test_codec(self, codec: Codec[T], value: T) -> bytes:
        data = codec.to_bytes(value)
        value2: T = codec.from_bytes(data)
        self.assertEqual(value, value2)
        self.assertEqual(type(value), type(value2))
        return data

    def _run_test_stream(self, type_: type[T], value: T, chunk_size: int = 3) -> bytes:
        """Same as `_run_test`, but reading back goes through a stream with small chunks."""
        import io
        se = Serializer.build_bytes_serializer()
        se.write_type(type_, value)
        data = bytes(se.finalize())
        de = Deserializer.build_stream_deserializer(io.BytesIO(data), chunk_size=chunk_size)
        value2: Any = de.read_type(type_)
        de.finalize()
        self.assertEqual(value, value2)
        return data
