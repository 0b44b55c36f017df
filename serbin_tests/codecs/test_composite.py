from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

import pytest

from serbin.codecs import make_codec
from serbin.serializable import Serializable
from serbin.serialization import Deserializer, OutOfDataError, Serializer, UnsupportedTypeError
from serbin.types import Box, Float32, Float64, Int32, Int64, Shared, UInt8
from serbin_tests import unittest
from serbin_tests.unittest import IS_LITTLE_ENDIAN_64, size_prefix


class Point(NamedTuple):
    x: Int32
    y: Int32
    label: str


@dataclass
class Account:
    name: str
    balance: Int64
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Version:
    major: UInt8
    minor: UInt8
    text: str = field(init=False, default='')

    def __post_init__(self) -> None:
        object.__setattr__(self, 'text', f'{self.major}.{self.minor}')


class Sample(Serializable):
    """Keeps a few values of different widths behind a pointer."""

    __slots__ = ('values',)

    def __init__(self, values: Optional[Box[tuple[Float32, Float64, Int64]]]) -> None:
        self.values = values

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Sample) and self.values == other.values

    __hash__ = None  # type: ignore[assignment]

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(Box[tuple[Float32, Float64, Int64]], self.values)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Sample:
        return cls(deserializer.read_type(Box[tuple[Float32, Float64, Int64]]))


class OptionalCodecTestCase(unittest.TestCase):
    def test_optional(self):
        self.assertEqual(self._run_test(Optional[str], None), b'\x00')
        self.assertEqual(self._run_test(str | None, ''), b'\x01' + size_prefix(0))
        self._run_test(None | Int32, Int32(7))

    def test_any_nonzero_flag_is_present(self):
        self.assertEqual(make_codec(UInt8 | None).from_bytes(b'\x07\x05'), 5)

    def test_absent_reads_nothing_else(self):
        de = Deserializer.build_bytes_deserializer(b'\x00\x2a')
        self.assertIsNone(make_codec(Optional[list[int]]).deserialize(de))
        self.assertEqual(de.read_byte(), 0x2a)
        de.finalize()

    def test_nested_optional_in_collections(self):
        self._run_test(list[Optional[str]], ['a', None, ''])
        self._run_test(dict[str, int | None], {'a': None, 'b': 2})

    def test_union_without_none(self):
        with self.assertRaises(UnsupportedTypeError):
            make_codec(int | str)
        with self.assertRaises(UnsupportedTypeError):
            make_codec(int | str | None)


class PointerCodecTestCase(unittest.TestCase):
    def test_box(self):
        self.assertEqual(self._run_test(Box[int], Box(5)), b'\x01' + struct.pack('i', 5))
        self.assertEqual(self._run_test(Box[int], None), b'\x00')

    def test_shared(self):
        self._run_test(Shared[list[str]], Shared(['a']))
        self._run_test(Shared[list[str]], None)

    def test_decode_makes_new_handles(self):
        codec = make_codec(Box[list[int]])
        value = Box([1, 2])
        value2 = codec.from_bytes(codec.to_bytes(value))
        self.assertEqual(value, value2)
        self.assertIsNot(value, value2)
        self.assertIsNot(value.value, value2.value)

    def test_box_holding_none(self):
        data = self._run_test(Box[Optional[int]], Box(None))
        self.assertEqual(data, b'\x01\x00')

    def test_wrong_handle(self):
        with self.assertRaises(TypeError):
            make_codec(Box[int]).to_bytes(Shared(1))  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            make_codec(Box[int]).to_bytes(1)  # type: ignore[arg-type]

    def test_needs_argument(self):
        with self.assertRaises(UnsupportedTypeError):
            make_codec(Box)

    def test_not_hashable(self):
        with self.assertRaises(UnsupportedTypeError):
            make_codec(set[Box[int]])


class ProductCodecTestCase(unittest.TestCase):
    def test_tuple(self):
        data = self._run_test(tuple[Int32, bool, str], (Int32(1), True, 'a'))
        # no length prefix and no separators
        self.assertEqual(data, struct.pack('i', 1) + b'\x01' + size_prefix(1) + b'a')

    def test_empty_tuple(self):
        self.assertEqual(self._run_test(tuple[()], ()), b'')

    def test_tuple_wrong_size(self):
        with self.assertRaises(TypeError):
            make_codec(tuple[int, int]).to_bytes((1, 2, 3))

    def test_bare_tuple(self):
        with self.assertRaises(UnsupportedTypeError):
            make_codec(tuple)
        with self.assertRaises(UnsupportedTypeError):
            make_codec(tuple[int, str, ...])  # type: ignore[misc]

    def test_namedtuple(self):
        self._run_test(Point, Point(Int32(1), Int32(-1), 'origin'))
        self._run_test(list[Point], [Point(Int32(0), Int32(0), '')])
        self._run_test(dict[Point, bool], {Point(Int32(1), Int32(2), 'x'): True})

    def test_dataclass(self):
        self._run_test(Account, Account('alice', Int64(10), ['a', 'b']))
        self._run_test(Optional[Account], None)

    def test_dataclass_field_without_init(self):
        value = Version(UInt8(1), UInt8(2))
        data = self._run_test(Version, value)
        self.assertEqual(data[:2], b'\x01\x02')
        self.assertEqual(make_codec(Version).from_bytes(data).text, '1.2')

    def test_dataclass_hashability(self):
        # frozen dataclasses are hashable, regular ones are not
        self._run_test(set[Version], {Version(UInt8(1), UInt8(0))})
        with self.assertRaises(UnsupportedTypeError):
            make_codec(set[Account])

    def test_serializable(self):
        self._run_test(Sample, Sample(Box((Float32(1.5), Float64(2.25), Int64(-3)))))
        self._run_test(Sample, Sample(None))
        self._run_test(list[Sample], [Sample(None), Sample(Box((Float32(0), Float64(0), Int64(0))))])

    def test_serializable_layout(self):
        data = make_codec(Sample).to_bytes(Sample(Box((Float32(1.5), Float64(2.25), Int64(-3)))))
        self.assertEqual(data, b'\x01' + struct.pack('f', 1.5) + struct.pack('d', 2.25) + struct.pack('q', -3))

    def test_nested(self):
        type_ = tuple[Box[Optional[dict[str, list[Int32]]]], ...]
        value = (
            Box({'a': [Int32(1), Int32(2)], 'b': []}),
            Box(None),
            None,
        )
        self._run_test(type_, value)
        self._run_test_stream(type_, value)

    def test_short_read(self):
        codec = make_codec(tuple[Box[Optional[dict[str, list[Int32]]]], ...])
        data = codec.to_bytes((Box({'a': [Int32(1), Int32(2)]}),))
        for i in range(len(data)):
            with self.assertRaises(OutOfDataError):
                codec.from_bytes(data[:i])


@pytest.mark.skipif(not IS_LITTLE_ENDIAN_64, reason='layout of 64-bit little-endian platforms')
def test_list_of_optional_ints_layout() -> None:
    codec = make_codec(list[int | None])
    data = codec.to_bytes([None, 456, 7890])
    assert data.hex() == '0300000000000000' '00' '01c8010000' '01d21e0000'
    assert codec.from_bytes(data) == [None, 456, 7890]
