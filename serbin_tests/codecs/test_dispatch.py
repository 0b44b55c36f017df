import struct
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple, NewType, Optional

from typing_extensions import Self, override

from serbin.codecs import Codec, DataclassCodec, SerializableCodec, make_codec
from serbin.codecs.scalar_codec import Int16Codec
from serbin.conf.settings import SerbinSettings
from serbin.serializable import Serializable
from serbin.serialization import AmbiguousTypeError, Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.adapters import CodecSourceDeserializer, CodecSourceSerializer
from serbin.types import Box, Float32, Int16, UInt8
from serbin_tests import unittest

UserId = NewType('UserId', UInt8)
Celsius = NewType('Celsius', float)


@dataclass
class Both(Serializable):
    value: int

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(UInt8, self.value)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Self:
        return cls(deserializer.read_type(UInt8))


class Tenths(float):
    pass


class TenthsCodec(Codec[Tenths]):
    """Writes a float as an Int16 number of tenths."""

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: type[Tenths], /, *, type_map: Codec.TypeMap) -> Self:
        return cls()

    @override
    def _check_value(self, value: Tenths, /, *, deep: bool) -> None:
        if not isinstance(value, float):
            raise TypeError('expected float')

    @override
    def _serialize(self, serializer: Serializer, value: Tenths, /) -> None:
        Int16Codec('h').serialize(serializer, round(value * 10))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Tenths:
        return Tenths(Int16Codec('h').deserialize(deserializer) / 10)


class Readings(Serializable):
    def __init__(self, values: list[int]) -> None:
        self.values = values

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Readings) and other.values == self.values

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(list[int], self.values)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Self:
        return cls(deserializer.read_type(list[int]))


class Forecast(Serializable):
    def __init__(self, high: Tenths, history: list[Readings]) -> None:
        self.high = high
        self.history = history

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Forecast) and (other.high, other.history) == (self.high, self.history)

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type_tuple((Tenths, list[Readings]), (self.high, self.history))

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Self:
        return cls(*deserializer.read_type_tuple((Tenths, list[Readings])))


@dataclass
class LinkedNode:
    value: int
    next: Optional[Box['LinkedNode']]


class TreeNode(NamedTuple):
    value: int
    children: list['TreeNode']


@dataclass
class Parent:
    child: 'Child'


@dataclass
class Child:
    parent: Optional[Parent]


class DispatchTestCase(unittest.TestCase):
    def test_newtype_uses_supertype(self):
        data = self._run_test(UserId, UserId(UInt8(3)))
        self.assertEqual(data, b'\x03')
        data = self._run_test(Celsius, Celsius(21.5))
        self.assertEqual(data, struct.pack('d', 21.5))

    def test_ambiguous(self):
        with self.assertRaises(AmbiguousTypeError):
            make_codec(Both)
        with self.assertRaises(AmbiguousTypeError):
            make_codec(list[Both])

    def test_ambiguity_resolved_by_explicit_entry(self):
        codec = make_codec(Both, extra_codecs_map={Both: SerializableCodec})
        self.assertEqual(codec.to_bytes(Both(7)), b'\x07')
        self.assertEqual(codec.from_bytes(b'\x07'), Both(7))
        codec = make_codec(Both, extra_codecs_map={Both: DataclassCodec})
        self.assertEqual(codec.to_bytes(Both(7)), struct.pack('i', 7))

    def test_unsupported(self):
        unsupported: list[Any] = [
            object,
            complex,
            Callable[[int], str],
            list[complex],
            dict[str, object],
            'int',
            Tenths,
        ]
        for type_ in unsupported:
            with self.assertRaises(UnsupportedTypeError):
                make_codec(type_)

    def test_unsupported_is_type_error(self):
        with self.assertRaises(TypeError):
            make_codec(complex)

    def test_extra_codec(self):
        codec = make_codec(list[Tenths], extra_codecs_map={Tenths: TenthsCodec})
        data = codec.to_bytes([Tenths(1.5), Tenths(-0.2)])
        self.assertEqual(data, unittest.size_prefix(2) + struct.pack('hh', 15, -2))
        self.assertEqual(codec.from_bytes(data), [1.5, -0.2])

    def test_custom_settings(self):
        settings = SerbinSettings(SIZE_FORMAT='B', INT_FORMAT='q', FLOAT_FORMAT='f')
        codec = make_codec(tuple[list[int], float, str], settings=settings)
        value = ([1, 2], 0.5, 'ab')
        data = codec.to_bytes(value)
        self.assertEqual(data, b'\x02' + struct.pack('2q', 1, 2) + struct.pack('f', 0.5) + b'\x02ab')
        self.assertEqual(codec.from_bytes(data), value)

    def test_custom_settings_do_not_change_sized_types(self):
        settings = SerbinSettings(INT_FORMAT='q', FLOAT_FORMAT='f')
        codec = make_codec(tuple[Int16, Float32], settings=settings)
        self.assertEqual(len(codec.to_bytes((Int16(1), Float32(1.0)))), 6)

    def test_default_codecs_are_cached(self):
        self.assertIs(make_codec(dict[str, int]), make_codec(dict[str, int]))
        settings = SerbinSettings()
        self.assertIsNot(make_codec(dict[str, int], settings=settings), make_codec(dict[str, int]))

    def test_repr(self):
        self.assertEqual(repr(make_codec(list[UInt8 | None])), "ListCodec(OptionalCodec(UInt8Codec('B')))")
        self.assertEqual(repr(make_codec(tuple[str, bytes])), 'TupleCodec(StrCodec(), BytesCodec())')

    def test_serializable_fields_use_custom_settings(self):
        settings = SerbinSettings(SIZE_FORMAT='B')
        codec = make_codec(list[Readings], settings=settings)
        value = [Readings([1]), Readings([])]
        data = codec.to_bytes(value)
        self.assertEqual(data, b'\x02' + b'\x01' + struct.pack('i', 1) + b'\x00')
        self.assertEqual(codec.from_bytes(data), value)

    def test_serializable_fields_use_extra_codecs(self):
        with self.assertRaises(UnsupportedTypeError):
            make_codec(Forecast).to_bytes(Forecast(Tenths(1.5), []))
        settings = SerbinSettings(SIZE_FORMAT='B', INT_FORMAT='h')
        codec = make_codec(Forecast, extra_codecs_map={Tenths: TenthsCodec}, settings=settings)
        value = Forecast(Tenths(21.5), [Readings([3, 4])])
        data = codec.to_bytes(value)
        self.assertEqual(data, struct.pack('h', 215) + b'\x01' + b'\x02' + struct.pack('2h', 3, 4))
        self.assertEqual(codec.from_bytes(data), value)

    def test_serializable_fields_keep_settings_under_max_bytes(self):
        settings = SerbinSettings(SIZE_FORMAT='B')
        codec = make_codec(Readings, settings=settings)
        serializer = Serializer.build_bytes_serializer()
        codec.serialize(serializer.with_max_bytes(1 + 4), Readings([7]))
        data = bytes(serializer.finalize())
        self.assertEqual(data, b'\x01' + struct.pack('i', 7))
        deserializer = Deserializer.build_bytes_deserializer(data).with_max_bytes(1 + 4)
        self.assertEqual(codec.deserialize(deserializer), Readings([7]))

    def test_self_referential_products_are_unsupported(self):
        for type_ in [LinkedNode, TreeNode, Parent, list[Child]]:
            with self.assertRaises(UnsupportedTypeError) as cm:
                make_codec(type_)
            self.assertIn('Serializable', str(cm.exception))

    def test_same_product_twice_is_not_a_cycle(self):
        codec = make_codec(tuple[Both, Both], extra_codecs_map={Both: DataclassCodec})
        self.assertEqual(codec.to_bytes((Both(1), Both(2))), struct.pack('2i', 1, 2))

    def test_adapters_forward_codec_source(self):
        codec = Int16Codec('h')
        serializer = CodecSourceSerializer(Serializer.build_bytes_serializer(), lambda type_: codec).with_max_bytes(2)
        serializer.write_type(int, 5)
        data = bytes(serializer.finalize())
        self.assertEqual(data, struct.pack('h', 5))
        deserializer = CodecSourceDeserializer(Deserializer.build_bytes_deserializer(data), lambda type_: codec)
        self.assertEqual(deserializer.with_max_bytes(2).read_type(int), 5)
