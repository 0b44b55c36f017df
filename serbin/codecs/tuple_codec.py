# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from typing_extensions import Self, override

from serbin.codecs.codec import Codec, LengthPrefixed
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.collection import (
    decode_collection,
    decode_scalar_collection,
    encode_collection,
    encode_scalar_collection,
)
from serbin.serialization.compound_encoding.tuple import decode_tuple, encode_tuple
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT
from serbin.utils.typing import get_args, get_origin


# XXX: we can't usefully describe the tuple type
class TupleCodec(LengthPrefixed, Codec[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    - `tuple[A, B, C]` is a product: each item is written in order, with no length and no separators
    - `tuple[T, ...]` is a sequence: a length prefix followed by the items, scalar items are written in bulk
    """

    __slots__ = ('_is_hashable', '_varsize', '_args', '_size_format', '_max_length')

    _varsize: bool
    _args: tuple[Codec, ...]

    def __init__(
        self,
        args: Codec | Iterable[Codec],
        *,
        size_format: str = DEFAULT_SIZE_FORMAT,
        max_length: int | None = None,
    ) -> None:
        if isinstance(args, Codec):
            self._varsize = True
            self._args = (args,)
            self._is_hashable = args.is_hashable()
        else:
            self._varsize = False
            self._args = tuple(args)
            for arg in self._args:
                assert isinstance(arg, Codec)
            self._is_hashable = all(arg_codec.is_hashable() for arg_codec in self._args)
        self._init_length_prefix(size_format, max_length)

    @override
    @classmethod
    def _from_type(cls, type_: type[tuple], /, *, type_map: Codec.TypeMap) -> Self:
        origin_type = get_origin(type_)
        if origin_type is None:
            raise UnsupportedTypeError('expected tuple[<args...>] or tuple[<type>, ...]')
        if not issubclass(origin_type, tuple):
            raise UnsupportedTypeError('expected tuple type')
        args = get_args(type_)
        options = cls._length_prefix_options(type_map)
        if args and args[-1] is Ellipsis:
            if len(args) != 2:
                raise UnsupportedTypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(Codec.from_type(arg, type_map=type_map), **options)
        else:
            return cls((Codec.from_type(arg, type_map=type_map) for arg in args), **options)

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if not isinstance(value, (tuple, list)):
            raise TypeError('expected tuple-like')
        if not self._varsize and len(value) != len(self._args):
            raise TypeError(f'wrong tuple size, expected {len(self._args)} items, got {len(value)}')
        if deep:
            if self._varsize:
                arg_codec, = self._args
                for i in value:
                    arg_codec._check_value(i, deep=True)
            else:
                for i, arg_codec in zip(value, self._args):
                    arg_codec._check_value(i, deep=True)

    def _bulk_format(self) -> str | None:
        if not self._varsize:
            return None
        return self._args[0].scalar_format()

    @override
    def _serialize(self, serializer: Serializer, value: tuple, /) -> None:
        if not self._varsize:
            encode_tuple(serializer, tuple(value), tuple(i.serialize for i in self._args))
            return
        arg_codec, = self._args
        fmt = self._bulk_format()
        if fmt is not None:
            for i in value:
                arg_codec._check_value(i, deep=False)
            encode_scalar_collection(serializer, value, fmt, size_format=self._size_format)
        else:
            encode_collection(serializer, value, arg_codec.serialize, size_format=self._size_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> tuple:
        if not self._varsize:
            return decode_tuple(deserializer, tuple(i.deserialize for i in self._args))
        arg_codec, = self._args
        fmt = self._bulk_format()
        if fmt is not None:
            return decode_scalar_collection(
                deserializer,
                fmt,
                self._build_from_scalars,
                size_format=self._size_format,
                max_length=self._max_length,
            )
        return decode_collection(
            deserializer,
            arg_codec.deserialize,
            tuple,
            size_format=self._size_format,
            max_length=self._max_length,
        )

    def _build_from_scalars(self, raw_items: Iterable[Any]) -> tuple:
        return tuple(map(self._args[0]._from_scalar, raw_items))

    def __repr__(self) -> str:
        if self._varsize:
            return f'{type(self).__name__}({self._args[0]!r}, ...)'
        return f'{type(self).__name__}({", ".join(map(repr, self._args))})'
