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

from collections.abc import Sequence
from typing import Any, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.array import (
    decode_array,
    decode_scalar_array,
    encode_array,
    encode_scalar_array,
)
from serbin.types import FixedArray
from serbin.utils.typing import get_args, get_origin, is_subclass

T = TypeVar('T')


class FixedArrayCodec(Codec[tuple]):
    """ Represents `FixedArray[T, N]`: exactly N items of type T and no length prefix, decoded as a `tuple`.

    Runs of scalar items are written with a single write and read with a single read.
    """

    __slots__ = ('_is_hashable', '_item', '_length')

    _item: Codec[Any]
    _length: int

    def __init__(self, item_codec: Codec[Any], length: int) -> None:
        if length < 0:
            raise ValueError('length cannot be negative')
        self._item = item_codec
        self._length = length
        self._is_hashable = item_codec.is_hashable()

    @override
    @classmethod
    def _from_type(cls, type_: type[tuple], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(get_origin(type_) or type_, FixedArray):
            raise UnsupportedTypeError('expected FixedArray type')
        args = get_args(type_)
        if len(args) != 2:
            raise UnsupportedTypeError('expected FixedArray[<type>, <length>]')
        item_type, length = args
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise UnsupportedTypeError(f'FixedArray length must be a non-negative int, got {length!r}')
        return cls(Codec.from_type(item_type, type_map=type_map), length)

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
            raise TypeError('expected a sequence')
        if len(value) != self._length:
            raise ValueError(f'expected exactly {self._length} items, got {len(value)}')
        if deep:
            for i in value:
                self._item._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: tuple, /) -> None:
        fmt = self._item.scalar_format()
        if fmt is not None:
            for i in value:
                self._item._check_value(i, deep=False)
            encode_scalar_array(serializer, value, fmt, length=self._length)
        else:
            encode_array(serializer, value, self._item.serialize, length=self._length)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> tuple:
        fmt = self._item.scalar_format()
        if fmt is not None:
            return decode_scalar_array(
                deserializer,
                fmt,
                lambda raw_items: tuple(map(self._item._from_scalar, raw_items)),
                length=self._length,
            )
        return decode_array(deserializer, self._item.deserialize, tuple, length=self._length)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._item!r}, {self._length})'
