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

from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Hashable, Mapping
from typing import Iterable, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec, LengthPrefixed
from serbin.codecs.utils import is_origin_hashable, pretty_type
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT
from serbin.utils.typing import get_args, get_origin

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _MapCodec(LengthPrefixed, Codec[Mapping[H, T]], ABC):
    """ Base class to help implement Codec for mappings.

    Entries are written in iteration order. When decoding, entries are stored in the order they are read, so with a
    repeated key the last value wins.
    """

    __slots__ = ('_key', '_value', '_size_format', '_max_length')

    _key: Codec[H]
    _value: Codec[T]
    _is_hashable = False

    def __init__(
        self,
        key: Codec[H],
        value: Codec[T],
        *,
        size_format: str = DEFAULT_SIZE_FORMAT,
        max_length: int | None = None,
    ) -> None:
        self._key = key
        self._value = value
        self._init_length_prefix(size_format, max_length)

    @abstractmethod
    def _build(self, items: Iterable[tuple[H, T]]) -> Mapping[H, T]:
        """ How to build the concrete map from an iterable of (key, value).
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Mapping[H, T]], /, *, type_map: Codec.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Mapping):
            raise UnsupportedTypeError('expected Mapping type')
        args = get_args(type_)
        if len(args) != 2:
            raise UnsupportedTypeError(f'expected {pretty_type(origin_type)}[<key type>, <value type>]')
        key_type, value_type = args
        if not is_origin_hashable(key_type):
            raise UnsupportedTypeError(f'{pretty_type(key_type)} is not hashable')
        key_codec = Codec.from_type(key_type, type_map=type_map)
        if not key_codec.is_hashable():
            raise UnsupportedTypeError(f'{pretty_type(key_type)} does not produce hashable values')
        value_codec = Codec.from_type(value_type, type_map=type_map)
        return cls(key_codec, value_codec, **cls._length_prefix_options(type_map))

    @override
    def _check_value(self, value: Mapping[H, T], /, *, deep: bool) -> None:
        if not isinstance(value, Mapping):
            raise TypeError('expected Mapping type')
        if deep:
            for k, v in value.items():
                self._key._check_value(k, deep=True)
                self._value._check_value(v, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Mapping[H, T], /) -> None:
        encode_mapping(serializer, value, self._key.serialize, self._value.serialize, size_format=self._size_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Mapping[H, T]:
        return decode_mapping(
            deserializer,
            self._key.deserialize,
            self._value.deserialize,
            self._build,
            size_format=self._size_format,
            max_length=self._max_length,
        )

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._key!r}, {self._value!r})'


class DictCodec(_MapCodec):
    """ Represents builtin `dict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[H, T]]) -> dict[H, T]:
        return dict(items)


class OrderedDictCodec(_MapCodec):
    """ Represents `collections.OrderedDict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[H, T]]) -> OrderedDict[H, T]:
        return OrderedDict(items)
