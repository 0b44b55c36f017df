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
from collections import deque
from collections.abc import Collection, Hashable, Iterable, Sequence, Set
from typing import Any, ClassVar, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec, LengthPrefixed
from serbin.codecs.utils import is_origin_hashable, pretty_type
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.collection import (
    decode_collection,
    decode_scalar_collection,
    encode_collection,
    encode_scalar_collection,
)
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT
from serbin.utils.typing import get_args, get_origin

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionCodec(LengthPrefixed, Codec[Collection[T]], ABC):
    """ Used as base for Codec classes that represent collections with a length prefix.

    Collections that store their items contiguously (`_contiguous = True`) write runs of scalar items with a single
    write and read them with a single read, other collections go through the items one at a time. Both ways produce
    exactly the same bytes.
    """
    __slots__ = ('_item', '_size_format', '_max_length')

    _is_hashable = False
    _item: Codec[T]
    # XXX: subclasses that keep the items in a contiguous sequence should set this
    _contiguous: ClassVar[bool] = False

    def __init__(
        self,
        item_codec: Codec[T],
        /,
        *,
        size_format: str = DEFAULT_SIZE_FORMAT,
        max_length: int | None = None,
    ) -> None:
        self._item = item_codec
        self._init_length_prefix(size_format, max_length)

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: type[Collection[T]], /, *, type_map: Codec.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        member_codec = Codec.from_type(member_type, type_map=type_map)
        return cls(member_codec, **cls._length_prefix_options(type_map))

    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Collection):
            raise UnsupportedTypeError('expected Collection type')
        args = get_args(type_)
        if len(args) != 1:
            raise UnsupportedTypeError(f'expected {pretty_type(origin_type)}[<type>]')
        return args[0]

    def _uses_bulk(self) -> bool:
        return self._contiguous and self._item.is_scalar()

    def _check_item(self, item: T) -> None:
        self._item._check_value(item, deep=True)

    @override
    def _check_value(self, value: Collection[T], /, *, deep: bool) -> None:
        if not isinstance(value, Collection) or isinstance(value, (str, bytes, bytearray)):
            raise TypeError('expected Collection type')
        if deep:
            for i in value:
                self._check_item(i)

    @override
    def _serialize(self, serializer: Serializer, value: Collection[T], /) -> None:
        if self._uses_bulk():
            fmt = self._item.scalar_format()
            assert fmt is not None
            for i in value:
                self._item._check_value(i, deep=False)
            items = value if isinstance(value, Sequence) else tuple(value)
            encode_scalar_collection(serializer, items, fmt, size_format=self._size_format)
        else:
            encode_collection(serializer, value, self._item.serialize, size_format=self._size_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Collection[T]:
        if self._uses_bulk():
            fmt = self._item.scalar_format()
            assert fmt is not None
            return decode_scalar_collection(
                deserializer,
                fmt,
                self._build_from_scalars,
                size_format=self._size_format,
                max_length=self._max_length,
            )
        return decode_collection(
            deserializer,
            self._item.deserialize,
            self._build,
            size_format=self._size_format,
            max_length=self._max_length,
        )

    def _build_from_scalars(self, raw_items: Iterable[Any]) -> Collection[T]:
        return self._build(map(self._item._from_scalar, raw_items))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._item!r})'


class ListCodec(_CollectionCodec[T]):
    """ Represents builtin `list` values.
    """

    _contiguous = True

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeCodec(_CollectionCodec[T]):
    """ Represents builtin `collections.deque` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetCodec(_CollectionCodec[H]):
    """ Represents builtin `set` values.

    Items are written in iteration order, which for sets is not deterministic across runs for every item type.
    """

    @override
    def _build(self, items: Iterable[H]) -> Set[H]:
        return set(items)

    @override
    @classmethod
    def _from_type(cls, type_: type[Collection[H]], /, *, type_map: Codec.TypeMap) -> Self:
        codec = super()._from_type(type_, type_map=type_map)
        if not codec._item.is_hashable():
            raise UnsupportedTypeError(f'{pretty_type(type_)} members do not produce hashable values')
        return codec

    @override
    @classmethod
    def _get_member_type(cls, type_: type[Collection[T]]) -> type[T]:
        member_type = super()._get_member_type(type_)
        if not is_origin_hashable(member_type):
            raise UnsupportedTypeError(f'{pretty_type(member_type)} is not hashable')
        return member_type

    @override
    def _check_item(self, item: H) -> None:
        if not isinstance(item, Hashable):
            raise TypeError('expected Hashable type')
        super()._check_item(item)


class FrozenSetCodec(SetCodec[H]):
    """ Represents builtin `frozenset` values.
    """

    # XXX: SetCodec already enforces H to be hashable, but is not itself hashable, a frozenset, however, is hashable
    _is_hashable = True

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(items)
