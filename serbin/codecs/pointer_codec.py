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

from operator import attrgetter
from typing import Any, ClassVar, Optional, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.pointer import decode_pointer, encode_pointer
from serbin.types import Box, Handle, Shared
from serbin.utils.typing import get_args, get_origin

T = TypeVar('T')

_get_handle_value = attrgetter('value')


class _PointerCodec(Codec[Optional[Handle[T]]]):
    """ Base class for handles that own a single value, `None` is the null handle.

    The layout is the same as `T | None`. Decoding always creates a new handle holding a newly decoded value.
    """

    __slots__ = ('_target',)

    _is_hashable = False
    _target: Codec[T]
    # XXX: subclasses must define this
    _handle_class: ClassVar[type[Handle[Any]]]

    def __init__(self, target: Codec[T]) -> None:
        self._target = target

    @override
    @classmethod
    def _from_type(cls, type_: type[Handle[T]], /, *, type_map: Codec.TypeMap) -> Self:
        if get_origin(type_) is not cls._handle_class:
            raise UnsupportedTypeError(f'expected {cls._handle_class.__name__}[<type>]')
        args = get_args(type_)
        if len(args) != 1:
            raise UnsupportedTypeError(f'expected {cls._handle_class.__name__}[<type>]')
        target_type, = args
        return cls(Codec.from_type(target_type, type_map=type_map))

    @override
    def _check_value(self, value: Optional[Handle[T]], /, *, deep: bool) -> None:
        if value is None:
            return
        if not isinstance(value, self._handle_class):
            raise TypeError(f'expected {self._handle_class.__name__} or None')
        if deep:
            self._target._check_value(value.value, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Optional[Handle[T]], /) -> None:
        encode_pointer(serializer, value, self._target.serialize, _get_handle_value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Optional[Handle[T]]:
        return decode_pointer(deserializer, self._target.deserialize, self._handle_class)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._target!r})'


class BoxCodec(_PointerCodec[T]):
    """ Represents `Box[T]` values, or `None`.
    """
    _handle_class = Box


class SharedCodec(_PointerCodec[T]):
    """ Represents `Shared[T]` values, or `None`.
    """
    _handle_class = Shared
