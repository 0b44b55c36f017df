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

from collections.abc import Hashable
from dataclasses import fields, is_dataclass
from typing import TYPE_CHECKING, Any, TypeVar, get_type_hints

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.codecs.utils import building_product_type
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

D = TypeVar('D', bound='DataclassInstance')


class DataclassCodec(Codec[D]):
    """ Represents dataclass instances, the fields are written in declaration order like a product.

    Field annotations are resolved with `typing.get_type_hints`, so dataclasses defined with
    `from __future__ import annotations` are supported. Fields with `init=False` are written too, and are set
    directly on the new instance when decoding.
    """

    __slots__ = ('_is_hashable', '_fields', '_class')

    _fields: dict[str, tuple[Codec, bool]]
    _class: type[D]

    def __init__(self, fields_: dict[str, tuple[Codec, bool]], class_: type[D]) -> None:
        self._fields = fields_
        self._class = class_
        self._is_hashable = issubclass(class_, Hashable)

    @override
    @classmethod
    def _from_type(cls, type_: type[D], /, *, type_map: Codec.TypeMap) -> Self:
        if not isinstance(type_, type) or not is_dataclass(type_):
            raise UnsupportedTypeError('expected a dataclass')
        hints = get_type_hints(type_)
        # XXX: the order is important, `fields` returns them in declaration order and `dict` keeps it
        values: dict[str, tuple[Codec, bool]] = {}
        with building_product_type(type_):
            for field in fields(type_):
                values[field.name] = (Codec.from_type(hints[field.name], type_map=type_map), field.init)
        return cls(values, type_)

    @override
    def _check_value(self, value: D, /, *, deep: bool) -> None:
        if not isinstance(value, self._class):
            raise TypeError(f'expected {self._class.__name__} instance')
        if deep:
            for field_name, (field_codec, _init) in self._fields.items():
                field_codec._check_value(getattr(value, field_name), deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: D, /) -> None:
        for field_name, (field_codec, _init) in self._fields.items():
            field_codec.serialize(serializer, getattr(value, field_name))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> D:
        kwargs: dict[str, Any] = {}
        no_init: dict[str, Any] = {}
        for field_name, (field_codec, init) in self._fields.items():
            target = kwargs if init else no_init
            target[field_name] = field_codec.deserialize(deserializer)
        instance = self._class(**kwargs)
        for field_name, field_value in no_init.items():
            # XXX: object.__setattr__ also works on frozen dataclasses
            object.__setattr__(instance, field_name, field_value)
        return instance

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._class.__name__})'
