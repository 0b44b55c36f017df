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
from typing import Any, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.serializable import Serializable
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.adapters import CodecSourceDeserializer, CodecSourceSerializer
from serbin.utils.typing import is_subclass

S = TypeVar('S', bound=Serializable)


class SerializableCodec(Codec[S]):
    """ Represents instances of user classes derived from `Serializable`, which define their own layout.

    The type map this codec was built with is kept, `write_type` and `read_type` calls made by the class use it, so
    its fields follow the same settings and extra codecs as the annotation that contains it. The codecs for those
    fields are built on first use and kept.
    """

    __slots__ = ('_is_hashable', '_class', '_type_map', '_field_codecs')

    _class: type[S]
    _type_map: Codec.TypeMap
    _field_codecs: dict[Any, Codec]

    def __init__(self, class_: type[S], type_map: Codec.TypeMap) -> None:
        self._class = class_
        self._type_map = type_map
        self._field_codecs = {}
        self._is_hashable = issubclass(class_, Hashable)

    @override
    @classmethod
    def _from_type(cls, type_: type[S], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, Serializable):
            raise UnsupportedTypeError('expected a Serializable subclass')
        return cls(type_, type_map)

    def _get_field_codec(self, type_: Any) -> Codec:
        try:
            return self._field_codecs[type_]
        except KeyError:
            codec = self._field_codecs[type_] = Codec.from_type(type_, type_map=self._type_map)
            return codec
        except TypeError:
            # unhashable annotation
            return Codec.from_type(type_, type_map=self._type_map)

    @override
    def _check_value(self, value: S, /, *, deep: bool) -> None:
        if not isinstance(value, self._class):
            raise TypeError(f'expected {self._class.__name__} instance')

    @override
    def _serialize(self, serializer: Serializer, value: S, /) -> None:
        value.serialize(CodecSourceSerializer(serializer, self._get_field_codec))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> S:
        return self._class.deserialize(CodecSourceDeserializer(deserializer, self._get_field_codec))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._class.__name__})'
