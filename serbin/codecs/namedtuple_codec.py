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
from typing import TypeVar, get_type_hints

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.codecs.utils import building_product_type, pretty_type
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.compound_encoding.tuple import decode_tuple, encode_tuple

N = TypeVar('N', bound=tuple)


# XXX: we can't usefully describe the tuple type
class NamedTupleCodec(Codec[N]):
    """ Represents `typing.NamedTuple` subclasses, the fields are written in declaration order like a product.
    """

    __slots__ = ('_is_hashable', '_args', '_actual_type')

    _args: tuple[Codec, ...]
    _actual_type: type[N]

    def __init__(self, namedtuple: type[N], args: Iterable[Codec]) -> None:
        self._actual_type = namedtuple
        self._args = tuple(args)
        self._is_hashable = all(arg_codec.is_hashable() for arg_codec in self._args)

    @override
    @classmethod
    def _from_type(cls, type_: type[N], /, *, type_map: Codec.TypeMap) -> Self:
        if not isinstance(type_, type) or not issubclass(type_, tuple) or not hasattr(type_, '_fields'):
            raise UnsupportedTypeError('expected NamedTuple type')
        hints = get_type_hints(type_)
        try:
            args = [hints[field_name] for field_name in type_._fields]  # type: ignore[attr-defined]
        except KeyError as e:
            raise UnsupportedTypeError(f'{pretty_type(type_)} field {e} has no annotation') from e
        with building_product_type(type_):
            return cls(type_, [Codec.from_type(arg, type_map=type_map) for arg in args])

    @override
    def _check_value(self, value: N, /, *, deep: bool) -> None:
        if not isinstance(value, tuple):
            raise TypeError('expected tuple or namedtuple')
        if len(value) != len(self._args):
            raise TypeError('wrong number of arguments')
        if deep:
            for i, arg_codec in zip(value, self._args):
                arg_codec._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: N, /) -> None:
        encode_tuple(serializer, tuple(value), tuple(i.serialize for i in self._args))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> N:
        return self._actual_type(*decode_tuple(deserializer, tuple(i.deserialize for i in self._args)))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._actual_type.__name__})'
