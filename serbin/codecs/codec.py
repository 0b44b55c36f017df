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
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, TypeVar, final

from typing_extensions import Self

from serbin.codecs.utils import TypeAliasMap, TypeToCodecMap, get_aliased_type, get_usable_origin_type, resolve_newtype
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError

if TYPE_CHECKING:
    from serbin.conf.settings import SerbinSettings

T = TypeVar('T')


class Codec(ABC, Generic[T]):
    """ This class is used to model a type with a known type signature and how it will be (de)serialized.

    A codec is built once from a type annotation with `Codec.from_type` and is immutable afterwards, every decision
    about the layout (which shape applies, element widths, whether runs of elements can be written in bulk, the format
    of length prefixes) is taken when it is built. Encoding and decoding values only follows those decisions.

    Nothing about the type is written, so the same annotation (and the same settings) must be used to decode what was
    encoded. Decoding with a different annotation is not detected and produces garbage or a short read.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        codecs_map: TypeToCodecMap
        settings: SerbinSettings

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    # XXX: subclasses must initialize this property
    _is_hashable: bool

    @final
    @staticmethod
    def from_type(type_: type[T], /, *, type_map: TypeMap) -> Codec[T]:
        """ Instantiate a Codec instance from a type signature using the given maps.

        A `codecs_map` associates concrete types (or the keys of structural rules) to Codec classes, while an
        `alias_map` associates types with substitute types to use instead. A `NewType` without its own entry in the
        `codecs_map` uses the codec of its supertype.
        """
        type_ = resolve_newtype(type_, type_map.codecs_map)
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        codec_class = type_map.codecs_map[usable_origin]
        aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=False)
        return codec_class._from_type(aliased_type, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: type[T], /, *, type_map: TypeMap) -> Self:
        """ Instantiate a Codec instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        decide on using `Codec.from_type`, forwarding the given `type_map` to continue instantiating Codec
        specializations, this is the case particularly for compound codecs, like OptionalCodec or DictCodec.
        """
        # XXX: a Codec that is only meant for local use does not need to implement _from_type
        raise UnsupportedTypeError(f'{cls.__name__} is not compatible with use in a Codec.TypeMap')

    @final
    def is_hashable(self) -> bool:
        """ Indicates whether the type being abstracted over is expected to be hashable.

        This is used to prevent unhashable types from being used as keys in dicts or members in sets."""
        return self._is_hashable

    @final
    def is_scalar(self) -> bool:
        """ Indicates whether values are fixed-width scalars, which can be written and read in bulk runs.
        """
        return self.scalar_format() is not None

    def scalar_format(self) -> str | None:
        """ The `struct` format character of the values, only scalar codecs return something other than `None`.
        """
        return None

    def _from_scalar(self, raw: Any, /) -> T:
        """ Convert a raw value unpacked with `scalar_format()` into a value, only used by scalar codecs.
        """
        raise TypeError(f'{type(self).__name__} is not a scalar codec')

    @final
    def check_value(self, value: T, /) -> None:
        """ Implementation should raise a TypeError or ValueError if the value is not compatible.

        A value being compatible is more than just having the correct instance, for example if the value is a dict, all
        the dict's keys and values must be checked for compatibility.
        """
        # XXX: subclasses must implement Codec._check_value, not Codec.check_value
        self._check_value(value, deep=True)

    @final
    def serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Serialize a value instance according to the signature that was abstracted.

        Serialization includes calling check_value while the value is being serialized, so calling check_value before
        calling serialize is not needed.
        """
        # XXX: subclasses must implement Codec._serialize, not Codec.serialize
        self._check_value(value, deep=False)
        self._serialize(serializer, value)

    @final
    def deserialize(self, deserializer: Deserializer, /) -> T:
        """ Deserialize a value instance according to the signature that was abstracted.
        """
        # XXX: subclasses must implement Codec._deserialize, not Codec.deserialize
        return self._deserialize(deserializer)

    @final
    def to_bytes(self, value: T, /) -> bytes:
        """ Shortcut to quickly convert a value T to `bytes`.
        """
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer, value)
        return bytes(serializer.finalize())

    @final
    def from_bytes(self, data: bytes, /) -> T:
        """ Shortcut to quickly parse a value T from `bytes`, all of the data must be consumed.
        """
        deserializer = Deserializer.build_bytes_deserializer(data)
        value = self.deserialize(deserializer)
        deserializer.finalize()
        return value

    @abstractmethod
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        """ Inner implementation of `Codec.check_value`, should raise if the given value is not valid.

        If `deep=True` then the check should recurse for compound types (like lists/maps) to check each value. It is
        expected that `deep=False` is used in a context where the recursion would be made externally (by the
        `serialize` of the inner codecs), so the same value is not checked multiple times.
        """
        raise NotImplementedError

    @abstractmethod
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        """ Inner implementation of `serialize`, you can assume that the give value has been "shallow checked".

        When implementing the serialization with compound encoders, `Codec.serialize` should be passed as an `Encoder`
        instead of `Codec._serialize`, that way the inner `_serialize` implementation will be able to assume that the
        value was checked.
        """
        raise NotImplementedError

    @abstractmethod
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        """ Inner implementation of `deserialize`.

        Byte patterns are not validated beyond what is needed to build a value, a mismatched layout is the caller's
        responsibility.
        """
        raise NotImplementedError


class LengthPrefixed:
    """ Mixin for codecs that write a length prefix, it holds the format of the prefix and the maximum length accepted
    when decoding.

    Classes using it must declare `_size_format` and `_max_length` in their `__slots__`.
    """

    __slots__ = ()

    _size_format: str
    _max_length: int | None

    def _init_length_prefix(self, size_format: str, max_length: int | None) -> None:
        self._size_format = size_format
        self._max_length = max_length

    @staticmethod
    def _length_prefix_options(type_map: Codec.TypeMap) -> dict[str, Any]:
        """ Keyword arguments for `__init__` taken from the settings in the type map."""
        settings = type_map.settings
        return dict(size_format=settings.SIZE_FORMAT, max_length=settings.MAX_COLLECTION_LENGTH)
