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

from collections import OrderedDict, deque
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Sequence, Set as AbstractSet
from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from types import UnionType
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, TypeVar

from structlog import get_logger

from serbin.codecs.array_codec import FixedArrayCodec
from serbin.codecs.codec import Codec
from serbin.codecs.collection_codec import DequeCodec, FrozenSetCodec, ListCodec, SetCodec
from serbin.codecs.dataclass_codec import DataclassCodec
from serbin.codecs.map_codec import DictCodec, OrderedDictCodec
from serbin.codecs.namedtuple_codec import NamedTupleCodec
from serbin.codecs.optional_codec import OptionalCodec
from serbin.codecs.pointer_codec import BoxCodec, SharedCodec
from serbin.codecs.scalar_codec import (
    BoolCodec,
    Float32Codec,
    Float64Codec,
    FloatCodec,
    Int8Codec,
    Int16Codec,
    Int32Codec,
    Int64Codec,
    IntCodec,
    IntEnumCodec,
    SizeCodec,
    UInt8Codec,
    UInt16Codec,
    UInt32Codec,
    UInt64Codec,
)
from serbin.codecs.serializable_codec import SerializableCodec
from serbin.codecs.text_codec import BytearrayCodec, BytesCodec, StrCodec, U16StrCodec, U32StrCodec, WStrCodec
from serbin.codecs.tuple_codec import TupleCodec
from serbin.codecs.utils import TypeAliasMap, TypeToCodecMap, pretty_type
from serbin.serializable import Serializable
from serbin.types import (
    Box,
    FixedArray,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Shared,
    Size,
    U16Str,
    U32Str,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    WStr,
)

if TYPE_CHECKING:
    from serbin.conf.settings import SerbinSettings

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_TO_CODEC_MAP',
    'BoolCodec',
    'BoxCodec',
    'BytearrayCodec',
    'BytesCodec',
    'Codec',
    'DataclassCodec',
    'DequeCodec',
    'DictCodec',
    'FixedArrayCodec',
    'Float32Codec',
    'Float64Codec',
    'FloatCodec',
    'FrozenSetCodec',
    'Int8Codec',
    'Int16Codec',
    'Int32Codec',
    'Int64Codec',
    'IntCodec',
    'IntEnumCodec',
    'ListCodec',
    'NamedTupleCodec',
    'OptionalCodec',
    'OrderedDictCodec',
    'SerializableCodec',
    'SetCodec',
    'SharedCodec',
    'SizeCodec',
    'StrCodec',
    'TupleCodec',
    'TypeAliasMap',
    'TypeToCodecMap',
    'U16StrCodec',
    'U32StrCodec',
    'UInt8Codec',
    'UInt16Codec',
    'UInt32Codec',
    'UInt64Codec',
    'WStrCodec',
    'get_default_type_map',
    'make_codec',
]

logger = get_logger()

T = TypeVar('T')

# abstract collection types are replaced by the concrete type that is built when decoding
DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    Sequence: list,
    MutableSequence: list,
    AbstractSet: frozenset,
    MutableSet: set,
    Mapping: dict,
    MutableMapping: dict,
}

# Mapping between types and Codec classes.
DEFAULT_TYPE_TO_CODEC_MAP: TypeToCodecMap = {
    # builtin types:
    bool: BoolCodec,
    bytearray: BytearrayCodec,
    bytes: BytesCodec,
    dict: DictCodec,
    float: FloatCodec,
    frozenset: FrozenSetCodec,
    int: IntCodec,
    list: ListCodec,
    set: SetCodec,
    str: StrCodec,
    tuple: TupleCodec,
    # other Python types:
    deque: DequeCodec,
    OrderedDict: OrderedDictCodec,
    UnionType: OptionalCodec,
    # sized types:
    Int8: Int8Codec,
    Int16: Int16Codec,
    Int32: Int32Codec,
    Int64: Int64Codec,
    UInt8: UInt8Codec,
    UInt16: UInt16Codec,
    UInt32: UInt32Codec,
    UInt64: UInt64Codec,
    Size: SizeCodec,
    Float32: Float32Codec,
    Float64: Float64Codec,
    U16Str: U16StrCodec,
    U32Str: U32StrCodec,
    WStr: WStrCodec,
    FixedArray: FixedArrayCodec,
    Box: BoxCodec,
    Shared: SharedCodec,
    # structural rules, used when there's no exact match:
    NamedTuple: NamedTupleCodec,
    dataclass: DataclassCodec,
    IntEnum: IntEnumCodec,
    Serializable: SerializableCodec,
}


@lru_cache(maxsize=None)
def get_default_type_map() -> Codec.TypeMap:
    """ The type map used by `make_codec` when no customization is given, it uses the global settings.
    """
    from serbin.conf.get_settings import get_global_settings
    return Codec.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_CODEC_MAP, get_global_settings())


@lru_cache(maxsize=None)
def _make_default_codec(type_: Any, /) -> Codec:
    codec = Codec.from_type(type_, type_map=get_default_type_map())
    logger.debug('codec built', type=pretty_type(type_), codec=repr(codec))
    return codec


def make_codec(
    type_: type[T],
    /,
    *,
    extra_codecs_map: Optional[TypeToCodecMap] = None,
    settings: Optional['SerbinSettings'] = None,
) -> Codec[T]:
    """ Like Codec.from_type, but with the default maps.

    Extra entries can be given in `extra_codecs_map`, they take precedence over the default ones, and `settings` can
    be given to use something other than the global settings. Codecs built only from the defaults are cached.

    >>> make_codec(list[int])
    ListCodec(IntCodec('i'))
    >>> make_codec(dict[str, Box[float] | None])
    DictCodec(StrCodec(), OptionalCodec(BoxCodec(FloatCodec('d'))))
    """
    if extra_codecs_map is None and settings is None:
        try:
            hash(type_)
        except TypeError:
            pass
        else:
            return _make_default_codec(type_)
    default_type_map = get_default_type_map()
    type_map = Codec.TypeMap(
        DEFAULT_TYPE_ALIAS_MAP,
        {**DEFAULT_TYPE_TO_CODEC_MAP, **(extra_codecs_map or {})},
        settings or default_type_map.settings,
    )
    return Codec.from_type(type_, type_map=type_map)
