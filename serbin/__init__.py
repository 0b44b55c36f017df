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

"""
Native binary encoding of Python values driven by their type annotations.

The layout of a value is decided only by its annotation: scalars are written as their raw native bytes, sequences, sets
and mappings are prefixed by their length, optionals and pointers by a single presence byte. Nothing else is written,
so the same annotation must be used on both sides.

>>> data = to_bytes(dict[str, bool], {'a': True})
>>> from_bytes(dict[str, bool], data)
{'a': True}
"""

from typing import TypeVar

from serbin.codecs import Codec, make_codec
from serbin.file import open_reader, open_writer
from serbin.serializable import Serializable
from serbin.serialization import (
    AmbiguousTypeError,
    BadDataError,
    ChannelWriteError,
    Deserializer,
    OutOfDataError,
    SerializationError,
    Serializer,
    TooLongError,
    UnsupportedTypeError,
)
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
from serbin.version import __version__

__all__ = [
    '__version__',
    'AmbiguousTypeError',
    'BadDataError',
    'Box',
    'ChannelWriteError',
    'Codec',
    'Deserializer',
    'FixedArray',
    'Float32',
    'Float64',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'OutOfDataError',
    'Serializable',
    'SerializationError',
    'Serializer',
    'Shared',
    'Size',
    'TooLongError',
    'U16Str',
    'U32Str',
    'UInt8',
    'UInt16',
    'UInt32',
    'UInt64',
    'UnsupportedTypeError',
    'WStr',
    'decode',
    'encode',
    'from_bytes',
    'make_codec',
    'open_reader',
    'open_writer',
    'to_bytes',
]

T = TypeVar('T')


def encode(serializer: Serializer, type_: type[T], value: T) -> None:
    """ Write `value` to the serializer with the layout of the given annotation.
    """
    make_codec(type_).serialize(serializer, value)


def decode(deserializer: Deserializer, type_: type[T], *, max_bytes: int | None = None) -> T:
    """ Read a value with the layout of the given annotation.

    When `max_bytes` is given, reading more than that many bytes raises `MaxBytesExceededError` instead of continuing.
    """
    return make_codec(type_).deserialize(deserializer.with_optional_max_bytes(max_bytes))


def to_bytes(type_: type[T], value: T) -> bytes:
    return make_codec(type_).to_bytes(value)


def from_bytes(type_: type[T], data: bytes) -> T:
    """ Parse a value from `data`, all of it must be consumed, otherwise `BadDataError` is raised.
    """
    return make_codec(type_).from_bytes(data)
