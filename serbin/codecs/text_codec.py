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

from typing import ClassVar, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec, LengthPrefixed
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.encoding.bytes import decode_bytes, encode_bytes
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT
from serbin.serialization.encoding.text import UTF8, UTF16, UTF32, WCHAR, TextEncoding, decode_text, encode_text
from serbin.utils.typing import is_subclass

B = TypeVar('B', bytes, bytearray)


class _TextCodec(LengthPrefixed, Codec[str]):
    """ Base class for strings, the code unit is given by `_encoding`.
    """

    __slots__ = ('_size_format', '_max_length')

    _is_hashable = True
    # XXX: subclasses must define this
    _encoding: ClassVar[TextEncoding]

    def __init__(self, *, size_format: str = DEFAULT_SIZE_FORMAT, max_length: int | None = None) -> None:
        self._init_length_prefix(size_format, max_length)

    @override
    @classmethod
    def _from_type(cls, type_: type[str], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, str):
            raise UnsupportedTypeError('expected str type')
        return cls(**cls._length_prefix_options(type_map))

    @override
    def _check_value(self, value: str, /, *, deep: bool) -> None:
        if not isinstance(value, str):
            raise TypeError('expected str type')

    @override
    def _serialize(self, serializer: Serializer, value: str, /) -> None:
        encode_text(serializer, value, self._encoding, size_format=self._size_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> str:
        return decode_text(deserializer, self._encoding, size_format=self._size_format, max_length=self._max_length)

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


class StrCodec(_TextCodec):
    """ Represents builtin `str` values, as 8-bit UTF-8 code units like `std::string`.
    """
    _encoding = UTF8


class U16StrCodec(_TextCodec):
    """ Represents strings of 16-bit UTF-16 code units like `std::u16string`.
    """
    _encoding = UTF16


class U32StrCodec(_TextCodec):
    """ Represents strings of 32-bit UTF-32 code units like `std::u32string`.
    """
    _encoding = UTF32


class WStrCodec(_TextCodec):
    """ Represents strings of the platform's `wchar_t` code units like `std::wstring`.
    """
    _encoding = WCHAR


class _BytesLikeCodec(LengthPrefixed, Codec[B]):
    """ Base class for byte sequences, written with a length prefix and a single write of the bytes.
    """

    __slots__ = ('_size_format', '_max_length')

    # XXX: subclasses must define these
    _bytes_class: ClassVar[type]

    def __init__(self, *, size_format: str = DEFAULT_SIZE_FORMAT, max_length: int | None = None) -> None:
        self._init_length_prefix(size_format, max_length)

    @override
    @classmethod
    def _from_type(cls, type_: type[B], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, (bytes, bytearray)):
            raise UnsupportedTypeError('expected bytes-like type')
        return cls(**cls._length_prefix_options(type_map))

    @override
    def _check_value(self, value: B, /, *, deep: bool) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError('expected bytes or bytearray')

    @override
    def _serialize(self, serializer: Serializer, value: B, /) -> None:
        encode_bytes(serializer, value, size_format=self._size_format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> B:
        data = decode_bytes(deserializer, size_format=self._size_format, max_length=self._max_length)
        return data if self._bytes_class is bytes else self._bytes_class(data)

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


class BytesCodec(_BytesLikeCodec[bytes]):
    """ Represents builtin `bytes` values.
    """
    _is_hashable = True
    _bytes_class = bytes


class BytearrayCodec(_BytesLikeCodec[bytearray]):
    """ Represents builtin `bytearray` values.
    """
    _is_hashable = False
    _bytes_class = bytearray
