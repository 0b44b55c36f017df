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

r"""
This module implements string encoding with a length prefix, for strings of 8, 16 and 32-bit code units.

The length prefix counts code units, not bytes and not characters, and the code units are written in the native byte
order without a BOM. This matches the in-memory layout of `std::string`, `std::u16string` and `std::u32string`.

>>> se = Serializer.build_bytes_serializer()
>>> encode_text(se, 'π', UTF8)
>>> bytes(se.finalize()).hex()
'0200000000000000cf80'

>>> se = Serializer.build_bytes_serializer()
>>> encode_text(se, 'π', UTF16)
>>> bytes(se.finalize()).hex()
'0100000000000000c003'

A character outside the BMP takes 2 code units in UTF-16 but only 1 in UTF-32:

>>> se = Serializer.build_bytes_serializer()
>>> encode_text(se, '😎', UTF16)
>>> bytes(se.finalize()).hex()
'02000000000000003dd80ede'

>>> se = Serializer.build_bytes_serializer()
>>> encode_text(se, '😎', UTF32)
>>> bytes(se.finalize()).hex()
'01000000000000000ef60100'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('02000000000000003dd80ede'))
>>> decode_text(de, UTF16)
'😎'
>>> de.finalize()
"""

import sys
from typing import NamedTuple

from serbin.serialization import Deserializer, Serializer

from .size import DEFAULT_SIZE_FORMAT, decode_size, encode_size


class TextEncoding(NamedTuple):
    # name of the Python codec, must not produce a BOM
    codec: str
    # size in bytes of each code unit
    unit_size: int


UTF8 = TextEncoding('utf-8', 1)
UTF16 = TextEncoding(f'utf-16-{"le" if sys.byteorder == "little" else "be"}', 2)
UTF32 = TextEncoding(f'utf-32-{"le" if sys.byteorder == "little" else "be"}', 4)

# XXX: `wchar_t` is 16 bits on Windows and 32 bits everywhere else
WCHAR = UTF16 if sys.platform == 'win32' else UTF32


def encode_text(
    serializer: Serializer,
    value: str,
    encoding: TextEncoding,
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
) -> None:
    """ Encodes a string as a length prefix (in code units) followed by the code units.

    This modules's docstring has more details and examples.
    """
    assert isinstance(value, str)
    data = value.encode(encoding.codec)
    encode_size(serializer, len(data) // encoding.unit_size, fmt=size_format)
    serializer.write_bytes(data)


def decode_text(
    deserializer: Deserializer,
    encoding: TextEncoding,
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
    max_length: int | None = None,
) -> str:
    """ Decodes a string with a length prefix counted in code units.

    This modules's docstring has more details and examples.
    """
    units = decode_size(deserializer, fmt=size_format, max_length=max_length)
    data = deserializer.read_bytes(units * encoding.unit_size)
    return bytes(data).decode(encoding.codec)
