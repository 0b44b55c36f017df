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
This module implements the length prefix used by variable-size values, it is simply an unsigned scalar. By default it
is the platform's `size_t` (struct format `'N'`), 8 bytes on 64-bit platforms.

>>> se = Serializer.build_bytes_serializer()
>>> encode_size(se, 3)
>>> bytes(se.finalize()).hex()
'0300000000000000'

A narrower prefix can be used, but then the same format must be used when decoding:

>>> se = Serializer.build_bytes_serializer()
>>> encode_size(se, 3, fmt='H')
>>> bytes(se.finalize()).hex()
'0300'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0300000000000000'))
>>> decode_size(de)
3
>>> de.finalize()

A maximum can be enforced when decoding, this happens before the caller gets a chance to allocate anything:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ffffffffffffff7f'))
>>> try:
...     decode_size(de, max_length=1000)
... except TooLongError as e:
...     print(*e.args)
length 9223372036854775807 is above the maximum of 1000
"""

from serbin.serialization import Deserializer, Serializer, TooLongError

from .scalar import UNSIGNED_FORMATS, decode_scalar, encode_scalar

DEFAULT_SIZE_FORMAT = 'N'


def check_size_format(fmt: str) -> str:
    if fmt not in UNSIGNED_FORMATS:
        raise ValueError(f'{fmt!r} is not an unsigned integer format')
    return fmt


def encode_size(serializer: Serializer, value: int, *, fmt: str = DEFAULT_SIZE_FORMAT) -> None:
    """ Encodes a length prefix.
    """
    if value < 0:
        raise ValueError('size cannot be negative')
    encode_scalar(serializer, value, check_size_format(fmt))


def decode_size(deserializer: Deserializer, *, fmt: str = DEFAULT_SIZE_FORMAT, max_length: int | None = None) -> int:
    """ Decodes a length prefix, optionally checking it against `max_length`.
    """
    size = decode_scalar(deserializer, check_size_format(fmt))
    if max_length is not None and size > max_length:
        raise TooLongError(f'length {size} is above the maximum of {max_length}')
    return size
