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
An optional value is encoded with a presence flag followed by the value only when it is present.

Layout:

    [0x00] when None
    [0x01][value] when not None

>>> from serbin.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> encode_optional(se, 456, lambda s, v: encode_scalar(s, v, 'i'))
>>> encode_optional(se, None, lambda s, v: encode_scalar(s, v, 'i'))
>>> bytes(se.finalize()).hex()
'01c801000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('01c801000000'))
>>> decode_optional(de, lambda d: decode_scalar(d, 'i'))
456
>>> str(decode_optional(de, lambda d: decode_scalar(d, 'i')))
'None'
>>> de.finalize()

A present flag with a truncated payload fails on the payload read:

>>> from serbin.serialization import OutOfDataError
>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('01c801'))
>>> try:
...     decode_optional(de, lambda d: decode_scalar(d, 'i'))
... except OutOfDataError as e:
...     print(*e.args)
not enough bytes to read, needed 4 but only 2 left
"""

from typing import Optional, TypeVar

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.encoding.bool import decode_bool, encode_bool

from . import Decoder, Encoder

T = TypeVar('T')


def encode_optional(serializer: Serializer, value: Optional[T], encoder: Encoder[T]) -> None:
    if value is None:
        encode_bool(serializer, False)
    else:
        encode_bool(serializer, True)
        encoder(serializer, value)


def decode_optional(deserializer: Deserializer, decoder: Decoder[T]) -> Optional[T]:
    has_value = decode_bool(deserializer)
    if has_value:
        return decoder(deserializer)
    else:
        return None
