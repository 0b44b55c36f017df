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
Encoding a mapping is equivalent to encoding a collection of 2-tuples.

Layout: [N: size_t][key_0][value_0]...[key_N-1][value_N-1]

>>> from serbin.serialization.encoding.text import UTF8, encode_text, decode_text
>>> from serbin.serialization.encoding.bool import encode_bool, decode_bool
>>> se = Serializer.build_bytes_serializer()
>>> value = {'foo': False, 'bar': True}
>>> encode_mapping(se, value, lambda s, v: encode_text(s, v, UTF8), encode_bool)
>>> bytes(se.finalize()).hex()
'02000000000000000300000000000000666f6f00030000000000000062617201'

Breakdown of the result:

    0200000000000000: 2, the total length
    0300000000000000666f6f: 'foo' with length prefix
    00: False
    0300000000000000626172: 'bar' with length prefix
    01: True

>>> de = Deserializer.build_bytes_deserializer(
...     bytes.fromhex('02000000000000000300000000000000666f6f00030000000000000062617201')
... )
>>> decode_mapping(de, lambda d: decode_text(d, UTF8), decode_bool, dict)
{'foo': False, 'bar': True}
>>> de.finalize()

Items are passed to the builder in the order they were read, so what happens with a repeated key is up to the
builder, a `dict` keeps the last value.
"""

from collections.abc import Iterable, Mapping
from typing import Callable, TypeVar

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT, decode_size, encode_size

from . import Decoder, Encoder

KT = TypeVar('KT')
VT = TypeVar('VT')
R = TypeVar('R', bound=Mapping)


def encode_mapping(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
) -> None:
    encode_size(serializer, len(values_mapping), fmt=size_format)
    for key, value in values_mapping.items():
        key_encoder(serializer, key)
        value_encoder(serializer, value)


def decode_mapping(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    mapping_builder: Callable[[Iterable[tuple[KT, VT]]], R],
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
    max_length: int | None = None,
) -> R:
    size = decode_size(deserializer, fmt=size_format, max_length=max_length)
    return mapping_builder(
        (key_decoder(deserializer), value_decoder(deserializer))
        for _ in range(size)
    )
