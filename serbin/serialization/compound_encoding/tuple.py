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
In Python a tuple type can be used in annotations in 2 different ways:

1. `tuple[A, B, C]`: known fixed length and heterogeneous types
2. `tuple[X, ...]`: variable length and homogeneous type

This module only implements encoding of the first case, the second case can be encoded using the collection encoder.

There actually isn't a "format" per-se, the encoding of `tuple[A, B, C]` is just the encoding of A concatenated with B
concatenated with C, no separators and no length. The same applies to any product type with a fixed number of fields.

>>> from serbin.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> from serbin.serialization.encoding.bool import encode_bool, decode_bool
>>> se = Serializer.build_bytes_serializer()
>>> values = (67.0, False, 800009)
>>> encoders = (lambda s, v: encode_scalar(s, v, 'f'), encode_bool, lambda s, v: encode_scalar(s, v, 'q'))
>>> encode_tuple(se, values, encoders)
>>> bytes(se.finalize()).hex()
'000086420009350c0000000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('000086420009350c0000000000'))
>>> decode_tuple(de, (lambda d: decode_scalar(d, 'f'), decode_bool, lambda d: decode_scalar(d, 'q')))
(67.0, False, 800009)
>>> de.finalize()
"""

from typing import Any

from typing_extensions import TypeVarTuple, Unpack

from serbin.serialization import Deserializer, Serializer

from . import Decoder, Encoder

Ts = TypeVarTuple('Ts')


def encode_tuple(serializer: Serializer, values: tuple[Unpack[Ts]], encoders: tuple[Encoder[Any], ...]) -> None:
    if len(values) != len(encoders):
        raise TypeError(f'expected {len(encoders)} items, got {len(values)}')
    for value, encoder in zip(values, encoders):  # type: ignore
        encoder(serializer, value)


def decode_tuple(deserializer: Deserializer, decoders: tuple[Decoder[Any], ...]) -> tuple[Unpack[Ts]]:
    return tuple(decoder(deserializer) for decoder in decoders)
