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
A fixed-size array has its length known beforehand by both sides, so unlike a collection no length is written.

Layout: [value_0]...[value_N-1]

>>> from serbin.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> encode_array(se, (7, 8), lambda s, v: encode_scalar(s, v, 'h'), length=2)
>>> bytes(se.finalize()).hex()
'07000800'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('07000800'))
>>> decode_array(de, lambda d: decode_scalar(d, 'h'), tuple, length=2)
(7, 8)
>>> de.finalize()

The length of the value must match exactly:

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_scalar_array(se, (1, 2, 3), 'h', length=2)
... except ValueError as e:
...     print(*e.args)
expected exactly 2 items, got 3

An array of length zero writes and reads nothing:

>>> se = Serializer.build_bytes_serializer()
>>> encode_scalar_array(se, (), 'h', length=0)
>>> bytes(se.finalize())
b''
"""

from collections.abc import Collection, Iterable, Sequence
from typing import Any, Callable, TypeVar

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.encoding.scalar import decode_scalar_run, encode_scalar_run

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def _check_length(values: Collection[Any], length: int) -> None:
    if len(values) != length:
        raise ValueError(f'expected exactly {length} items, got {len(values)}')


def encode_array(serializer: Serializer, values: Collection[T], encoder: Encoder[T], *, length: int) -> None:
    _check_length(values, length)
    for value in values:
        encoder(serializer, value)


def decode_array(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
    *,
    length: int,
) -> R:
    return builder(decoder(deserializer) for _ in range(length))


def encode_scalar_array(serializer: Serializer, values: Sequence[Any], fmt: str, *, length: int) -> None:
    _check_length(values, length)
    encode_scalar_run(serializer, values, fmt)


def decode_scalar_array(
    deserializer: Deserializer,
    fmt: str,
    builder: Callable[[Iterable[Any]], R],
    *,
    length: int,
) -> R:
    return builder(decode_scalar_run(deserializer, length, fmt))
