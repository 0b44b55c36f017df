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
A collection is any value that has a known size and is iterable, like a list, a set or a deque.

Layout: [N: size_t][value_0]...[value_N-1]

>>> from serbin.serialization.encoding.text import UTF8, encode_text, decode_text
>>> se = Serializer.build_bytes_serializer()
>>> encode_collection(se, ['foo', 'π'], lambda s, v: encode_text(s, v, UTF8))
>>> bytes(se.finalize()).hex()
'02000000000000000300000000000000666f6f0200000000000000cf80'

Breakdown of the result:

    0200000000000000: 2, the total length
    0300000000000000666f6f: 'foo' (with length prefix)
    0200000000000000cf80: 'π' (with length prefix)

When decoding, the builder can be any compatible collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> data = bytes.fromhex('02000000000000000300000000000000666f6f0200000000000000cf80')
>>> de = Deserializer.build_bytes_deserializer(data)
>>> decode_collection(de, lambda d: decode_text(d, UTF8), tuple)
('foo', 'π')
>>> de.finalize()

When the items are scalars of a single kind, `encode_scalar_collection` writes all of them in a single run. The result
is exactly the same as encoding one at a time:

>>> from serbin.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> encode_scalar_collection(se, [1, 2, 3], 'i')
>>> bulk = bytes(se.finalize())
>>> se = Serializer.build_bytes_serializer()
>>> encode_collection(se, [1, 2, 3], lambda s, v: encode_scalar(s, v, 'i'))
>>> bytes(se.finalize()) == bulk
True
>>> bulk.hex()
'0300000000000000010000000200000003000000'

>>> de = Deserializer.build_bytes_deserializer(bulk)
>>> decode_scalar_collection(de, 'i', list)
[1, 2, 3]
>>> de.finalize()

An empty collection is just the length prefix, and nothing else is read when decoding it:

>>> de = Deserializer.build_bytes_deserializer(bytes(8) + b'tail')
>>> decode_collection(de, lambda d: decode_scalar(d, 'i'), list)
[]
>>> bytes(de.read_all())
b'tail'
"""

from collections.abc import Collection, Iterable, Sequence
from typing import Any, Callable, TypeVar

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.encoding.scalar import decode_scalar_run, encode_scalar_run
from serbin.serialization.encoding.size import DEFAULT_SIZE_FORMAT, decode_size, encode_size

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def encode_collection(
    serializer: Serializer,
    values: Collection[T],
    encoder: Encoder[T],
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
) -> None:
    encode_size(serializer, len(values), fmt=size_format)
    for value in values:
        encoder(serializer, value)


def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
    max_length: int | None = None,
) -> R:
    length = decode_size(deserializer, fmt=size_format, max_length=max_length)
    return builder(decoder(deserializer) for _ in range(length))


def encode_scalar_collection(
    serializer: Serializer,
    values: Sequence[Any],
    fmt: str,
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
) -> None:
    encode_size(serializer, len(values), fmt=size_format)
    encode_scalar_run(serializer, values, fmt)


def decode_scalar_collection(
    deserializer: Deserializer,
    fmt: str,
    builder: Callable[[Iterable[Any]], R],
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
    max_length: int | None = None,
) -> R:
    length = decode_size(deserializer, fmt=size_format, max_length=max_length)
    return builder(decode_scalar_run(deserializer, length, fmt))
