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
This modules implements encoding of byte sequences by prefixing them with their length.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test')
>>> bytes(se.finalize()).hex()
'040000000000000074657374'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('040000000000000074657374'))
>>> decode_bytes(de)
b'test'
>>> de.finalize()

An empty sequence is only the prefix:

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'')
>>> bytes(se.finalize()).hex()
'0000000000000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('040000000000000074657374666f6f'))
>>> _ = decode_bytes(de)
>>> try:
...     de.finalize()
... except BadDataError as e:
...     print(*e.args)
trailing data

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0400000000000000746573'))
>>> try:
...     decode_bytes(de)
... except OutOfDataError as e:
...     print(*e.args)
not enough bytes to read, needed 4 but only 3 left
"""

from serbin.serialization import BadDataError, Deserializer, OutOfDataError, Serializer  # noqa: F401
from serbin.serialization.types import Buffer

from .size import DEFAULT_SIZE_FORMAT, decode_size, encode_size


def encode_bytes(serializer: Serializer, data: Buffer, *, size_format: str = DEFAULT_SIZE_FORMAT) -> None:
    """ Encodes a byte-sequence adding a length prefix.

    This modules's docstring has more details and examples.
    """
    view = memoryview(data).cast('B')
    encode_size(serializer, len(view), fmt=size_format)
    serializer.write_bytes(view)


def decode_bytes(
    deserializer: Deserializer,
    *,
    size_format: str = DEFAULT_SIZE_FORMAT,
    max_length: int | None = None,
) -> bytes:
    """ Decodes a byte-sequence with a length prefix.

    This modules's docstring has more details and examples.
    """
    size = decode_size(deserializer, fmt=size_format, max_length=max_length)
    return bytes(deserializer.read_bytes(size))
