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
This module implements encoding of fixed-width scalar values, using the native memory representation of the
equivalent C type and no prefix of any kind.

The width and kind of the value is given by a single `struct` format character, for example `'i'` for a C `int`,
`'Q'` for an `unsigned long long`, `'d'` for a `double` and `'?'` for a `bool`:

>>> se = Serializer.build_bytes_serializer()
>>> encode_scalar(se, 456, 'i')
>>> encode_scalar(se, 0.5, 'f')
>>> encode_scalar(se, True, '?')
>>> bytes(se.finalize()).hex()
'c80100000000003f01'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('c80100000000003f01'))
>>> decode_scalar(de, 'i')
456
>>> decode_scalar(de, 'f')
0.5
>>> decode_scalar(de, '?')
True
>>> de.finalize()

Values that don't fit are rejected before anything is written:

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_scalar(se, 256, 'B')
... except ValueError as e:
...     print(*e.args)
256 cannot be encoded with format 'B'
>>> se.cur_pos()
0

A run of scalars of the same kind is encoded with a single write, and it is byte-for-byte identical to encoding each
value separately:

>>> se = Serializer.build_bytes_serializer()
>>> encode_scalar_run(se, [1, 2, 3], 'h')
>>> bytes(se.finalize()).hex()
'010002000300'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('010002000300'))
>>> decode_scalar_run(de, 3, 'h')
(1, 2, 3)
>>> de.finalize()
"""

import struct
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from serbin.serialization import Deserializer, Serializer

# XXX: these are the only struct characters that describe a single fixed-width scalar
SCALAR_FORMATS = frozenset('?bBhHiIlLqQnNefd')
INTEGER_FORMATS = frozenset('bBhHiIlLqQnN')
UNSIGNED_FORMATS = frozenset('BHILQN')
FLOAT_FORMATS = frozenset('efd')


def check_scalar_format(fmt: str) -> str:
    """ Validate that `fmt` is a single scalar format character and return it.

    >>> check_scalar_format('Q')
    'Q'
    >>> try:
    ...     check_scalar_format('2i')
    ... except ValueError as e:
    ...     print(*e.args)
    '2i' is not a scalar format
    """
    if len(fmt) != 1 or fmt not in SCALAR_FORMATS:
        raise ValueError(f'{fmt!r} is not a scalar format')
    return fmt


@lru_cache(maxsize=None)
def get_scalar_struct(fmt: str) -> struct.Struct:
    """ Cached native `struct.Struct` for a single scalar format character.

    >>> get_scalar_struct('N').size
    8
    """
    return struct.Struct('@' + check_scalar_format(fmt))


def scalar_size(fmt: str) -> int:
    """ Size in bytes of a scalar encoded with the given format character.

    >>> scalar_size('i'), scalar_size('d'), scalar_size('?')
    (4, 8, 1)
    """
    return get_scalar_struct(fmt).size


def encode_scalar(serializer: Serializer, value: Any, fmt: str) -> None:
    """ Encodes a single scalar using its native representation.

    This modules's docstring has more details and examples.
    """
    try:
        data = get_scalar_struct(fmt).pack(value)
    except (struct.error, OverflowError) as e:
        raise ValueError(f'{value!r} cannot be encoded with format {fmt!r}') from e
    serializer.write_bytes(data)


def decode_scalar(deserializer: Deserializer, fmt: str) -> Any:
    """ Decodes a single scalar from its native representation.

    This modules's docstring has more details and examples.
    """
    scalar_struct = get_scalar_struct(fmt)
    data = deserializer.read_bytes(scalar_struct.size)
    value, = scalar_struct.unpack(data)
    return value


def encode_scalar_run(serializer: Serializer, values: Sequence[Any], fmt: str) -> None:
    """ Encodes a contiguous run of scalars of the same kind with a single write.

    An empty run writes nothing.
    """
    check_scalar_format(fmt)
    if not values:
        return
    try:
        data = struct.pack(f'@{len(values)}{fmt}', *values)
    except (struct.error, OverflowError) as e:
        raise ValueError(f'values cannot be encoded with format {fmt!r}: {e}') from e
    serializer.write_bytes(data)


def decode_scalar_run(deserializer: Deserializer, count: int, fmt: str) -> tuple[Any, ...]:
    """ Decodes `count` scalars of the same kind with a single read.

    When `count` is zero nothing is read.
    """
    if count < 0:
        raise ValueError('count cannot be negative')
    if count == 0:
        return ()
    data = deserializer.read_bytes(count * scalar_size(fmt))
    return struct.unpack(f'@{count}{check_scalar_format(fmt)}', data)
