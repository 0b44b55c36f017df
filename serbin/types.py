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

"""
Types that are meant to be used in annotations given to codecs.

Python's `int`, `float` and `str` don't carry a width, these `NewType`s are used instead when a specific width is
needed. They are plain `int`/`float`/`str` at runtime:

>>> Int16(5) + 1
6

`FixedArray[T, N]` annotates a fixed-length homogeneous sequence (like a C array), it is decoded as a `tuple`:

>>> FixedArray[int, 3]
serbin.types.FixedArray[int, 3]

`Box[T]` and `Shared[T]` are handles that hold one value, `None` is used for a null handle:

>>> Box(1) == Box(1)
True
>>> Box(1) == Shared(1)
False
"""

from __future__ import annotations

from typing import Any, Generic, NewType, TypeVar

T = TypeVar('T')

Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
UInt8 = NewType('UInt8', int)
UInt16 = NewType('UInt16', int)
UInt32 = NewType('UInt32', int)
UInt64 = NewType('UInt64', int)
# the platform's size_t
Size = NewType('Size', int)

Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)

# strings of 16-bit and 32-bit code units
U16Str = NewType('U16Str', str)
U32Str = NewType('U32Str', str)
# strings of the platform's wchar_t code units
WStr = NewType('WStr', str)


class FixedArray(tuple):
    """ Only meant to be used as an annotation: `FixedArray[T, N]`, where N is a non-negative `int`.
    """

    __slots__ = ()


class Handle(Generic[T]):
    """ Base class of single value handles.

    Handles compare equal when they are of the same class and hold equal values. They are mutable, so not hashable.
    """

    __slots__ = ('value',)

    value: T

    def __init__(self, value: T) -> None:
        self.value = value

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(self.value == other.value)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.value!r})'


class Box(Handle[T]):
    """ Exclusively owned handle, the equivalent of `std::unique_ptr<T>`.
    """

    __slots__ = ()


class Shared(Handle[T]):
    """ Handle that is meant to be shared, the equivalent of `std::shared_ptr<T>`.
    """

    __slots__ = ()
