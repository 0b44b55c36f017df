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

from __future__ import annotations

from enum import IntEnum
from typing import Any, ClassVar, TypeVar

from typing_extensions import Self, override

from serbin.codecs.codec import Codec
from serbin.serialization import Deserializer, Serializer, UnsupportedTypeError
from serbin.serialization.encoding.scalar import (
    INTEGER_FORMATS,
    UNSIGNED_FORMATS,
    check_scalar_format,
    decode_scalar,
    encode_scalar,
    scalar_size,
)
from serbin.utils.typing import is_subclass

T = TypeVar('T')
E = TypeVar('E', bound=IntEnum)


class _ScalarCodec(Codec[T]):
    """ Base class for fixed-width values written with their native representation and no prefix.
    """

    __slots__ = ('_format',)

    _is_hashable = True
    _format: str

    def __init__(self, fmt: str) -> None:
        self._format = check_scalar_format(fmt)

    @override
    def scalar_format(self) -> str:
        return self._format

    @override
    def _from_scalar(self, raw: Any, /) -> T:
        return raw

    @override
    def _serialize(self, serializer: Serializer, value: T, /) -> None:
        encode_scalar(serializer, value, self._format)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> T:
        return self._from_scalar(decode_scalar(deserializer, self._format))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._format!r})'


class _IntCodec(_ScalarCodec[int]):
    """ Base class for integers, the range is given by the format.
    """

    __slots__ = ('_lower_bound', '_upper_bound')

    # XXX: subclasses must either define this or override _from_type
    _fixed_format: ClassVar[str]

    def __init__(self, fmt: str) -> None:
        super().__init__(fmt)
        if self._format not in INTEGER_FORMATS:
            raise ValueError(f'{fmt!r} is not an integer format')
        bits = scalar_size(self._format) * 8
        if self._format in UNSIGNED_FORMATS:
            self._lower_bound = 0
            self._upper_bound = 2**bits - 1
        else:
            self._lower_bound = -(2**(bits - 1))
            self._upper_bound = 2**(bits - 1) - 1

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, int):
            raise UnsupportedTypeError('expected int type')
        return cls(cls._fixed_format)

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        # XXX: bool is a subclass of int, but it would decode back as a plain int
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError('expected integer')
        if value > self._upper_bound:
            raise ValueError(f'{value} is above the upper bound {self._upper_bound}')
        if value < self._lower_bound:
            raise ValueError(f'{value} is below the lower bound {self._lower_bound}')


class IntCodec(_IntCodec):
    """ Represents builtin `int` values, the width is taken from the `INT_FORMAT` setting.
    """

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, int):
            raise UnsupportedTypeError('expected int type')
        return cls(type_map.settings.INT_FORMAT)


class Int8Codec(_IntCodec):
    _fixed_format = 'b'


class Int16Codec(_IntCodec):
    _fixed_format = 'h'


class Int32Codec(_IntCodec):
    _fixed_format = 'i'


class Int64Codec(_IntCodec):
    _fixed_format = 'q'


class UInt8Codec(_IntCodec):
    _fixed_format = 'B'


class UInt16Codec(_IntCodec):
    _fixed_format = 'H'


class UInt32Codec(_IntCodec):
    _fixed_format = 'I'


class UInt64Codec(_IntCodec):
    _fixed_format = 'Q'


class SizeCodec(_IntCodec):
    """ Represents the platform's `size_t`.
    """
    _fixed_format = 'N'


class _FloatCodec(_ScalarCodec[float]):
    # XXX: subclasses must either define this or override _from_type
    _fixed_format: ClassVar[str]

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, float):
            raise UnsupportedTypeError('expected float type')
        return cls(cls._fixed_format)

    @override
    def _check_value(self, value: float, /, *, deep: bool) -> None:
        # XXX: int is accepted like an implicit conversion in C would
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise TypeError('expected float')


class FloatCodec(_FloatCodec):
    """ Represents builtin `float` values, the width is taken from the `FLOAT_FORMAT` setting.
    """

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, float):
            raise UnsupportedTypeError('expected float type')
        return cls(type_map.settings.FLOAT_FORMAT)


class Float32Codec(_FloatCodec):
    _fixed_format = 'f'


class Float64Codec(_FloatCodec):
    _fixed_format = 'd'


class BoolCodec(_ScalarCodec[bool]):
    """ Represents builtin `bool` values, written as one byte, any nonzero byte is read as `True`.
    """

    @override
    @classmethod
    def _from_type(cls, type_: type[bool], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, bool):
            raise UnsupportedTypeError('expected bool type')
        return cls('?')

    @override
    def _check_value(self, value: bool, /, *, deep: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError('expected boolean')


class IntEnumCodec(_IntCodec):
    """ Represents `IntEnum` members, written as their integer value using the `ENUM_FORMAT` setting.

    Reading a value that is not a member of the enum raises a `ValueError`.
    """

    __slots__ = ('_enum_class',)

    _enum_class: type[IntEnum]

    def __init__(self, enum_class: type[IntEnum], fmt: str) -> None:
        super().__init__(fmt)
        self._enum_class = enum_class
        for member in enum_class:
            super()._check_value(member, deep=False)

    @override
    @classmethod
    def _from_type(cls, type_: type[IntEnum], /, *, type_map: Codec.TypeMap) -> Self:
        if not is_subclass(type_, IntEnum):
            raise UnsupportedTypeError('expected IntEnum type')
        return cls(type_, type_map.settings.ENUM_FORMAT)

    @override
    def _from_scalar(self, raw: Any, /) -> Any:
        return self._enum_class(raw)

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        if not isinstance(value, self._enum_class):
            raise TypeError(f'expected {self._enum_class.__name__} member')

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._enum_class.__name__}, {self._format!r})'
