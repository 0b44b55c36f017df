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

from types import UnionType
from typing import Any, NewType, Union, get_args as _typing_get_args, get_origin as _typing_get_origin


def get_origin(t: Any, /) -> Any:
    """ Like `typing.get_origin`, but `Optional[T]` and `T | None` have the same origin: `types.UnionType`.

    >>> get_origin(list[int])
    <class 'list'>
    >>> get_origin(int) is None
    True
    >>> from typing import Optional
    >>> get_origin(Optional[int]) is get_origin(int | None) is UnionType
    True
    """
    origin = _typing_get_origin(t)
    if origin is Union:
        return UnionType
    return origin


def get_args(t: Any, /) -> tuple[Any, ...]:
    """ Counterpart of `get_origin`, same as `typing.get_args`.

    >>> get_args(dict[str, int])
    (<class 'str'>, <class 'int'>)
    >>> get_args(tuple[()])
    ()
    """
    return _typing_get_args(t)


def unwrap_newtype(t: Any, /) -> Any:
    """ Follow `NewType` supertypes until something that is not a `NewType` is reached.

    >>> A = NewType('A', int)
    >>> B = NewType('B', A)
    >>> unwrap_newtype(B)
    <class 'int'>
    >>> unwrap_newtype(list[B]) == list[B]
    True
    """
    while isinstance(t, NewType):
        t = t.__supertype__
    return t


def is_subclass(cls: Any, class_or_tuple: type | tuple[type, ...] | UnionType, /) -> bool:
    """ Reimplements issubclass() with support for recursive NewType classes and non-class arguments.

    Normal behavior from `issubclass`:

    >>> is_subclass(bool, int)
    True
    >>> is_subclass(bool, (int, str))
    True
    >>> is_subclass(str, int)
    False

    But `is_subclass` also works when a NewType is given as arg 1:

    >>> N = NewType('N', int)
    >>> M = NewType('M', N)
    >>> is_subclass(M, int)
    True
    >>> is_subclass(M, str)
    False

    And anything that is not a class simply isn't a subclass:

    >>> is_subclass(list[int], list)
    False
    >>> is_subclass(3, int)
    False
    """
    cls = unwrap_newtype(cls)
    if not isinstance(cls, type):
        return False
    return issubclass(cls, class_or_tuple)
