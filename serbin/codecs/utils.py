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

from collections.abc import Callable, Hashable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, is_dataclass
from enum import IntEnum
from functools import reduce
from operator import or_
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, NamedTuple, NewType, TypeAlias

from structlog import get_logger

from serbin.serializable import Serializable
from serbin.serialization.exceptions import AmbiguousTypeError, UnsupportedTypeError
from serbin.utils.typing import get_args, get_origin, is_subclass

if TYPE_CHECKING:
    from serbin.codecs.codec import Codec


logger = get_logger()

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToCodecMap: TypeAlias = Mapping[Any, type['Codec']]


def _is_namedtuple(type_: Any) -> bool:
    # XXX: namedtuple classes are plain tuple subclasses with `_fields`, `NamedTuple` itself is not a base class
    return isinstance(type_, type) and issubclass(type_, tuple) and hasattr(type_, '_fields')


def _is_dataclass(type_: Any) -> bool:
    return isinstance(type_, type) and is_dataclass(type_)


def _is_int_enum(type_: Any) -> bool:
    return is_subclass(type_, IntEnum)


def _is_serializable(type_: Any) -> bool:
    return is_subclass(type_, Serializable)


# Types that are not directly in a codecs map can still match one of these rules, the key is what has to be in the
# codecs map for the rule to be used. More than one rule matching the same type is an error.
STRUCTURAL_RULES: Mapping[Any, Callable[[Any], bool]] = {
    NamedTuple: _is_namedtuple,
    dataclass: _is_dataclass,
    IntEnum: _is_int_enum,
    Serializable: _is_serializable,
}


def _map_contains(mapping: Mapping[Any, Any], key: Any) -> bool:
    # XXX: some annotation arguments are not hashable, for example the `[int]` in `Callable[[int], str]`
    return isinstance(key, Hashable) and key in mapping


def get_origin_classes(type_: Any) -> Iterator[Any]:
    """ This util function is useful to generalize over a type T and unions A | B.

    A simple type T would be yielded directly, and an union will yield each type in it. Only origin types are yielded,
    arguments are discarded.

    >>> list(get_origin_classes(int))
    [<class 'int'>]
    >>> list(get_origin_classes(int | str))
    [<class 'int'>, <class 'str'>]
    >>> list(get_origin_classes(set[int] | dict[int, str]))
    [<class 'set'>, <class 'dict'>]
    """
    origin_type = get_origin(type_) or type_
    if origin_type is UnionType:
        for arg_type in get_args(type_):
            yield get_origin(arg_type) or arg_type
    else:
        yield origin_type


def is_origin_hashable(type_: Any) -> bool:
    """ Checks whether the given type signature satisfies `collections.abc.Hashable`.

    This check ignores type arguments, but takes into account all types of an union.

    >>> is_origin_hashable(int | str | bytes)
    True
    >>> is_origin_hashable(int | set)
    False
    >>> is_origin_hashable(frozenset[int])
    True
    >>> is_origin_hashable(list[int])
    False
    >>> from serbin.types import Box, Int8
    >>> is_origin_hashable(Int8)
    True
    >>> is_origin_hashable(Box[int])
    False

    Even though list is not hashable, a frozenset[list] is, simply because arguments are ignored:
    >>> is_origin_hashable(frozenset[list])
    True

    Callers should recurse on their own if they need to deal with type arguments. In practice when building a Codec
    from a type the recursion of the build process will deal with that.
    """
    return all(is_subclass(origin_class, Hashable) for origin_class in get_origin_classes(type_))


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int)
    'int'
    >>> pretty_type(None)
    'None'
    >>> pretty_type(list[int])
    'list[int]'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__') or not hasattr(type_, '__name__'):
        return str(type_)
    else:
        return type_.__name__


def resolve_newtype(type_: Any, codecs_map: TypeToCodecMap) -> Any:
    """ Replace a `NewType` by its supertype, unless the `NewType` has its own entry in the codecs map.

    >>> from serbin.types import Float64
    >>> Meters = NewType('Meters', Float64)
    >>> resolve_newtype(Meters, {Float64: object}) is Float64
    True
    >>> resolve_newtype(Meters, {float: object})
    <class 'float'>
    """
    while isinstance(type_, NewType) and not _map_contains(codecs_map, type_):
        type_ = type_.__supertype__
    return type_


# XXX: _verbose argument is used to help with doctest
def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    For example, abstract collections are mapped to concrete ones in the default alias map:

    >>> from collections.abc import Mapping, Sequence, Set
    >>> from serbin.codecs import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(tuple[str, Sequence[Mapping[int, Set[str]]]], alias_map, _verbose=False)
    tuple[str, list[dict[int, frozenset[str]]]]

    Types that need no replacement are returned as they are:

    >>> get_aliased_type(tuple[()], alias_map, _verbose=False)
    tuple[()]
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    aliased_origin = origin_type
    replaced = False

    if _map_contains(alias_map, origin_type):
        aliased_origin = alias_map[origin_type]
        replaced = True

    type_args = get_args(type_)
    if not type_args:
        # XXX: `tuple[()]` has an origin but no args, it is kept as it is
        if get_origin(type_) is None:
            return aliased_origin, replaced
        return (aliased_origin[()] if replaced else type_), replaced

    # use _get_aliased_type for recursion so we don't log multiple times when a replacement happens
    aliased_args_replaced = [_get_aliased_type(arg, alias_map) for arg in type_args]
    aliased_args = tuple(arg for arg, _ in aliased_args_replaced)
    replaced |= any(arg_replaced for _, arg_replaced in aliased_args_replaced)

    if not replaced:
        return type_, False

    # XXX: special case, UnionType can't be instantiated directly, this is the simplest way to do it
    if aliased_origin is UnionType:
        return reduce(or_, aliased_args), True

    assert hasattr(aliased_origin, '__class_getitem__'), 'we must have an indexable class at this point'
    return aliased_origin[aliased_args], True


def get_usable_origin_type(type_: Any, /, *, type_map: 'Codec.TypeMap', _verbose: bool = True) -> Any:
    """ The purpose of this function is to map a given type into a key that is usable in a `Codec.TypeMap`.

    It takes into account type-aliasing according to `Codec.TypeMap.alias_map`, and then tries, in order:

    1. the origin of the aliased type, an exact match in `type_map.codecs_map`
    2. the structural rules in `STRUCTURAL_RULES` whose key is in `type_map.codecs_map`, exactly one must match

    The returned key is guaranteed to exist in `type_map.codecs_map`, otherwise an `UnsupportedTypeError` is raised,
    or an `AmbiguousTypeError` if more than one structural rule matched.

    >>> from serbin.codecs import get_default_type_map
    >>> from collections.abc import MutableSet
    >>> get_usable_origin_type(MutableSet[int], type_map=get_default_type_map(), _verbose=False)
    <class 'set'>
    """
    if isinstance(type_, str):
        raise UnsupportedTypeError('string annotations are not supported, resolve them with typing.get_type_hints')

    aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=_verbose)
    origin_aliased_type = get_origin(aliased_type) or aliased_type

    if origin_aliased_type is UnionType:
        # When it's an union and None is not in it, it's not Optional,
        # so we must index by args which is a tuple of types.
        args = get_args(aliased_type)
        if NoneType not in args:
            origin_aliased_type = args

    if _map_contains(type_map.codecs_map, origin_aliased_type):
        return origin_aliased_type

    matches = [
        key
        for key, rule in STRUCTURAL_RULES.items()
        if _map_contains(type_map.codecs_map, key) and rule(aliased_type)
    ]
    if len(matches) > 1:
        rule_names = ', '.join(getattr(key, '__name__', str(key)) for key in matches)
        raise AmbiguousTypeError(
            f'type {pretty_type(type_)} matches more than one codec rule ({rule_names}), '
            'add an explicit entry for it to the codecs map'
        )
    if matches:
        match, = matches
        return match

    raise UnsupportedTypeError(f'type {pretty_type(type_)} is not supported by any Codec class')


# product types whose codecs are currently being built, innermost last
_types_being_built: ContextVar[tuple[Any, ...]] = ContextVar('_types_being_built', default=())


@contextmanager
def building_product_type(type_: Any) -> Iterator[None]:
    """ Marks `type_` as being built for the duration of the block, building it again inside the block is an error.

    Field codecs are built eagerly, so a product type that contains itself (directly or through other products) would
    never finish building. Such types have to be written as a `Serializable`, which builds its field codecs lazily.
    """
    being_built = _types_being_built.get()
    if type_ in being_built:
        cycle = ' -> '.join(pretty_type(t) for t in being_built[being_built.index(type_):] + (type_,))
        raise UnsupportedTypeError(f'{pretty_type(type_)} contains itself ({cycle}), use a Serializable instead')
    token = _types_being_built.set(being_built + (type_,))
    try:
        yield
    finally:
        _types_being_built.reset(token)
