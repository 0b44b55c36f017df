import doctest
import importlib
import pkgutil

import pytest

import serbin
from serbin_tests.unittest import IS_LITTLE_ENDIAN_64


def _iter_module_names() -> list[str]:
    names = [serbin.__name__]
    for module_info in pkgutil.walk_packages(serbin.__path__, prefix=f'{serbin.__name__}.'):
        names.append(module_info.name)
    return names


# the examples show exact bytes, they are written for the most common platform
@pytest.mark.skipif(not IS_LITTLE_ENDIAN_64, reason='examples use 64-bit little-endian layouts')
@pytest.mark.parametrize('module_name', _iter_module_names())
def test_doctests(module_name: str) -> None:
    module = importlib.import_module(module_name)
    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert result.failed == 0
