import io

import pytest

import serbin
from serbin import BadDataError, Deserializer, Int32, Serializer, decode, encode, from_bytes, to_bytes


def test_to_bytes_and_from_bytes() -> None:
    type_ = dict[str, list[Int32 | None]]
    value = {'a': [Int32(1), None], 'b': []}
    assert from_bytes(type_, to_bytes(type_, value)) == value


def test_from_bytes_requires_all_data() -> None:
    data = to_bytes(int, 1)
    with pytest.raises(BadDataError):
        from_bytes(int, data + b'\x00')


def test_encode_and_decode_on_a_stream() -> None:
    stream = io.BytesIO()
    serializer = Serializer.build_stream_serializer(stream)
    encode(serializer, tuple[str, float], ('pi', 3.14))
    encode(serializer, bool, False)
    stream.seek(0)
    deserializer = Deserializer.build_stream_deserializer(stream)
    assert decode(deserializer, tuple[str, float]) == ('pi', 3.14)
    assert decode(deserializer, bool) is False
    deserializer.finalize()


def test_encode_checks_values() -> None:
    serializer = Serializer.build_bytes_serializer()
    with pytest.raises(TypeError):
        encode(serializer, list[str], [1])


def test_version() -> None:
    assert isinstance(serbin.__version__, str)


def test_public_names_resolve() -> None:
    import serbin.codecs
    for module in (serbin, serbin.codecs):
        for name in module.__all__:
            assert hasattr(module, name), name


def test_abstract_set_annotation_decodes_as_frozenset() -> None:
    import collections.abc

    import serbin.codecs
    assert serbin.codecs.DEFAULT_TYPE_ALIAS_MAP[collections.abc.Set] is frozenset
    value = from_bytes(collections.abc.Set[int], to_bytes(collections.abc.Set[int], frozenset({7})))
    assert value == frozenset({7})
    assert isinstance(value, frozenset)
