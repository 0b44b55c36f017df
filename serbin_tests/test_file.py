from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from serbin import Box, Float32, Float64, Int64, OutOfDataError, Serializable, WStr, open_reader, open_writer
from serbin.serialization import Deserializer, Serializer
from serbin_tests import unittest


class Measurement(Serializable):
    __slots__ = ('reading',)

    def __init__(self, reading: Optional[Box[tuple[Float32, Float64, Int64]]]) -> None:
        self.reading = reading

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Measurement) and self.reading == other.reading

    __hash__ = None  # type: ignore[assignment]

    def serialize(self, serializer: Serializer, /) -> None:
        serializer.write_type(Box[tuple[Float32, Float64, Int64]], self.reading)

    @classmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Measurement:
        return cls(deserializer.read_type(Box[tuple[Float32, Float64, Int64]]))


class FileTestCase(unittest.TestCase):
    @pytest.fixture(autouse=True)
    def _tmp_path(self, tmp_path: Path) -> None:
        self.path = str(tmp_path / 'data.bin')

    def test_round_trip(self):
        numbers = [None, 456, 7890]
        flags = {'on': True, 'off': False}
        names = {WStr('alpha'), WStr('ω')}
        measurement = Measurement(Box((Float32(1.25), Float64(-3.5), Int64(2**40))))

        with open_writer(self.path) as writer:
            writer.write_type(list[int | None], numbers)
            writer.write_type(dict[str, bool], flags)
            writer.write_type(set[WStr], names)
            writer.write_type(Measurement, measurement)

        with open_reader(self.path) as reader:
            self.assertEqual(reader.read_type(list[int | None]), numbers)
            self.assertEqual(reader.read_type(dict[str, bool]), flags)
            self.assertEqual(reader.read_type(set[WStr]), names)
            self.assertEqual(reader.read_type(Measurement), measurement)
            reader.finalize()

    def test_writer_truncates(self):
        with open_writer(self.path) as writer:
            writer.write_type(str, 'a longer first value')
        with open_writer(self.path) as writer:
            writer.write_type(bool, True)
        with open_reader(self.path) as reader:
            self.assertIs(reader.read_type(bool), True)
            reader.finalize()

    def test_writer_append(self):
        with open_writer(self.path) as writer:
            writer.write_type(bool, True)
        with open_writer(self.path, truncate=False) as writer:
            writer.write_type(bool, False)
        with open_reader(self.path) as reader:
            self.assertEqual(reader.read_type_tuple((bool, bool)), (True, False))

    def test_short_file(self):
        with open_writer(self.path) as writer:
            writer.write_type(list[Int64], [Int64(1), Int64(2)])
        with open(self.path, 'r+b') as fp:
            fp.truncate(12)
        with open_reader(self.path) as reader:
            with self.assertRaises(OutOfDataError):
                reader.read_type(list[Int64])

    def test_missing_file(self):
        with self.assertRaises(OSError):
            with open_reader(self.path):
                pass
