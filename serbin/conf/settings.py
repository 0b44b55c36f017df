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

from pathlib import Path
from typing import Optional

from pydantic import PositiveInt, field_validator

from serbin.serialization.encoding.scalar import FLOAT_FORMATS, INTEGER_FORMATS, check_scalar_format
from serbin.serialization.encoding.size import check_size_format
from serbin.utils.pydantic import BaseModel


class SerbinSettings(BaseModel):
    # Struct format of the length prefix of strings, sequences, sets and mappings. It must be an unsigned integer
    # format, the default 'N' is the platform's size_t.
    SIZE_FORMAT: str = 'N'

    # Struct format used for a plain `int` annotation, the default 'i' is a C int.
    INT_FORMAT: str = 'i'

    # Struct format used for a plain `float` annotation, the default 'd' is a C double.
    FLOAT_FORMAT: str = 'd'

    # Struct format used for IntEnum values.
    ENUM_FORMAT: str = 'i'

    # When set, any length prefix above this value is rejected when decoding, before anything is allocated.
    MAX_COLLECTION_LENGTH: Optional[PositiveInt] = None

    # Maximum number of bytes requested from a stream in a single read.
    STREAM_CHUNK_SIZE: PositiveInt = 65536

    @field_validator('SIZE_FORMAT')
    @classmethod
    def _check_size_format(cls, value: str) -> str:
        return check_size_format(check_scalar_format(value))

    @field_validator('INT_FORMAT', 'ENUM_FORMAT')
    @classmethod
    def _check_int_format(cls, value: str) -> str:
        if check_scalar_format(value) not in INTEGER_FORMATS:
            raise ValueError(f'{value!r} is not an integer format')
        return value

    @field_validator('FLOAT_FORMAT')
    @classmethod
    def _check_float_format(cls, value: str) -> str:
        if check_scalar_format(value) not in FLOAT_FORMATS:
            raise ValueError(f'{value!r} is not a floating point format')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: str) -> 'SerbinSettings':
        """Takes a filepath to a yaml file and returns a validated SerbinSettings instance."""
        from serbin.utils.yaml import model_from_extended_yaml
        return model_from_extended_yaml(cls, filepath=filepath, custom_root=Path(__file__).parent)
