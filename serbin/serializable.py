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

from abc import ABC, abstractmethod

from typing_extensions import Self

from serbin.serialization import Deserializer, Serializer


class Serializable(ABC):
    """ Base class for user types that define their own binary layout.

    Subclasses write their fields in `serialize` and read them back in the same order in `deserialize`, usually with
    `Serializer.write_type` and `Deserializer.read_type` so the fields use the same codecs and settings as the
    annotation that contains the class. A `Serializable` subclass can then be used in any annotation, like
    `list[MyType]` or `Box[MyType] | None`.
    """

    __slots__ = ()

    @abstractmethod
    def serialize(self, serializer: Serializer, /) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def deserialize(cls, deserializer: Deserializer, /) -> Self:
        raise NotImplementedError
