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

from typing import TypeVar

from typing_extensions import override

from serbin.serialization.deserializer import Deserializer
from serbin.serialization.exceptions import SerializationError
from serbin.serialization.serializer import Serializer

from ..types import Buffer
from .generic_adapter import GenericDeserializerAdapter, GenericSerializerAdapter

S = TypeVar('S', bound=Serializer)
D = TypeVar('D', bound=Deserializer)


class MaxBytesExceededError(SerializationError):
    """ Raised when an adapted serializer or deserializer would go past its byte budget.

    The check happens before the inner channel is touched, so nothing from the offending operation is written or
    consumed. Still, whatever was written or read before it is only part of a value, so the whole encode/decode must be
    considered failed and the adapter should not be used again.
    """
    pass


class MaxBytesSerializer(GenericSerializerAdapter[S]):
    def __init__(self, serializer: S, max_bytes: int) -> None:
        super().__init__(serializer)
        if max_bytes < 0:
            raise ValueError('max_bytes cannot be negative')
        self._max_bytes = max_bytes
        self._bytes_left = max_bytes

    @property
    def bytes_left(self) -> int:
        return self._bytes_left

    def _consume(self, write_size: int) -> None:
        if write_size > self._bytes_left:
            raise MaxBytesExceededError(f'writing {write_size} bytes would exceed the limit of {self._max_bytes}')
        self._bytes_left -= write_size

    @override
    def write_byte(self, data: int) -> None:
        self._consume(1)
        super().write_byte(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        data_view = memoryview(data).cast('B')
        self._consume(len(data_view))
        super().write_bytes(data_view)


class MaxBytesDeserializer(GenericDeserializerAdapter[D]):
    def __init__(self, deserializer: D, max_bytes: int) -> None:
        super().__init__(deserializer)
        if max_bytes < 0:
            raise ValueError('max_bytes cannot be negative')
        self._max_bytes = max_bytes
        self._bytes_left = max_bytes

    @property
    def bytes_left(self) -> int:
        return self._bytes_left

    def _consume(self, read_size: int) -> None:
        if read_size > self._bytes_left:
            raise MaxBytesExceededError(f'reading {read_size} bytes would exceed the limit of {self._max_bytes}')
        self._bytes_left -= read_size

    @override
    def read_byte(self) -> int:
        self._consume(1)
        return super().read_byte()

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> Buffer:
        if not exact:
            n = min(n, self._bytes_left)
        self._consume(n)
        result = super().read_bytes(n, exact=exact)
        # XXX: give back what was not actually read
        self._bytes_left += n - len(result)
        return result

    @override
    def read_all(self) -> Buffer:
        result = self.read_bytes(self._bytes_left, exact=False)
        if not self.is_empty():
            raise MaxBytesExceededError(f'more than {self._max_bytes} bytes available')
        return result
