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

from typing import BinaryIO

from typing_extensions import override

from .deserializer import Deserializer
from .exceptions import BadDataError, OutOfDataError


class StreamDeserializer(Deserializer):
    """Deserializer that reads from a binary stream, like an open file or a socket file.

    Only the bytes that are needed are requested from the stream, at most `chunk_size` at a time. Bytes that were
    peeked are kept in a small internal buffer until they are consumed. Reading in chunks means a corrupted length
    prefix will hit the end of the stream instead of allocating a buffer for the whole declared length.
    """

    def __init__(self, stream: BinaryIO, *, chunk_size: int | None = None) -> None:
        if chunk_size is None:
            from serbin.conf.get_settings import get_global_settings
            chunk_size = get_global_settings().STREAM_CHUNK_SIZE
        if chunk_size <= 0:
            raise ValueError('chunk_size must be positive')
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._eof = False

    def _fill(self, n: int) -> None:
        """Try to have at least `n` bytes in the internal buffer, fewer will be available only at the end of stream."""
        while len(self._buffer) < n and not self._eof:
            size = min(self._chunk_size, n - len(self._buffer))
            chunk = self._stream.read(size)
            if not chunk:
                self._eof = True
                break
            self._buffer += chunk

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise BadDataError('trailing data')

    @override
    def is_empty(self) -> bool:
        self._fill(1)
        return not self._buffer

    @override
    def peek_byte(self) -> int:
        self._fill(1)
        if not self._buffer:
            raise OutOfDataError('not enough bytes to read')
        return self._buffer[0]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._buffer) < n:
            raise OutOfDataError(f'not enough bytes to read, needed {n} but only {len(self._buffer)} available')
        return bytes(self._buffer[:n])

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        del self._buffer[0]
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> bytes:
        b = self.peek_bytes(n, exact=exact)
        del self._buffer[:len(b)]
        return b

    @override
    def read_all(self) -> bytes:
        chunks = [bytes(self._buffer)]
        self._buffer.clear()
        while not self._eof:
            chunk = self._stream.read(self._chunk_size)
            if not chunk:
                self._eof = True
                break
            chunks.append(chunk)
        return b''.join(chunks)
