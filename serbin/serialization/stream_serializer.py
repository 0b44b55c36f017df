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

from .exceptions import ChannelWriteError
from .serializer import Serializer
from .types import Buffer


class StreamSerializer(Serializer):
    """Serializer that writes directly to a binary stream, like an open file or a socket file.

    The stream is not owned by this class: it is neither flushed nor closed implicitly.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pos: int = 0

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        self.write_bytes(data.to_bytes(1, 'little'))

    @override
    def write_bytes(self, data: Buffer) -> None:
        view = memoryview(data).cast('B')
        # XXX: raw (unbuffered) streams are allowed to do partial writes
        while view:
            written = self._stream.write(view)
            if written is None:
                # non-blocking raw streams return None when nothing could be written
                raise ChannelWriteError('stream is not ready for writing')
            if written == 0:
                raise ChannelWriteError('stream did not accept any bytes')
            self._pos += written
            view = view[written:]

    def flush(self) -> None:
        self._stream.flush()
