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

from contextlib import contextmanager
from typing import Iterator

from structlog import get_logger

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.stream_deserializer import StreamDeserializer
from serbin.serialization.stream_serializer import StreamSerializer

logger = get_logger()


@contextmanager
def open_writer(path: str, *, truncate: bool = True) -> Iterator[StreamSerializer]:
    """ Open a file for writing and yield a serializer over it, the file is flushed and closed when leaving.

    An existing file is truncated, unless `truncate=False` is given, in which case new data is appended.
    """
    log = logger.new(path=path)
    with open(path, 'wb' if truncate else 'ab') as fp:
        log.debug('file channel opened', mode=fp.mode)
        serializer = Serializer.build_stream_serializer(fp)
        try:
            yield serializer
            serializer.flush()
        finally:
            log.debug('file channel closed', written=serializer.cur_pos())


@contextmanager
def open_reader(path: str, *, chunk_size: int | None = None) -> Iterator[StreamDeserializer]:
    """ Open a file for reading and yield a deserializer over it, the file is closed when leaving.
    """
    log = logger.new(path=path)
    with open(path, 'rb') as fp:
        log.debug('file channel opened', mode=fp.mode)
        try:
            yield Deserializer.build_stream_deserializer(fp, chunk_size=chunk_size)
        finally:
            log.debug('file channel closed')
