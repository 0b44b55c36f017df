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

class SerializationError(Exception):
    """Base class for errors raised while writing to or reading from a byte channel."""
    pass


class OutOfDataError(SerializationError):
    """Raised when a read returns fewer bytes than requested."""
    pass


class ChannelWriteError(SerializationError):
    """Raised when the underlying stream does not accept any of the bytes being written."""
    pass


class TooLongError(SerializationError):
    """Raised when a length is above a configured limit."""
    pass


class BadDataError(SerializationError):
    """Raised when the data being read is not what was expected, for example there are trailing bytes."""
    pass


class UnsupportedTypeError(TypeError):
    """Raised when no codec can be built for a type annotation."""
    pass


class AmbiguousTypeError(UnsupportedTypeError):
    """Raised when more than one codec class could be used for the same type annotation."""
    pass
