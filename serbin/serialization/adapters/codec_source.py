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

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from typing_extensions import override

from serbin.serialization.deserializer import Deserializer
from serbin.serialization.serializer import Serializer

from .generic_adapter import GenericDeserializerAdapter, GenericSerializerAdapter

if TYPE_CHECKING:
    from serbin.codecs.codec import Codec

S = TypeVar('S', bound=Serializer)
D = TypeVar('D', bound=Deserializer)

CodecSource = Callable[[Any], 'Codec[Any]']


class CodecSourceSerializer(GenericSerializerAdapter[S]):
    """ Makes `write_type` take its codecs from `codec_source` instead of the default type map.

    This is how the settings and extra codecs of a containing codec reach the fields of a `Serializable`.
    """

    def __init__(self, serializer: S, codec_source: CodecSource) -> None:
        super().__init__(serializer)
        self._codec_source = codec_source

    @override
    def get_type_codec(self, type_: type[Any]) -> Codec[Any]:
        return self._codec_source(type_)


class CodecSourceDeserializer(GenericDeserializerAdapter[D]):
    """ Makes `read_type` take its codecs from `codec_source` instead of the default type map.
    """

    def __init__(self, deserializer: D, codec_source: CodecSource) -> None:
        super().__init__(deserializer)
        self._codec_source = codec_source

    @override
    def get_type_codec(self, type_: type[Any]) -> Codec[Any]:
        return self._codec_source(type_)
