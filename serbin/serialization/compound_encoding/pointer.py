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

r"""
A pointer uses the same layout as an optional value, but the payload is held by a handle object and a missing handle
(`None`) is the null pointer.

Layout:

    [0x00] when null
    [0x01][payload] when not null

Unlike `decode_optional`, the result of decoding a present payload is always wrapped by `factory`, so a payload that is
itself `None` is not mistaken for a null pointer.

>>> from serbin.serialization.encoding.scalar import encode_scalar, decode_scalar
>>> se = Serializer.build_bytes_serializer()
>>> encode_pointer(se, [7], lambda s, v: encode_scalar(s, v, 'b'), lambda p: p[0])
>>> encode_pointer(se, None, lambda s, v: encode_scalar(s, v, 'b'), lambda p: p[0])
>>> bytes(se.finalize()).hex()
'010700'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('010700'))
>>> decode_pointer(de, lambda d: decode_scalar(d, 'b'), lambda v: [v])
[7]
>>> str(decode_pointer(de, lambda d: decode_scalar(d, 'b'), lambda v: [v]))
'None'
>>> de.finalize()
"""

from typing import Callable, Optional, TypeVar

from serbin.serialization import Deserializer, Serializer
from serbin.serialization.encoding.bool import decode_bool, encode_bool

from . import Decoder, Encoder

T = TypeVar('T')
P = TypeVar('P')


def encode_pointer(serializer: Serializer, handle: Optional[P], encoder: Encoder[T], target: Callable[[P], T]) -> None:
    """ Encodes the presence flag and, for a non-null handle, the payload obtained with `target(handle)`.
    """
    if handle is None:
        encode_bool(serializer, False)
    else:
        encode_bool(serializer, True)
        encoder(serializer, target(handle))


def decode_pointer(deserializer: Deserializer, decoder: Decoder[T], factory: Callable[[T], P]) -> Optional[P]:
    """ Decodes the presence flag and, when set, a payload that is given to `factory` to make a fresh handle.
    """
    if decode_bool(deserializer):
        return factory(decoder(deserializer))
    return None
