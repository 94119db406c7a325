"""
sqlcache.codec - byte encoding of values stored in BLOB columns, dood!

Values are pickled by default. Types that can not be pickled get an
Externalizer registered in an ExternalizerRegistry.

Example Usage:
    >>> from sqlcache.codec import ExternalizerRegistry, ObjectCodec
    >>>
    >>> registry = ExternalizerRegistry()
    >>> registry.register(NonSerializableBook, BookExternalizer())
    >>> codec = ObjectCodec(registry)
    >>> codec.deserialize(codec.serialize(book)) == book
    True
"""

from .codec import ObjectCodec
from .registry import ExternalizerRegistry, TypeDescriptor
from .response_externalizer import HttpxResponseExternalizer, IdentityRenderCache
from .types import CodecError, CodecInput, CodecOutput, Externalizer

__all__ = [
    "ObjectCodec",
    "CodecError",
    "CodecInput",
    "CodecOutput",
    "Externalizer",
    "ExternalizerRegistry",
    "TypeDescriptor",
    "HttpxResponseExternalizer",
    "IdentityRenderCache",
]
