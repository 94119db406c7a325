"""
Object codec for BLOB value columns, dood!

Values are pickled unless the registry has an externalizer for their exact
concrete type. Externalized payloads start with a TypeDescriptor record so
the decoder knows which externalizer to hand the rest of the stream to.
"""

import io
import logging
import pickle
from typing import Any, Optional

from .registry import ExternalizerRegistry, TypeDescriptor
from .types import CodecError, CodecInput, CodecOutput

logger = logging.getLogger(__name__)


class ObjectCodec:
    """
    Serializes arbitrary values to bytes and back, dood!

    Example:
        >>> registry = ExternalizerRegistry()
        >>> registry.register(NonSerializableBook, BookExternalizer())
        >>> codec = ObjectCodec(registry)
        >>> data = codec.serialize(NonSerializableBook(1, "Dune"))
        >>> codec.deserialize(data)
        NonSerializableBook(id=1, title='Dune', author=None)
    """

    def __init__(self, registry: Optional[ExternalizerRegistry] = None):
        self.registry = registry if registry is not None else ExternalizerRegistry()
        self.registry.freeze()

    def serialize(self, value: Any) -> bytes:
        """
        Encode ``value`` to bytes, dood!

        Raises:
            CodecError: If the value can not be pickled or its externalizer fails
        """
        valueType = type(value)
        externalizer = self.registry.getForType(valueType)
        buffer = io.BytesIO()
        try:
            if externalizer is not None:
                output = CodecOutput(buffer)
                output.writeObject(TypeDescriptor.fromType(valueType))
                externalizer.encode(output, value)
            else:
                pickle.dump(value, buffer, protocol=pickle.HIGHEST_PROTOCOL)
        except CodecError:
            raise
        except Exception as e:
            logger.error(f"Failed to serialize {valueType.__qualname__}: {e}, dood!")
            raise CodecError(f"Failed to serialize value of type {valueType.__qualname__}: {e}") from e

        return buffer.getvalue()

    def deserialize(self, data: Any) -> Any:
        """
        Decode bytes produced by ``serialize``, dood!

        Args:
            data: bytes, bytearray or memoryview as returned by the driver

        Raises:
            CodecError: On corrupt data, unknown type descriptor or externalizer failure
        """
        codecInput = CodecInput(io.BytesIO(bytes(data)))
        try:
            record = codecInput.readObject()
            if not isinstance(record, TypeDescriptor):
                return record

            externalizer = self.registry.getForDescriptor(record)
            if externalizer is None:
                raise CodecError(f"No externalizer registered for serialized type {record.key}")
            return externalizer.decode(codecInput)
        except CodecError:
            raise
        except Exception as e:
            logger.error(f"Failed to deserialize {len(data)} bytes: {e}, dood!")
            raise CodecError(f"Failed to deserialize value: {e}") from e
