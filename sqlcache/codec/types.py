"""
Core types for the object codec, dood!

Externalizers write and read values through CodecOutput/CodecInput, which
sit on top of the byte stream stored in the cache column. A stream is a
sequence of records: pickled objects, 4-byte integers and length-prefixed
UTF-8 strings, read back in the same order they were written.
"""

import io
import pickle
import struct
from typing import Any, Protocol, TypeVar

T = TypeVar("T")

_INT_FORMAT = ">i"
_INT_SIZE = struct.calcsize(_INT_FORMAT)


class CodecError(Exception):
    """Raised when a value can not be serialized or deserialized, dood!"""

    pass


class CodecOutput:
    """
    Write side of a codec stream, dood!

    Example:
        >>> buffer = io.BytesIO()
        >>> output = CodecOutput(buffer)
        >>> output.writeInt(200)
        >>> output.writeString("OK")
        >>> output.writeObject({"content-type": ["text/plain"]})
    """

    __slots__ = ("stream",)

    def __init__(self, stream: io.BufferedIOBase):
        self.stream = stream

    def writeObject(self, obj: Any) -> None:
        """Write any picklable object as a single record"""
        pickle.dump(obj, self.stream, protocol=pickle.HIGHEST_PROTOCOL)

    def writeInt(self, value: int) -> None:
        """Write 32-bit signed big-endian integer"""
        self.stream.write(struct.pack(_INT_FORMAT, value))

    def writeString(self, value: str) -> None:
        """Write UTF-8 string prefixed with its byte length"""
        data = value.encode("utf-8")
        self.writeInt(len(data))
        self.stream.write(data)


class CodecInput:
    """Read side of a codec stream, mirrors CodecOutput, dood!"""

    __slots__ = ("stream",)

    def __init__(self, stream: io.BufferedIOBase):
        self.stream = stream

    def _readExactly(self, size: int) -> bytes:
        data = self.stream.read(size)
        if len(data) != size:
            raise CodecError(f"Unexpected end of stream: wanted {size} bytes, got {len(data)}, dood!")
        return data

    def readObject(self) -> Any:
        try:
            return pickle.load(self.stream)
        except EOFError as e:
            raise CodecError("Unexpected end of stream while reading object, dood!") from e

    def readInt(self) -> int:
        return struct.unpack(_INT_FORMAT, self._readExactly(_INT_SIZE))[0]

    def readString(self) -> str:
        size = self.readInt()
        if size < 0:
            raise CodecError(f"Invalid string length {size}, dood!")
        return self._readExactly(size).decode("utf-8")


class Externalizer(Protocol[T]):
    """
    Protocol for custom codecs of a single concrete type, dood!

    Externalizers handle values that can not go through the default (pickle)
    encoding, e.g. objects holding sockets, locks or open streams. They are
    registered per concrete type in an ExternalizerRegistry before the cache
    accepts traffic.

    Example:
        >>> class BookExternalizer(Externalizer[Book]):
        ...     def encode(self, output: CodecOutput, value: Book) -> None:
        ...         output.writeInt(value.id)
        ...         output.writeString(value.title)
        ...
        ...     def decode(self, input: CodecInput) -> Book:
        ...         return Book(id=input.readInt(), title=input.readString())
    """

    def encode(self, output: CodecOutput, value: T) -> None:
        """
        Write ``value`` to the codec stream, dood!

        Args:
            output: Stream to write records to
            value: Value to encode
        """
        ...

    def decode(self, input: CodecInput) -> T:
        """
        Read a value previously written by ``encode``, dood!

        Args:
            input: Stream positioned right after the type discriminator

        Returns:
            T: The decoded value
        """
        ...
