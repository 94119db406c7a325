"""
Tests for ObjectCodec, ExternalizerRegistry and codec streams, dood!
"""

import io
import pickle
import threading
from dataclasses import dataclass, field
from typing import Optional

import pytest

from .codec import ObjectCodec
from .registry import ExternalizerRegistry, TypeDescriptor
from .types import CodecError, CodecInput, CodecOutput, Externalizer


@dataclass
class Book:
    id: int
    title: str
    author: Optional[str] = None


@dataclass
class LockedBook:
    id: int
    title: str
    author: Optional[str] = None
    lock: threading.Lock = field(default_factory=threading.Lock, compare=False, repr=False)


class SpecialLockedBook(LockedBook):
    pass


class LockedBookExternalizer(Externalizer[LockedBook]):
    def encode(self, output: CodecOutput, value: LockedBook) -> None:
        output.writeInt(value.id)
        output.writeString(value.title)
        output.writeObject(value.author)

    def decode(self, input: CodecInput) -> LockedBook:
        return LockedBook(id=input.readInt(), title=input.readString(), author=input.readObject())


class FailingExternalizer(Externalizer[LockedBook]):
    def encode(self, output: CodecOutput, value: LockedBook) -> None:
        raise RuntimeError("boom")

    def decode(self, input: CodecInput) -> LockedBook:
        raise RuntimeError("boom")


class TestCodecStreams:
    """Test cases for CodecOutput/CodecInput, dood!"""

    def test_records_read_back_in_order(self):
        """Test mixed records come back in write order, dood!"""
        buffer = io.BytesIO()
        output = CodecOutput(buffer)
        output.writeInt(-5)
        output.writeObject({"a": [1, 2]})
        output.writeString("Привет, dood!")
        output.writeInt(2**31 - 1)

        codecInput = CodecInput(io.BytesIO(buffer.getvalue()))
        assert codecInput.readInt() == -5
        assert codecInput.readObject() == {"a": [1, 2]}
        assert codecInput.readString() == "Привет, dood!"
        assert codecInput.readInt() == 2**31 - 1

    def test_int_is_big_endian(self):
        """Test integer wire format, dood!"""
        buffer = io.BytesIO()
        CodecOutput(buffer).writeInt(1)
        assert buffer.getvalue() == b"\x00\x00\x00\x01"

    def test_truncated_stream(self):
        """Test short reads raise CodecError, dood!"""
        with pytest.raises(CodecError):
            CodecInput(io.BytesIO(b"\x00\x00")).readInt()
        with pytest.raises(CodecError):
            CodecInput(io.BytesIO(b"")).readObject()
        with pytest.raises(CodecError):
            CodecInput(io.BytesIO(b"\x00\x00\x00\x09abc")).readString()


class TestExternalizerRegistry:
    """Test cases for ExternalizerRegistry, dood!"""

    def test_register_and_lookup(self):
        """Test lookups by type and by descriptor, dood!"""
        externalizer = LockedBookExternalizer()
        registry = ExternalizerRegistry({LockedBook: externalizer})

        assert len(registry) == 1
        assert LockedBook in registry
        assert registry.getForType(LockedBook) is externalizer
        assert registry.getForDescriptor(TypeDescriptor.fromType(LockedBook)) is externalizer
        assert list(registry) == [LockedBook]

    def test_lookup_uses_exact_type(self):
        """Test subclasses are not matched, dood!"""
        registry = ExternalizerRegistry({LockedBook: LockedBookExternalizer()})
        assert registry.getForType(SpecialLockedBook) is None

    def test_register_after_freeze(self):
        """Test frozen registry rejects registrations, dood!"""
        registry = ExternalizerRegistry()
        registry.freeze()
        assert registry.isFrozen
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register(LockedBook, LockedBookExternalizer())

    def test_descriptor_key(self):
        """Test descriptor identifies type by module and qualified name, dood!"""
        descriptor = TypeDescriptor.fromType(LockedBook)
        assert descriptor.module == __name__
        assert descriptor.qualname == "LockedBook"
        assert descriptor.key == f"{__name__}.LockedBook"


class TestObjectCodec:
    """Test cases for ObjectCodec, dood!"""

    def setup_method(self):
        registry = ExternalizerRegistry()
        registry.register(LockedBook, LockedBookExternalizer())
        self.codec = ObjectCodec(registry)

    @pytest.mark.parametrize(
        "value",
        [
            "hello",
            42,
            None,
            [1, "two", 3.0],
            {"nested": {"dict": True}},
            Book(1, "Dune", "Herbert"),
        ],
    )
    def test_round_trip_without_externalizer(self, value):
        """Test picklable values round-trip through the generic path, dood!"""
        assert self.codec.deserialize(self.codec.serialize(value)) == value

    def test_generic_encoding_has_no_discriminator(self):
        """Test values without externalizer are plain pickles, dood!"""
        data = self.codec.serialize(Book(1, "Dune"))
        assert pickle.loads(data) == Book(1, "Dune")

    def test_round_trip_with_externalizer(self):
        """Test unpicklable values round-trip through their externalizer, dood!"""
        book = LockedBook(7, "Snow Crash", "Stephenson")
        restored = self.codec.deserialize(self.codec.serialize(book))
        assert restored == book
        assert restored is not book

    def test_externalized_payload_starts_with_discriminator(self):
        """Test discriminator record comes first, dood!"""
        data = self.codec.serialize(LockedBook(7, "Snow Crash"))
        codecInput = CodecInput(io.BytesIO(data))
        assert codecInput.readObject() == TypeDescriptor.fromType(LockedBook)
        assert codecInput.readInt() == 7

    def test_codec_freezes_registry(self):
        """Test constructing the codec freezes its registry, dood!"""
        assert self.codec.registry.isFrozen

    def test_dispatch_miss(self):
        """Test unknown discriminator raises instead of returning garbage, dood!"""
        data = self.codec.serialize(LockedBook(7, "Snow Crash"))
        with pytest.raises(CodecError, match="No externalizer registered"):
            ObjectCodec().deserialize(data)

    def test_unpicklable_value_without_externalizer(self):
        """Test pickle failures surface as CodecError, dood!"""
        with pytest.raises(CodecError):
            ObjectCodec().serialize(LockedBook(1, "x"))

    def test_externalizer_failure(self):
        """Test externalizer exceptions surface as CodecError, dood!"""
        codec = ObjectCodec(ExternalizerRegistry({LockedBook: FailingExternalizer()}))
        with pytest.raises(CodecError, match="boom"):
            codec.serialize(LockedBook(1, "x"))

    def test_corrupt_data(self):
        """Test corrupt data raises CodecError, dood!"""
        with pytest.raises(CodecError):
            self.codec.deserialize(b"definitely not a pickle")

    def test_accepts_memoryview(self):
        """Test driver buffers are accepted, dood!"""
        data = self.codec.serialize("hello")
        assert self.codec.deserialize(memoryview(data)) == "hello"
