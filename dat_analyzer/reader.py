"""Bounds-checked little-endian cursor over a world file."""
import io
import logging
from typing import Any, BinaryIO, Union

from construct import Construct, Float32l, Int8ul, Int16ul, Int32sl, Int32ul

from .errors import InvalidOffset, UnexpectedEof

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, memoryview, BinaryIO]


class ByteCursor:
    """Sequential reader with an explicit zero-based position.

    Wraps either an in-memory buffer or a readable, seekable binary stream.
    Every read checks the remaining length before touching the source, so a
    short read always raises UnexpectedEof instead of returning fewer bytes.
    """

    def __init__(self, source: Source):
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            self._stream = source
        self._length = self._stream.seek(0, io.SEEK_END)
        self._stream.seek(0)
        self._position = 0

    @property
    def length(self) -> int:
        return self._length

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return self._length - self._position

    def seek_absolute(self, offset: int) -> None:
        """Move to an absolute offset; the end of the source is a valid target."""
        if offset < 0 or offset > self._length:
            raise InvalidOffset(offset, self._length)
        self._stream.seek(offset)
        self._position = offset

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        if size < 0 or size > self.remaining:
            raise UnexpectedEof(size, self.remaining, self._position)
        data = self._stream.read(size)
        if len(data) != size:
            # Source shrank underneath us
            raise UnexpectedEof(size, len(data), self._position)
        self._position += size
        return data

    def read_struct(self, schema: Construct) -> Any:
        """Read and parse a fixed-size construct schema."""
        return schema.parse(self.read_bytes(schema.sizeof()))

    def read_u8(self) -> int:
        return self.read_struct(Int8ul)

    def read_u16(self) -> int:
        return self.read_struct(Int16ul)

    def read_u32(self) -> int:
        return self.read_struct(Int32ul)

    def read_i32(self) -> int:
        return self.read_struct(Int32sl)

    def read_f32(self) -> float:
        return self.read_struct(Float32l)
