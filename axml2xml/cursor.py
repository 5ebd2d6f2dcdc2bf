from struct import unpack_from
from typing import Union

from .errors import TruncatedInput


class ByteCursor:
    """
    Bounds-checked little-endian reader over an immutable byte buffer.

    The cursor keeps no read position: every read takes an absolute offset,
    computed by the caller. Reads that would go past the end of the buffer
    raise [TruncatedInput][axml2xml.errors.TruncatedInput] instead of
    returning short data.
    """

    def __init__(self, buff: Union[bytes, bytearray, memoryview]) -> None:
        self.buff = bytes(buff)

    def __len__(self):
        return len(self.buff)

    def __repr__(self):
        return "<ByteCursor size='{}'>".format(len(self.buff))

    def require(self, offset: int, size: int) -> None:
        """
        Make sure `size` bytes starting at `offset` are inside the buffer.

        :raises TruncatedInput: if the range is not fully inside the buffer
        """
        if offset < 0 or size < 0 or offset + size > len(self.buff):
            raise TruncatedInput(offset, size, len(self.buff))

    def read_u8(self, offset: int) -> int:
        self.require(offset, 1)
        return self.buff[offset]

    def read_u16(self, offset: int) -> int:
        self.require(offset, 2)
        return unpack_from('<H', self.buff, offset)[0]

    def read_u32(self, offset: int) -> int:
        self.require(offset, 4)
        return unpack_from('<L', self.buff, offset)[0]

    def slice(self, start: int, end: int) -> bytes:
        """
        :returns: the bytes in `[start, end)`
        """
        self.require(start, end - start)
        return self.buff[start:end]
