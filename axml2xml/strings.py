from typing import Iterator, Optional, Union

from loguru import logger

from .constants import STRING_POOL_HEADER_WORDS, UTF8_FLAG, WORD_SIZE
from .cursor import ByteCursor
from .errors import InvalidChunkSize


class StringPool:
    """
    StringPool is a CHUNK inside an AXML File: `ResStringPool_header`
    It contains all strings, which are used by referencing to ID's

    The chunk starts with the following 4 byte words:

    * 0th word: 0x001C0001
    * 1st word: chunk size
    * 2nd word: number of strings in the string table
    * 3rd word: number of styles in the string table
    * 4th word: flags - sorted/utf8 flag
    * 5th word: offset to string data, counted from the chunk start
    * 6th word: offset to style data, counted from the chunk start

    followed by one offset per string and one offset per style.
    Style spans are not decoded, only their offsets are kept.

    See http://androidxref.com/9.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#436
    """

    def __init__(
        self,
        strings: Optional[list] = None,
        flags: int = 0,
        style_offsets: Optional[list] = None,
    ) -> None:
        self.strings = strings or []
        self.flags = flags
        self.style_offsets = style_offsets or []

    @classmethod
    def empty(cls) -> "StringPool":
        """
        The pool in effect before the string pool chunk is read: every lookup is absent.
        """
        return cls()

    @classmethod
    def decode(cls, cursor: ByteCursor, chunk_start: int) -> tuple["StringPool", int]:
        """
        Decode the string pool chunk starting at `chunk_start`.

        :param cursor: the buffer holding the chunk
        :param chunk_start: absolute offset of the chunk tag word
        :raises TruncatedInput: if the chunk or one of its strings reaches past the buffer
        :raises InvalidChunkSize: if the declared size is smaller than the header
        :returns: tuple of (pool, chunk size in bytes)
        """
        cursor.require(chunk_start, STRING_POOL_HEADER_WORDS * WORD_SIZE)

        chunk_size = cursor.read_u32(chunk_start + WORD_SIZE)
        string_count = cursor.read_u32(chunk_start + 2 * WORD_SIZE)
        style_count = cursor.read_u32(chunk_start + 3 * WORD_SIZE)
        flags = cursor.read_u32(chunk_start + 4 * WORD_SIZE)
        strings_offset = cursor.read_u32(chunk_start + 5 * WORD_SIZE)
        styles_offset = cursor.read_u32(chunk_start + 6 * WORD_SIZE)

        logger.debug(f"chunk_size: {chunk_size}")
        logger.debug(f"string_count: {string_count}")
        logger.debug(f"style_count: {style_count}")
        logger.debug(f"flags: {flags}")
        logger.debug(f"strings_offset: {strings_offset}")
        logger.debug(f"styles_offset: {styles_offset}")

        if chunk_size < STRING_POOL_HEADER_WORDS * WORD_SIZE:
            raise InvalidChunkSize(chunk_start, chunk_size, STRING_POOL_HEADER_WORDS * WORD_SIZE)
        cursor.require(chunk_start, chunk_size)

        if style_count == 0 and styles_offset > 0:
            logger.info(
                "Styles Offset given, but styleCount is zero. "
                "This is not a problem but could indicate packers."
            )

        is_utf8 = (flags & UTF8_FLAG) != 0
        strings_base = chunk_start + strings_offset
        offsets_base = chunk_start + STRING_POOL_HEADER_WORDS * WORD_SIZE

        strings = []
        for i in range(string_count):
            offset = strings_base + cursor.read_u32(offsets_base + i * WORD_SIZE)
            if is_utf8:
                strings.append(cls._decode8(cursor, offset))
            else:
                strings.append(cls._decode16(cursor, offset))
            logger.debug(f"strings[{i}]: {strings[i]!r}")

        style_offsets = []
        if styles_offset > 0:
            styles_base = offsets_base + string_count * WORD_SIZE
            for i in range(style_count):
                style_offsets.append(cursor.read_u32(styles_base + i * WORD_SIZE))

        return cls(strings, flags, style_offsets), chunk_size

    def __repr__(self):
        return "<StringPool #strings={}, #styles={}, UTF8={}>".format(
            len(self.strings), len(self.style_offsets), self.is_utf8
        )

    @property
    def is_utf8(self) -> bool:
        return (self.flags & UTF8_FLAG) != 0

    def __getitem__(self, idx: int) -> Optional[str]:
        return self.get(idx)

    def __len__(self):
        """
        Get the number of strings stored in this table

        :return: the number of strings
        """
        return len(self.strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self.strings)

    def get(self, idx: Union[int, None]) -> Optional[str]:
        """
        Return the string at the index in the string table

        An index outside the table (including the 0xFFFFFFFF "no string" sentinel)
        is not an error, it resolves to `None`.

        :param idx: index in the string table
        :return: the string, or None
        """
        if idx is None or idx < 0 or idx >= len(self.strings):
            return None
        return self.strings[idx]

    @staticmethod
    def _decode16(cursor: ByteCursor, offset: int) -> str:
        """
        Decode an UTF-16 String at the given absolute offset

        The terminating null unit is not checked, the caller skips
        the whole chunk by its declared size.
        """
        str_len, skip = StringPool._decode_length(cursor, offset, 2)
        offset += skip

        # The len is the string len in utf-16 units
        data = cursor.slice(offset, offset + str_len * 2)
        return StringPool._decode_bytes(data, 'utf-16-le', str_len)

    @staticmethod
    def _decode8(cursor: ByteCursor, offset: int) -> str:
        """
        Decode an UTF-8 String at the given absolute offset
        """
        # UTF-8 Strings contain two lengths, as they might differ:
        # 1) the UTF-16 length
        str_len, skip = StringPool._decode_length(cursor, offset, 1)
        offset += skip

        # 2) the utf-8 string length
        encoded_bytes, skip = StringPool._decode_length(cursor, offset, 1)
        offset += skip

        data = cursor.slice(offset, offset + encoded_bytes)
        return StringPool._decode_bytes(data, 'utf-8', str_len)

    @staticmethod
    def _decode_bytes(data: bytes, encoding: str, str_len: int) -> str:
        """
        The string is decoded using the "replace" method.

        :param data: bytes
        :param encoding: encoding name ("utf-8" or "utf-16-le")
        :param str_len: length of the decoded string in UTF-16 units
        :return: the decoded bytes
        """
        string = data.decode(encoding, 'replace')
        # characters outside the BMP take a surrogate pair
        units = sum(2 if ord(c) > 0xFFFF else 1 for c in string)
        if units != str_len:
            logger.warning("invalid decoded string length")
        return string

    @staticmethod
    def _decode_length(cursor: ByteCursor, offset: int, sizeof_char: int) -> tuple[int, int]:
        """
        Generic Length Decoding at offset of string

        The method works for both 8 and 16 bit Strings.
        If the high bit of the first unit is set, the length continues
        into the next unit.

        :param offset: absolute offset of the length prefix
        :param sizeof_char: number of bytes per char (1 = 8bit, 2 = 16bit)
        :returns: tuple of (length, read bytes)
        """
        read = cursor.read_u8 if sizeof_char == 1 else cursor.read_u16
        highbit = 0x80 << (8 * (sizeof_char - 1))

        length1 = read(offset)
        if (length1 & highbit) != 0:
            length2 = read(offset + sizeof_char)
            return ((length1 & ~highbit) << (8 * sizeof_char)) | length2, sizeof_char << 1
        return length1, sizeof_char

    def show(self) -> None:
        """
        Print some information on stdout about the string table
        """
        print(
            "StringPool(stringsCount=0x%x, stylesCount=0x%x, flags=0x%x)"
            % (len(self.strings), len(self.style_offsets), self.flags)
        )

        if self.strings:
            print()
            print("String Table: ")
            for i, s in enumerate(self):
                print("{:08d} {}".format(i, repr(s)))
