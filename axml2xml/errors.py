class ResParserError(Exception):
    """Exception for the parsers"""

    pass


class TruncatedInput(ResParserError):
    """
    A read addressed bytes past the end of the buffer.

    Decoding stops at the first one; no partial tree is returned.
    """

    def __init__(self, offset: int, size: int, length: int) -> None:
        self.offset = offset
        self.size = size
        self.length = length
        super().__init__(
            "Can not read over the buffer size! Offset={}, size={}, buffer size={}".format(
                offset, size, length
            )
        )


class MagicMismatch(ResParserError):
    """A header tag word is not the expected constant (strict mode only)."""

    def __init__(self, offset: int, expected: int, actual: int) -> None:
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Header type is not equal the expected type: Got 0x{:08x}, wanted 0x{:08x}. Offset={}".format(
                actual, expected, offset
            )
        )


class InvalidChunkSize(ResParserError):
    """A chunk declares a size smaller than its own header."""

    def __init__(self, offset: int, size: int, minimum: int) -> None:
        self.offset = offset
        self.size = size
        self.minimum = minimum
        super().__init__(
            "Declared chunk size {} is smaller than the header size {}. Offset={}".format(
                size, minimum, offset
            )
        )
