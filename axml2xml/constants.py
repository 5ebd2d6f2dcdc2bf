"""
Magic words and type words used in the AXML chunk stream.

Chunk tags are the first 32-bit word of a chunk: the low 16 bits are the
`ResChunk_header.type`, the high 16 bits the header size.
See http://aospxref.com/android-13.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#233
"""

WORD_SIZE = 4

# Chunk tags
WORD_START_DOCUMENT = 0x00080003
WORD_STRING_TABLE = 0x001C0001
WORD_RES_TABLE = 0x00080180
WORD_START_NS = 0x00100100
WORD_END_NS = 0x00100101
WORD_START_TAG = 0x00100102
WORD_END_TAG = 0x00100103
WORD_TEXT = 0x00100104
WORD_EOS = 0xFFFFFFFF

# Fixed chunk lengths, in words
START_DOCUMENT_WORDS = 2
NAMESPACE_WORDS = 6
START_TAG_WORDS = 9
END_TAG_WORDS = 6
TEXT_WORDS = 7
STRING_POOL_HEADER_WORDS = 7

# Each attribute has 5 fields of 4 bytes
ATTRIBUTE_IX_NAMESPACE_URI = 0
ATTRIBUTE_IX_NAME = 1
ATTRIBUTE_IX_VALUE_STRING = 2
ATTRIBUTE_IX_VALUE_TYPE = 3
ATTRIBUTE_IX_VALUE_DATA = 4
ATTRIBUTE_LENGTH = 5
ATTRIBUTE_SIZE = ATTRIBUTE_LENGTH * WORD_SIZE

# Index value meaning "no string"
NO_INDEX = 0xFFFFFFFF

# Flags in the STRING Section
UTF8_FLAG = 1 << 8

# Typed value words: Res_value size (8), res0 (0) and dataType in the top byte
TYPE_ID_REF = 0x01000008
TYPE_ATTR_REF = 0x02000008
TYPE_STRING = 0x03000008
TYPE_FLOAT = 0x04000008
TYPE_DIMEN = 0x05000008
TYPE_FRACTION = 0x06000008
TYPE_INT = 0x10000008
TYPE_FLAGS = 0x11000008
TYPE_BOOL = 0x12000008
TYPE_COLOR = 0x1C000008
TYPE_COLOR2 = 0x1D000008

DIMENSION_UNITS = ("px", "dp", "sp", "pt", "in", "mm")

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
