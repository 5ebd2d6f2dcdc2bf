"""
Decoder for Android binary XML (AXML), the compiled form of
`AndroidManifest.xml` and resource layouts inside APK files.
"""

from loguru import logger

from .decoder import ChunkDecoder, DecoderState, analyse
from .errors import InvalidChunkSize, MagicMismatch, ResParserError, TruncatedInput
from .listener import Listener
from .nodes import Attribute, Node, Text
from .printer import convert, serialize, to_etree, tostring
from .tree import TreeBuilder, parse

__version__ = "0.1.0"

__all__ = [
    "Attribute",
    "ChunkDecoder",
    "DecoderState",
    "InvalidChunkSize",
    "Listener",
    "MagicMismatch",
    "Node",
    "ResParserError",
    "Text",
    "TreeBuilder",
    "TruncatedInput",
    "analyse",
    "convert",
    "parse",
    "serialize",
    "to_etree",
    "tostring",
]

# Silent unless the application opts in with logger.enable("axml2xml")
logger.disable("axml2xml")
