from typing import Optional, Union

from loguru import logger

from .constants import (
    ATTRIBUTE_IX_NAME,
    ATTRIBUTE_IX_NAMESPACE_URI,
    ATTRIBUTE_IX_VALUE_DATA,
    ATTRIBUTE_IX_VALUE_STRING,
    ATTRIBUTE_IX_VALUE_TYPE,
    ATTRIBUTE_SIZE,
    END_TAG_WORDS,
    NAMESPACE_WORDS,
    NO_INDEX,
    START_DOCUMENT_WORDS,
    START_TAG_WORDS,
    TEXT_WORDS,
    WORD_END_NS,
    WORD_END_TAG,
    WORD_EOS,
    WORD_RES_TABLE,
    WORD_SIZE,
    WORD_START_DOCUMENT,
    WORD_START_NS,
    WORD_START_TAG,
    WORD_STRING_TABLE,
    WORD_TEXT,
)
from .cursor import ByteCursor
from .errors import InvalidChunkSize, MagicMismatch
from .listener import LISTENER_EVENTS
from .namespaces import NamespaceScope
from .nodes import Attribute
from .strings import StringPool
from .values import decode_value


class DecoderState:
    """
    Everything one decoding pass mutates.

    A new state is created for every [analyse][axml2xml.decoder.analyse]
    call, so independent buffers can be decoded concurrently.
    """

    def __init__(self, cursor: ByteCursor) -> None:
        self.cursor = cursor
        self.offset = 0
        self.strings = StringPool.empty()
        self.resource_ids = []
        self.namespaces = NamespaceScope()
        self.document_size = None
        self.ended = False

    def __repr__(self):
        return "<DecoderState offset='0x{:08x}' strings={} resource_ids={}>".format(
            self.offset, len(self.strings), len(self.resource_ids)
        )

    def word(self, index: int) -> int:
        """
        :returns: the `index`th 32-bit word of the chunk at the current offset
        """
        return self.cursor.read_u32(self.offset + index * WORD_SIZE)

    def get_string(self, index: int) -> Optional[str]:
        return self.strings.get(index)


class ChunkDecoder:
    """
    `ChunkDecoder` walks the AXML chunk stream in a single forward pass.

    Each iteration reads the 32-bit tag word at the current offset and hands
    the chunk to its handler, which reads the chunk's fields, updates the
    [DecoderState][axml2xml.decoder.DecoderState] and emits the listener
    event. Unknown tag words are skipped one word at a time.

    In strict mode the buffer must start with the document header, directly
    followed by the string pool, otherwise
    [MagicMismatch][axml2xml.errors.MagicMismatch] is raised.
    """

    def __init__(self, listener=None, strict: bool = False) -> None:
        self.strict = strict
        # Resolve the listener callbacks once, missing ones are dropped
        self._callbacks = {
            name: getattr(listener, name, None) for name in LISTENER_EVENTS
        }
        self._handlers = {
            WORD_START_DOCUMENT: self._parse_start_document,
            WORD_STRING_TABLE: self._parse_string_table,
            WORD_RES_TABLE: self._parse_resource_table,
            WORD_START_NS: self._parse_start_namespace,
            WORD_END_NS: self._parse_end_namespace,
            WORD_START_TAG: self._parse_start_tag,
            WORD_END_TAG: self._parse_end_tag,
            WORD_TEXT: self._parse_text,
        }

    def _emit(self, event: str, *args) -> None:
        callback = self._callbacks[event]
        if callback is not None:
            callback(*args)

    def run(self, buff: Union[bytes, bytearray, memoryview]) -> DecoderState:
        """
        Decode the whole buffer.

        :param buff: the AXML bytes
        :raises TruncatedInput: if a chunk reaches past the end of the buffer
        :raises MagicMismatch: in strict mode, if the header words are wrong
        :returns: the final decoder state
        """
        state = DecoderState(ByteCursor(buff))
        logger.debug(f"buff_size: {len(state.cursor)}")

        if self.strict:
            self._expect(state, WORD_START_DOCUMENT)

        while state.offset < len(state.cursor):
            word0 = state.word(0)
            if word0 == WORD_EOS:
                logger.debug("End of stream at offset 0x{:08x}".format(state.offset))
                break

            handler = self._handlers.get(word0)
            if handler is None:
                logger.debug(
                    "Unknown chunk word 0x{:08x} at offset 0x{:08x}, skipping one word".format(
                        word0, state.offset
                    )
                )
                state.offset += WORD_SIZE
                continue
            handler(state)

        self._end_document(state)
        return state

    def _expect(self, state: DecoderState, expected: int) -> None:
        actual = state.word(0)
        if actual != expected:
            raise MagicMismatch(state.offset, expected, actual)

    def _end_document(self, state: DecoderState) -> None:
        if state.ended:
            return
        state.ended = True
        if len(state.namespaces) > 0:
            logger.warning("Not all namespace mappings were closed! Malformed AXML?")
        self._emit("end_document")

    def _parse_start_document(self, state: DecoderState) -> None:
        """
        A doc starts with the following 4bytes words :

        * 0th word : 0x00080003
        * 1st word : chunk size, the size of the whole document
        """
        state.cursor.require(state.offset, START_DOCUMENT_WORDS * WORD_SIZE)
        state.document_size = state.word(1)
        logger.debug(f"document_size: {state.document_size}")

        # The declared size covers every following chunk
        state.cursor.require(state.offset, state.document_size)
        if state.offset + state.document_size < len(state.cursor):
            logger.warning(
                "Declared filesize ({}) is smaller than total file size ({}). "
                "Was something appended to the file? Trying to parse it anyways.".format(
                    state.document_size, len(state.cursor)
                )
            )

        self._emit("start_document")
        state.offset += START_DOCUMENT_WORDS * WORD_SIZE

        if self.strict:
            self._expect(state, WORD_STRING_TABLE)

    def _parse_string_table(self, state: DecoderState) -> None:
        state.strings, chunk_size = StringPool.decode(state.cursor, state.offset)
        logger.debug("STRING_POOL {}".format(state.strings))
        state.offset += chunk_size

    def _parse_resource_table(self, state: DecoderState) -> None:
        """
        the resource ids table starts with the following 4bytes words :

        * 0th word : 0x00080180
        * 1st word : chunk size

        followed by one resource id per word.
        """
        state.cursor.require(state.offset, 2 * WORD_SIZE)
        chunk_size = state.word(1)
        if chunk_size < 2 * WORD_SIZE:
            raise InvalidChunkSize(state.offset, chunk_size, 2 * WORD_SIZE)
        state.cursor.require(state.offset, chunk_size)

        logger.debug("AXML contains a RESOURCE MAP")
        state.resource_ids = []
        for i in range(chunk_size // WORD_SIZE - 2):
            state.resource_ids.append(state.word(i + 2))
            logger.debug(f"resource_ids[{i}]: 0x{state.resource_ids[i]:08x}")

        state.offset += chunk_size

    def _read_namespace(self, state: DecoderState) -> tuple:
        """
        A namespace tag contains the following 4bytes words :

        * 0th word : 0x00100100 = Start NS / 0x00100101 = end NS
        * 1st word : chunk size
        * 2nd word : line this tag appeared
        * 3rd word : optional xml comment for element (usually 0xFFFFFF)
        * 4th word : index of namespace prefix in the string pool
        * 5th word : index of namespace uri in the string pool
        """
        state.cursor.require(state.offset, NAMESPACE_WORDS * WORD_SIZE)
        prefix = state.get_string(state.word(4))
        uri = state.get_string(state.word(5))
        state.offset += NAMESPACE_WORDS * WORD_SIZE
        return prefix, uri

    def _parse_start_namespace(self, state: DecoderState) -> None:
        prefix, uri = self._read_namespace(state)
        logger.debug(
            "Start of Namespace mapping: prefix '{}' --> uri '{}'".format(prefix, uri)
        )
        if not uri:
            logger.warning(
                "Namespace prefix '{}' resolves to empty URI. This might be a packer.".format(prefix)
            )
        self._emit("start_prefix_mapping", prefix, uri)
        state.namespaces.push(uri, prefix)

    def _parse_end_namespace(self, state: DecoderState) -> None:
        prefix, uri = self._read_namespace(state)
        logger.debug(
            "End of Namespace mapping: prefix '{}' --> uri '{}'".format(prefix, uri)
        )
        self._emit("end_prefix_mapping", prefix, uri)
        state.namespaces.pop(uri)

    def _resolve_tag_name(self, state: DecoderState) -> tuple:
        """
        Read the namespace uri (word 4) and name (word 5) of a start or end tag.

        :returns: tuple of (uri, local name, qualified name)
        """
        uri_idx = state.word(4)
        name = state.get_string(state.word(5))
        if uri_idx == NO_INDEX:
            return "", name, name
        uri = state.get_string(uri_idx)
        return uri or "", name, state.namespaces.qualify(uri, name)

    def _parse_start_tag(self, state: DecoderState) -> None:
        """
        A start tag will start with the following 4bytes words :

        * 0th word : 0x00100102 = Start_Tag
        * 1st word : chunk size
        * 2nd word : line this tag appeared in the source XML
        * 3rd word : optional xml comment for element (usually 0xFFFFFF)
        * 4th word : index of namespace uri in the string pool, or 0xFFFFFFFF for default NS
        * 5th word : index of element name in the string pool
        * 6th word : size of attribute structures to follow
        * 7th word : number of attributes following the start tag (low 16 bits)
        * 8th word : index of id attribute (0 if none)
        """
        state.cursor.require(state.offset, START_TAG_WORDS * WORD_SIZE)
        uri, name, qname = self._resolve_tag_name(state)
        attribute_count = state.cursor.read_u16(state.offset + 7 * WORD_SIZE)
        logger.debug(f"START_TAG: {qname} attribute_count: {attribute_count}")

        # offset to start of attributes
        state.offset += START_TAG_WORDS * WORD_SIZE
        state.cursor.require(state.offset, attribute_count * ATTRIBUTE_SIZE)

        attrs = []
        for _ in range(attribute_count):
            attrs.append(self._parse_attribute(state))
            state.offset += ATTRIBUTE_SIZE

        self._emit("start_element", uri, name, qname, attrs)

    def _parse_attribute(self, state: DecoderState) -> Attribute:
        """
        An attribute will have the following 4bytes words :

        * 0th word : index of namespace uri in the string pool, or 0xFFFFFFFF for default NS
        * 1st word : index of attribute name in the string pool
        * 2nd word : index of attribute value, or 0xFFFFFFFF if value is a typed value
        * 3rd word : value type
        * 4th word : resource id value
        """
        ns_idx = state.word(ATTRIBUTE_IX_NAMESPACE_URI)
        name_idx = state.word(ATTRIBUTE_IX_NAME)
        value_idx = state.word(ATTRIBUTE_IX_VALUE_STRING)
        value_type = state.word(ATTRIBUTE_IX_VALUE_TYPE)
        value_data = state.word(ATTRIBUTE_IX_VALUE_DATA)

        attr = Attribute(state.get_string(name_idx))

        # Attribute names of the android namespace are backed by a resource id
        if name_idx < len(state.resource_ids):
            attr.resource_id = state.resource_ids[name_idx]

        if ns_idx != NO_INDEX:
            uri = state.get_string(ns_idx)
            if uri in state.namespaces:
                attr.namespace = uri
                attr.prefix = state.namespaces.prefix_for(uri)

        if value_idx == NO_INDEX:
            attr.value = decode_value(value_type, value_data, state.strings)
        else:
            attr.value = state.get_string(value_idx)

        logger.debug("found an attribute: {}='{}'".format(attr.qname, attr.value))
        return attr

    def _parse_end_tag(self, state: DecoderState) -> None:
        """
        EndTag contains the following 4bytes words :

        * 0th word : 0x00100103 = End_Tag
        * 1st word : chunk size
        * 2nd word : line this tag appeared in the source XML
        * 3rd word : optional xml comment for element (usually 0xFFFFFF)
        * 4th word : index of namespace name in the string pool, or 0xFFFFFFFF for default NS
        * 5th word : index of element name in the string pool
        """
        state.cursor.require(state.offset, END_TAG_WORDS * WORD_SIZE)
        uri, name, qname = self._resolve_tag_name(state)
        logger.debug(f"END_TAG: {qname}")
        self._emit("end_element", uri, name, qname)
        state.offset += END_TAG_WORDS * WORD_SIZE

    def _parse_text(self, state: DecoderState) -> None:
        """
        A text will start with the following 4bytes word :

        * 0th word : 0x00100104 = Text
        * 1st word : chunk size
        * 2nd word : line this element appeared in the source XML
        * 3rd word : optional xml comment for element (usually 0xFFFFFF)
        * 4th word : string index in string table
        * 5th word : typed value header (always 8)
        * 6th word : typed value data (always 0)
        """
        state.cursor.require(state.offset, TEXT_WORDS * WORD_SIZE)
        text = state.get_string(state.word(4))
        logger.debug(f"TEXT: {text!r}")
        self._emit("character_data", text)
        state.offset += TEXT_WORDS * WORD_SIZE


def analyse(buff: Union[bytes, bytearray, memoryview], listener=None, strict: bool = False) -> DecoderState:
    """
    Analyse an AXML buffer, calling the listener for every event.

    :param buff: the AXML bytes
    :param listener: a [Listener][axml2xml.listener.Listener], or any object
        with a subset of its methods
    :param strict: validate the document header and string pool tag words
    :raises TruncatedInput: if a chunk reaches past the end of the buffer
    :raises MagicMismatch: in strict mode, if a header tag word is wrong
    :returns: the decoder state after the pass (string pool, resource ids)
    """
    return ChunkDecoder(listener, strict=strict).run(buff)
