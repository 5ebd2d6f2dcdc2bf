from typing import Optional, Union

from loguru import logger

from .decoder import analyse
from .listener import Listener
from .nodes import Node, Text


class TreeBuilder(Listener):
    """
    Listener which builds a tree of [Node][axml2xml.nodes.Node] objects.

    Two stacks are kept in step: the open nodes (with a synthetic root at
    the bottom) and, per open node, the namespaces declared while it was
    the innermost open node. When an element closes, it receives a copy of
    the namespaces that were declared right before its start tag.
    """

    def __init__(self) -> None:
        self.root = Node()
        self._nodes = [self.root]
        self._prefixes = [[]]

    @property
    def current(self) -> Node:
        return self._nodes[-1]

    def start_prefix_mapping(self, prefix, uri) -> None:
        self._prefixes[-1].append((prefix, uri))

    def end_prefix_mapping(self, prefix, uri) -> None:
        if not self._prefixes[-1]:
            logger.warning(
                "End of namespace mapping ({}, {}) without open declaration".format(prefix, uri)
            )
            return
        self._prefixes[-1].pop()

    def start_element(self, uri, local_name, qname, attrs) -> None:
        node = Node(uri, local_name, qname, list(attrs))
        self.current.children.append(node)
        self._nodes.append(node)
        self._prefixes.append([])

    def end_element(self, uri, local_name, qname) -> None:
        if len(self._nodes) == 1:
            logger.error("Too many END_TAG! No more elements available to attach to!")
            return
        node = self._nodes.pop()
        self._prefixes.pop()
        if node.qname != qname:
            logger.warning(
                "Closing tag '{}' does not match current stack '{}'. Is the XML malformed?".format(
                    qname, node.qname
                )
            )
        node.prefixes = list(self._prefixes[-1])

    def character_data(self, text) -> None:
        self.current.children.append(Text(text))

    def end_document(self) -> None:
        if len(self._nodes) > 1:
            logger.warning("{} element(s) were not closed".format(len(self._nodes) - 1))

    def get_root(self) -> Optional[Node]:
        """
        :returns: the document element, or None if the document has no element
        """
        elements = self.root.elements
        if len(elements) > 1:
            logger.warning("Document has {} top-level elements, using the first".format(len(elements)))
        return elements[0] if elements else None


def parse(buff: Union[bytes, bytearray, memoryview], strict: bool = False) -> Optional[Node]:
    """
    Parse an AXML buffer to a tree

    :param buff: the AXML bytes
    :param strict: validate the document header and string pool tag words
    :raises TruncatedInput: if a chunk reaches past the end of the buffer
    :raises MagicMismatch: in strict mode, if a header tag word is wrong
    :returns: the document element
    """
    builder = TreeBuilder()
    analyse(buff, builder, strict=strict)
    return builder.get_root()
