LISTENER_EVENTS = (
    "start_document",
    "end_document",
    "start_prefix_mapping",
    "end_prefix_mapping",
    "start_element",
    "end_element",
    "character_data",
)


class Listener:
    """
    Receiver of the events produced by [analyse][axml2xml.decoder.analyse].

    Every method is a no-op; subclasses override the events they need.
    `analyse` also accepts objects that do not derive from this class,
    missing methods are simply not called.
    """

    def start_document(self) -> None:
        """Receive notification of the beginning of a document."""

    def end_document(self) -> None:
        """Receive notification of the end of a document."""

    def start_prefix_mapping(self, prefix, uri) -> None:
        """
        Begin the scope of a prefix-URI Namespace mapping.

        :param prefix: the Namespace prefix being declared
        :param uri: the Namespace URI the prefix is mapped to
        """

    def end_prefix_mapping(self, prefix, uri) -> None:
        """
        End the scope of a prefix-URI mapping.

        :param prefix: the prefix that was being mapped
        :param uri: the Namespace URI the prefix is mapped to
        """

    def start_element(self, uri, local_name, qname, attrs) -> None:
        """
        Receive notification of the beginning of an element.

        :param uri: the Namespace URI, or the empty string if the element has no Namespace URI
        :param local_name: the local name (without prefix)
        :param qname: the qualified name (with prefix)
        :param attrs: list of [Attribute][axml2xml.tree.Attribute], empty if there are none
        """

    def end_element(self, uri, local_name, qname) -> None:
        """
        Receive notification of the end of an element.

        :param uri: the Namespace URI, or the empty string if the element has no Namespace URI
        :param local_name: the local name (without prefix)
        :param qname: the qualified XML name (with prefix)
        """

    def character_data(self, text) -> None:
        """Receive notification of character data inside an element."""
