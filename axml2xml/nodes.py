from typing import Optional

from .values import Value, format_value


class Attribute:
    """
    An attribute of a start tag.

    `value` is the decoded value as produced by
    [decode_value][axml2xml.values.decode_value] (or the pool string),
    `text` its rendered form.
    """

    def __init__(
        self,
        name: Optional[str],
        namespace: Optional[str] = None,
        prefix: Optional[str] = None,
        value: Value = None,
        resource_id: Optional[int] = None,
    ) -> None:
        self.name = name
        self.namespace = namespace
        self.prefix = prefix
        self.value = value
        self.resource_id = resource_id

    @property
    def text(self) -> str:
        return format_value(self.value)

    @property
    def qname(self) -> str:
        if self.prefix:
            return "{}:{}".format(self.prefix, self.name)
        return self.name or ""

    def __repr__(self):
        return "<Attribute {}={!r}>".format(self.qname, self.value)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "namespace": self.namespace,
            "prefix": self.prefix,
            "value": self.value,
        }


class Text:
    """Character data inside an element."""

    def __init__(self, text: Optional[str]) -> None:
        self.text = text

    def __repr__(self):
        return "<Text {!r}>".format(self.text)


class Node:
    """
    An element of the decoded document.

    `prefixes` holds the `(prefix, uri)` pairs declared right before the
    element's start tag, in declaration order. `children` holds `Node` and
    `Text` items in document order.
    """

    def __init__(
        self,
        uri: str = "",
        local_name: Optional[str] = "",
        qname: Optional[str] = "",
        attrs: Optional[list] = None,
    ) -> None:
        self.uri = uri
        self.local_name = local_name
        self.qname = qname
        self.prefixes = []
        self.attrs = attrs if attrs is not None else []
        self.children = []

    def __repr__(self):
        return "<Node {} attrs={} children={}>".format(
            self.qname, len(self.attrs), len(self.children)
        )

    @property
    def elements(self) -> list:
        """The child elements, without text."""
        return [child for child in self.children if isinstance(child, Node)]

    def iter(self):
        """
        Iterate over this element and all descendant elements, in document order.
        """
        yield self
        for child in self.elements:
            yield from child.iter()

    def to_dict(self) -> dict:
        """
        :returns: the node as plain dicts and lists, text children as strings
        """
        children = []
        for child in self.children:
            children.append(child.to_dict() if isinstance(child, Node) else child.text)
        return {
            "uri": self.uri,
            "localName": self.local_name,
            "qName": self.qname,
            "prefixes": [list(p) for p in self.prefixes],
            "attrs": [attr.to_dict() for attr in self.attrs],
            "children": children,
        }
