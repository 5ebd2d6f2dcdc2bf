import re
from typing import Optional, Union

from loguru import logger
from lxml import etree

from .constants import XML_DECLARATION
from .nodes import Node, Text
from .tree import parse

_NAME_START = re.compile(r"^[a-zA-Z_]")
_NAME_INVALID = re.compile(r"[^a-zA-Z0-9._-]")
_VALUE_VALID = re.compile(
    '^[\u0020-\uD7FF\u0009\u000A\u000D\uE000-\uFFFD\U00010000-\U0010FFFF]*$'
)
_VALUE_INVALID = re.compile(
    '[^\u0020-\uD7FF\u0009\u000A\u000D\uE000-\uFFFD\U00010000-\U0010FFFF]'
)


def _str(value: Optional[str]) -> str:
    return "" if value is None else value


def serialize(node: Node, depth: int = 0) -> str:
    """
    Render a node and its children as XML text.

    Children are indented by one tab per level, elements without children
    are self-closing. Names and values are written as they are, without
    escaping; use [tostring][axml2xml.printer.tostring] for escaped output.

    :param node: the element to render
    :param depth: indentation level of the element
    :returns: the XML text, one tag per line
    """
    indent = "\t" * depth
    buff = [indent, "<", _str(node.qname)]

    for prefix, uri in node.prefixes:
        buff.append(' xmlns:{}="{}"'.format(_str(prefix), _str(uri)))

    for attr in node.attrs:
        buff.append(" ")
        if attr.prefix:
            buff.append(attr.prefix + ":")
        buff.append('{}="{}"'.format(_str(attr.name), attr.text))

    if not node.children:
        buff.append(" /")
    buff.append(">\n")

    if node.children:
        for child in node.children:
            if isinstance(child, Text):
                buff.append("{}\t{}\n".format(indent, _str(child.text)))
            else:
                buff.append(serialize(child, depth + 1))
        buff.append("{}</{}>\n".format(indent, _str(node.qname)))

    return "".join(buff)


def convert(buff: Union[bytes, bytearray, memoryview], strict: bool = False) -> str:
    """
    Convert an AXML buffer to XML text

    :param buff: the AXML bytes
    :param strict: validate the document header and string pool tag words
    :returns: the XML declaration followed by the rendered document
    """
    root = parse(buff, strict=strict)
    if root is None:
        logger.warning("Document contains no element")
        return XML_DECLARATION
    return XML_DECLARATION + serialize(root)


def _clean_uri(uri: Optional[str]) -> Optional[str]:
    if not uri:
        return None
    uri = uri.strip()
    if not _VALUE_VALID.match(uri):
        logger.warning("Invalid character in namespace uri {!r}. Dropping the namespace.".format(uri))
        return None
    return uri


def _print_namespace(uri: Optional[str]) -> str:
    uri = _clean_uri(uri)
    if uri:
        return "{{{}}}".format(uri)
    return ""



def _fix_name(prefix: str, name: Optional[str], nsmap: dict) -> tuple[str, str]:
    """
    Apply some fixes to element names and attribute names.
    Try to get conform to:
    > Like element names, attribute names are case-sensitive and must start with a letter or underscore.
    > The rest of the name can contain letters, digits, hyphens, underscores, and periods.

    If the name carries a known namespace prefix itself ('android:foobar') and
    the actual prefix is empty, the prefix is moved into the namespace part.
    All other unwanted characters are replaced by underscores.

    :param prefix: The existing prefix uri, as `{uri}` or empty
    :param name: Name of the attribute or tag
    :param nsmap: the namespace mapping in scope, prefix to uri
    :return: a fixed version of prefix and name
    """
    name = _str(name)
    if ":" in name and prefix == '':
        embedded_prefix, new_name = name.split(":", 1)
        if embedded_prefix in nsmap:
            logger.info(
                "Prefix '{}' is in namespace mapping, assume that it is a prefix.".format(embedded_prefix)
            )
            prefix = _print_namespace(nsmap[embedded_prefix])
            name = new_name
        else:
            logger.warning(
                "Confused: name contains a unknown namespace prefix: '{}'.".format(name)
            )
    if not _NAME_START.match(name):
        logger.warning(
            "Invalid start for name '{}'. XML name must start with a letter.".format(name)
        )
        name = "_{}".format(name)
    if _NAME_INVALID.search(name):
        logger.warning("Name '{}' contains invalid characters!".format(name))
        name = _NAME_INVALID.sub("_", name)
    return prefix, name


def _fix_value(value: str) -> str:
    """
    Return a cleaned version of a value
    according to the XML 1.0 character range:
    > Char	   ::=   	#x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]

    See <https://www.w3.org/TR/xml/#charsets>
    """
    # Reading string until \x00. This is the same as aapt does.
    if "\x00" in value:
        logger.warning(
            "Null byte found in attribute value at position {}".format(value.find("\x00"))
        )
        value = value[: value.find("\x00")]

    if not _VALUE_VALID.match(value):
        logger.warning("Invalid character in value found. Replacing with '_'.")
        value = _VALUE_INVALID.sub('_', value)
    return value


def _declared_nsmap(node: Node) -> dict:
    nsmap = {}
    for prefix, uri in node.prefixes:
        uri = _clean_uri(uri)
        # prefixes mapping to an empty uri, or empty prefixes, are packer leftovers
        if not prefix or not uri:
            continue
        if _NAME_INVALID.search(prefix) or not _NAME_START.match(prefix):
            logger.warning("Dropping invalid namespace prefix '{}'".format(prefix))
            continue
        nsmap[prefix] = uri
    return nsmap


def _make_element(parent, tag: str, nsmap: dict):
    if parent is None:
        return etree.Element(tag, nsmap=nsmap)
    return etree.SubElement(parent, tag, nsmap=nsmap)


def _build(node: Node, parent, scope: dict):
    nsmap = _declared_nsmap(node)
    scope = dict(scope, **nsmap)

    uri, name = _fix_name(_print_namespace(node.uri), node.local_name, scope)
    try:
        elem = _make_element(parent, "{}{}".format(uri, name), nsmap)
    except ValueError as e:
        # lxml is stricter about namespace uris than the character check
        logger.warning("Can not create element '{}{}': {}. Dropping its namespaces.".format(uri, name, e))
        nsmap = {}
        elem = _make_element(parent, name, nsmap)

    for attr in node.attrs:
        uri, name = _fix_name(_print_namespace(attr.namespace), attr.name, scope)
        key = "{}{}".format(uri, name)
        if key in elem.attrib:
            logger.warning("Duplicate attribute '{}'! Will overwrite!".format(key))
        value = _fix_value(attr.text)
        try:
            elem.set(key, value)
        except ValueError as e:
            logger.warning("Can not set attribute '{}': {}. Dropping its namespace.".format(key, e))
            elem.set(name, value)

    for child in node.children:
        if isinstance(child, Text):
            text = _fix_value(_str(child.text))
            if len(elem):
                elem[-1].tail = (elem[-1].tail or "") + text
            else:
                elem.text = (elem.text or "") + text
        else:
            _build(child, elem, scope)

    return elem


def to_etree(node: Node) -> etree._Element:
    """
    Convert a decoded tree into a lxml ElementTree, which can easily be
    converted into well-formed, escaped XML.

    Names which are not valid XML names are repaired and characters that
    XML does not allow are replaced in values.

    :returns: `lxml.etree.Element` object
    """
    return _build(node, None, {})


def tostring(node: Node, pretty: bool = True) -> bytes:
    """
    Get the XML as an UTF-8 string

    :returns: bytes encoded as UTF-8
    """
    return etree.tostring(to_etree(node), encoding="utf-8", pretty_print=pretty)
