# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Convert XML documents to plain dict trees and back.

The tree of ``<user id="7"><name>Max</name><ip>10.0.0.1</ip><ip>10.0.0.2</ip></user>`` is:

    {'user': {'@id': '7', 'name': 'Max', 'ip': ['10.0.0.1', '10.0.0.2']}}

    - an element without attributes and children becomes its text (or None)
    - attributes are stored as ``@name``, mixed text as ``#text``
    - repeated child tags become a list
    - namespace declarations are kept as ``@xmlns`` / ``@xmlns:prefix`` attributes
      and tags keep their document prefix (``soap:Body``)

Comments, processing instructions and text between child elements are not
part of the tree and are dropped when the document is rebuilt.
"""

from __future__ import annotations

from typing import Any

from lxml import etree

from core.pseudonymizer import to_text

ATTRIBUTE_PREFIX = '@'
TEXT_KEY = '#text'
XMLNS = 'xmlns'
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'  # <-- implicit ``xml:`` prefix


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_blank_text=True,
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
    )


def _prefixed(name: str, prefix: str | None) -> str:
    local_name = etree.QName(name).localname
    return f'{prefix}:{local_name}' if prefix else local_name


def _attribute_key(element: etree._Element, name: str) -> str:
    """Key of an attribute, using the document prefix of its namespace."""
    namespace = etree.QName(name).namespace

    if namespace is None:
        return ATTRIBUTE_PREFIX + name

    prefixes = {uri: prefix for prefix, uri in element.nsmap.items() if prefix}
    prefixes[XML_NAMESPACE] = 'xml'
    return ATTRIBUTE_PREFIX + _prefixed(name, prefixes.get(namespace))


def _namespace_declarations(element: etree._Element) -> dict[str, str]:
    """Namespaces declared on this element rather than inherited from its parent."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}

    return {
        (f'{ATTRIBUTE_PREFIX}{XMLNS}:{prefix}' if prefix else f'{ATTRIBUTE_PREFIX}{XMLNS}'): uri
        for prefix, uri in element.nsmap.items()
        if inherited.get(prefix) != uri
    }


def _element_to_node(element: etree._Element) -> Any:
    attributes = _namespace_declarations(element)
    attributes.update((_attribute_key(element, name), value) for name, value in element.attrib.items())

    # entity references are left unresolved and have no string tag
    children = [child for child in element if isinstance(child.tag, str)]

    if not attributes and not children:
        return element.text

    node: dict[str, Any] = dict(attributes)

    if element.text is not None and element.text.strip():
        node[TEXT_KEY] = element.text

    for child in children:
        key = _prefixed(child.tag, child.prefix)
        value = _element_to_node(child)

        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    return node


def parse_xml(data: bytes) -> dict[str, Any]:
    """Parse an XML document into a dict tree keyed by its root tag.

    Raises:
        lxml.etree.XMLSyntaxError: when the document is not well-formed.

    """
    root = etree.fromstring(data, _parser())
    return {_prefixed(root.tag, root.prefix): _element_to_node(root)}


def _qualified_tag(name: str, nsmap: dict[str | None, str], *, use_default: bool) -> str:
    """Resolve a prefixed tree key to the Clark notation lxml expects."""
    prefix, separator, local_name = name.rpartition(':')

    if separator and prefix in nsmap:
        return f'{{{nsmap[prefix]}}}{local_name}'

    if not separator and use_default and nsmap.get(None):
        return f'{{{nsmap[None]}}}{name}'

    return name


def _declared_namespaces(node: Any) -> dict[str | None, str]:
    if not isinstance(node, dict):
        return {}

    declared = {}
    for key, uri in node.items():
        if key == ATTRIBUTE_PREFIX + XMLNS:
            declared[None] = uri
        elif key.startswith(f'{ATTRIBUTE_PREFIX}{XMLNS}:'):
            declared[key.split(':', 1)[1]] = uri

    return declared


def _build_element(
    parent: etree._Element | None,
    key: str,
    node: Any,
    inherited: dict[str | None, str],
) -> etree._Element:
    declared = _declared_namespaces(node)
    nsmap = {**inherited, **declared}
    tag = _qualified_tag(key, nsmap, use_default=True)

    if parent is None:
        element = etree.Element(tag, nsmap=declared or None)
    else:
        element = etree.SubElement(parent, tag, nsmap=declared or None)

    if not isinstance(node, dict):
        if node is not None:
            element.text = to_text(node)
        return element

    for name, value in node.items():
        if name == TEXT_KEY:
            element.text = to_text(value)
        elif name.startswith(ATTRIBUTE_PREFIX):
            attribute = name[len(ATTRIBUTE_PREFIX) :]
            if attribute != XMLNS and not attribute.startswith(f'{XMLNS}:'):
                element.set(_qualified_tag(attribute, nsmap, use_default=False), to_text(value))
        else:
            for item in value if isinstance(value, list) else [value]:
                _build_element(element, name, item, nsmap)

    return element


def build_xml(tree: dict[str, Any]) -> bytes:
    """Serialize a dict tree back to an indented UTF-8 XML document.

    Raises:
        ValueError: when the tree has no single root or holds invalid names or characters.

    """
    if not isinstance(tree, dict) or len(tree) != 1:
        message = 'An XML document needs exactly one root element'
        raise ValueError(message)

    ((root_key, root_node),) = tree.items()
    root = _build_element(None, root_key, root_node, {'xml': XML_NAMESPACE})

    return etree.tostring(root, xml_declaration=True, encoding='UTF-8', pretty_print=True)
