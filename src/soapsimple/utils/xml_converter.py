# soapsimple/utils/xml_converter.py
"""
Convert an XML fragment into a ParameterTree.

The caller describes the parameters of a SOAP call as plain XML, e.g.

    <userId _value_type="long">900109</userId>
    <filter><status>A</status><unit>TRUCK001</unit></filter>

and this module turns it into the node arena that the transports serialize
into the SOAP Body. The fragment does not need a single root element.
"""

import logging
import re

from lxml import etree

from soapsimple.exceptions import XmlParseError
from soapsimple.models import DEFAULT_VALUE_TYPE, VALUE_TYPE_ATTRIBUTE, ParameterTree

from .xml_parser import make_parser, qualified_name

logger: logging.Logger = logging.getLogger(__name__)

# Synthetic root wrapped around the fragment so sibling elements parse as one document
FRAGMENT_WRAPPER_TAG: str = 'soapsimple-fragment'

# A leading <?xml ...?> declaration cannot appear inside the wrapper element
_XML_DECLARATION_PATTERN: re.Pattern[str] = re.compile(r'^\s*<\?xml\s[^>]*\?>')


def parse_fragment(xml_fragment: str) -> etree._Element:
    """
    Parse an XML fragment inside the synthetic wrapper element.

    A leading XML declaration is dropped first; a DOCTYPE is still rejected.

    Args:
        xml_fragment: Zero or more XML elements, possibly siblings.

    Returns:
        The wrapper element; its children are the fragment's top-level elements.

    Raises:
        XmlParseError: If the fragment is not well-formed.
    """
    body: str = _XML_DECLARATION_PATTERN.sub('', xml_fragment, count=1)
    wrapped: str = f'<{FRAGMENT_WRAPPER_TAG}>{body}</{FRAGMENT_WRAPPER_TAG}>'
    try:
        return etree.fromstring(wrapped.encode('utf-8'), parser=make_parser())
    except etree.XMLSyntaxError as parse_error:
        logger.error('Failed to parse request XML: %r', parse_error)
        raise XmlParseError(f'Error parsing XML: {parse_error}') from parse_error


def _attribute_name(element: etree._Element, name: str) -> str:
    """Map lxml's '{uri}local' attribute names back to 'prefix:local'."""
    if not name.startswith('{'):
        return name

    namespace, _, local = name[1:].partition('}')
    if namespace == 'http://www.w3.org/XML/1998/namespace':
        return f'xml:{local}'

    for prefix, uri in element.nsmap.items():
        if prefix is not None and uri == namespace:
            return f'{prefix}:{local}'
    return local


def _namespace_declarations(element: etree._Element) -> dict[str, str]:
    """
    Namespace declarations made on the element itself, as xmlns attributes.

    lxml keeps declarations out of `attrib`, so they are recovered from the
    difference between the element's and its parent's nsmap. The wrapper
    declares nothing, so top-level elements report everything in scope.
    """
    parent: etree._Element | None = element.getparent()
    inherited: dict[str | None, str] = dict(parent.nsmap) if parent is not None else {}
    declarations: dict[str, str] = {}

    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            declarations['xmlns' if prefix is None else f'xmlns:{prefix}'] = uri

    # <b xmlns=""> inside a default namespace
    if None in inherited and None not in element.nsmap:
        declarations['xmlns'] = ''

    return declarations


def _is_leaf(element: etree._Element) -> bool:
    """
    True when the element has exactly one child node and it is text.

    An empty element (<a/> or <a></a>) has no child nodes at all, so it is
    not a leaf; it becomes a branch without children. An element whose only
    child is another element (<a><b>1</b></a>) is a branch as well, so the
    inner element is never flattened into its parent's value.
    """
    return len(element) == 0 and element.text is not None


def _process_node(
    tree: ParameterTree,
    element: etree._Element,
    parent: int | None = None,
) -> None:
    """Add an element (and, for branches, its child elements) to the tree."""
    name: str = qualified_name(element)
    logger.debug('xml->soap node: %r', name)

    value_type: str = DEFAULT_VALUE_TYPE
    attributes: dict[str, str] = _namespace_declarations(element)
    for attribute, attribute_value in element.attrib.items():
        attribute_name: str = _attribute_name(element, str(attribute))
        if attribute_name == VALUE_TYPE_ATTRIBUTE:
            value_type = str(attribute_value)
        else:
            attributes[attribute_name] = str(attribute_value)

    if _is_leaf(element):
        tree.add_elem(
            name=name,
            attributes=attributes,
            parent=parent,
            value=element.text,
            type=value_type,
        )
        return

    branch: int = tree.add_elem(
        name=name,
        attributes=attributes,
        parent=parent,
        type=value_type,
    )

    # Text, comments and processing instructions are not parameters
    for child in element.iterchildren(etree.Element):
        _process_node(tree, child, parent=branch)


def convert_fragment(xml_fragment: str) -> ParameterTree:
    """
    Convert an XML fragment into a ParameterTree.

    Each top-level element of the fragment becomes a root node, in document
    order. An element whose only child is text becomes a leaf carrying that
    text as its value; any other element becomes a branch whose child
    elements are converted recursively. The reserved `_value_type`
    attribute sets a node's type instead of being kept as an attribute.
    Namespace declarations are kept as `xmlns` / `xmlns:<prefix>`
    attributes on the element that makes them.

    Args:
        xml_fragment: The call parameters as XML. May be empty.

    Returns:
        The complete tree. Nothing is returned for a fragment that fails to parse.

    Raises:
        XmlParseError: If the fragment is not well-formed.

    Example:
        >>> tree = convert_fragment("<userId _value_type='long'>900109</userId>")
        >>> node = tree.roots()[0]
        >>> (node.name, node.value, node.type)
        ('userId', '900109', 'long')
    """
    wrapper: etree._Element = parse_fragment(xml_fragment)

    tree = ParameterTree()
    for element in wrapper.iterchildren(etree.Element):
        _process_node(tree, element)

    logger.debug('Converted request XML into %d parameter nodes', len(tree))
    return tree
