# soapsimple/utils/xml_parser.py
"""
XML parsing utilities for SOAP requests and responses.

Provides the hardened lxml parser used for both request fragments and
responses, plus the response normalizer that turns the raw string returned
by a transport into a FetchResult.
"""

import logging
import re
import string

from lxml import etree

from soapsimple.models import FailureKind, FetchResult

logger: logging.Logger = logging.getLogger(__name__)

# Message used when a response is not well-formed XML
UNPARSEABLE_RESPONSE_MESSAGE: str = 'Unable to parse returned data as XML'

# Unprefixed default namespace declarations only; xmlns:foo="..." is left alone
_DEFAULT_NAMESPACE_PATTERN: re.Pattern[str] = re.compile(
    r"""\s+xmlns\s*=\s*(?:"[^"]*"|'[^']*')"""
)

SOAP_ENVELOPE_NAMESPACES: dict[str, str] = {
    '1.1': 'http://schemas.xmlsoap.org/soap/envelope/',
    '1.2': 'http://www.w3.org/2003/05/soap-envelope',
}


def make_parser() -> etree.XMLParser:
    """
    Build an lxml parser with DTD loading, validation and entity expansion off.

    Returns:
        A fresh XMLParser; lxml parsers are not safe to share across threads.
    """
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        dtd_validation=False,
        no_network=True,
        huge_tree=False,
    )


def parse_soap_response(xml_string: str) -> etree._Element:
    """
    Parse a SOAP XML response string into an lxml Element.

    Args:
        xml_string: The raw XML response from the SOAP API.

    Returns:
        The root element of the parsed XML tree.

    Raises:
        etree.XMLSyntaxError: If the XML is malformed.
    """
    return etree.fromstring(xml_string.encode('utf-8'), parser=make_parser())


def qualified_name(element: etree._Element) -> str:
    """Element name as written in the document, e.g. 'soap:Fault'."""
    name: str = str(element.tag).rpartition('}')[2]
    if element.prefix:
        return f'{element.prefix}:{name}'
    return name


def local_name(element: etree._Element) -> str:
    """Element name without namespace or prefix, e.g. 'Fault'."""
    return qualified_name(element).rpartition(':')[2]


def strip_default_namespaces(xml_string: str) -> str:
    """
    Remove every unprefixed xmlns="..." declaration from an XML string.

    Responses from .NET services usually put the payload in a default
    namespace, which would force every later lookup to be namespace
    qualified. Prefixed declarations are kept, so prefixed names still parse.
    """
    return _DEFAULT_NAMESPACE_PATTERN.sub('', xml_string)


def is_transport_failure(raw: str | None) -> bool:
    """
    True when a transport returned nothing or a numeric status line.

    Transports report failures as strings such as '500 Internal Server Error';
    XML never starts with a digit.
    """
    return not raw or raw[0] in string.digits


def find_fault_string(root: etree._Element) -> str | None:
    """
    Return the text of the first SOAP fault string in the document.

    Every element whose local name is 'faultstring' is considered in
    document order; it counts as a genuine fault only when its parent's
    local name contains 'Fault' (e.g. 'Fault' or 'soap:Fault'); the prefix
    is ignored.

    Args:
        root: The root element of the parsed response.

    Returns:
        The first genuine fault string, or None if the response has no fault.
    """
    for element in root.iter(etree.Element):
        if local_name(element) != 'faultstring':
            continue

        parent: etree._Element | None = element.getparent()
        if parent is None or 'Fault' not in local_name(parent):
            logger.debug('Ignoring faultstring outside of a Fault element')
            continue

        return ''.join(element.itertext())

    return None


def extract_soap_body(root: etree._Element) -> etree._Element:
    """
    Extract the Body element from a SOAP 1.1 or SOAP 1.2 envelope.

    Args:
        root: The root element of the SOAP envelope.

    Returns:
        The Body element containing the actual response data.

    Raises:
        ValueError: If no Body element is found.
    """
    for namespace in SOAP_ENVELOPE_NAMESPACES.values():
        body: etree._Element | None = root.find(f'.//{{{namespace}}}Body')
        if body is not None:
            return body

    raise ValueError('No SOAP Body element found in response')


def normalize_response(
    raw: str | None, strip_default_namespace: bool = True
) -> FetchResult:
    """
    Turn the raw string returned by a transport into a FetchResult.

    Steps:
    1. Empty responses and numeric status lines are transport failures.
    2. Default namespace declarations are optionally stripped.
    3. The response is parsed with the hardened parser.
    4. The document is scanned for a SOAP fault; the first one wins.

    Args:
        raw: The raw response from the transport.
        strip_default_namespace: Whether to remove xmlns="..." declarations
                                 before parsing.

    Returns:
        FetchResult.success with the (possibly rewritten) XML and its parsed
        root, or FetchResult.failure with the relevant message and kind.
    """
    if raw is None or is_transport_failure(raw):
        logger.error('Transport error: %r', raw)
        return FetchResult.failure(raw or '', FailureKind.TRANSPORT_ERROR)

    xml_string: str = raw
    if strip_default_namespace:
        xml_string = strip_default_namespaces(xml_string)

    try:
        root: etree._Element = parse_soap_response(xml_string)
    except etree.XMLSyntaxError as parse_error:
        logger.error('%s: %r', UNPARSEABLE_RESPONSE_MESSAGE, parse_error)
        logger.debug('***RESPONSE BODY (XML)***')
        logger.debug(xml_string)
        return FetchResult.failure(
            UNPARSEABLE_RESPONSE_MESSAGE, FailureKind.XML_PARSE_ERROR
        )

    fault_string: str | None = find_fault_string(root)
    if fault_string is not None:
        logger.error('SOAP Fault in response: %r', fault_string)
        return FetchResult.failure(fault_string, FailureKind.APPLICATION_FAULT)

    return FetchResult.success(xml_string, root)
