# soapsimple/client.py
"""
SOAP Client

This module provides a simple client for talking with SOAP web services:
throw a bit of XML at it and get some XML back. It converts the caller's
XML into SOAP parameters, hands them to a transport, and checks what comes
back for transport errors, malformed XML and SOAP faults.

Use DotNetSoapClient for .NET (ASMX) services and GenericSoapClient for
everything else; if one doesn't work, try the other.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lxml import etree

from soapsimple.exceptions import XmlParseError, error_for_kind
from soapsimple.models import FailureKind, FetchResult, ParameterTree
from soapsimple.transport import DotNetTransport, GenericTransport, SoapTransport
from soapsimple.utils import (
    ServiceSection,
    convert_fragment,
    extract_soap_body,
    load_config,
    normalize_response,
    setup_logger_from_config,
)

# Set up module-level logger
logger: logging.Logger = logging.getLogger(__name__)


class SoapClient:
    """
    Client calling the methods of one SOAP service.

    The client keeps the outcome of the last call on the instance, so it is
    not safe to share between threads without external locking.

    Attributes:
        config: The validated service configuration.
        transport: The transport used to deliver calls.
        results: XML string returned by the last successful call.
        results_document: Parsed root element of `results`.
        error: Message describing why the last call failed, if it did.
        last_result: The full FetchResult of the last call.

    Usage:
        >>> client = DotNetSoapClient({
        ...     'uri': 'http://www.yourdomain.com/services',
        ...     'proxy': 'http://www.yourproxy.com/services/services.asmx',
        ...     'xmlns': 'http://www.yourdomain.com/services',
        ... })
        >>> xml = "<userId _value_type='long'>900109</userId>"
        >>> if client.fetch('GetActivity', xml) is not None:
        ...     print(client.results)
        ... else:
        ...     print('Problem using service: ' + client.error)
    """

    # Subclasses set the transport used when none is passed in
    transport_class: type[SoapTransport] | None = None

    def __init__(
        self,
        config: ServiceSection | Mapping[str, Any],
        transport: SoapTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: A ServiceSection, or a mapping with at least uri, proxy
                    and xmlns (soapversion defaults to '1.1', timeout to 30).
            transport: The transport to use. Defaults to an instance of the
                       class's transport_class.

        Raises:
            pydantic.ValidationError: If uri, proxy or xmlns is missing or invalid.
            TypeError: If no transport is given and the class has none.
        """
        if isinstance(config, ServiceSection):
            self.config: ServiceSection = config
        else:
            self.config = ServiceSection.model_validate(dict(config))

        if transport is None:
            if self.transport_class is None:
                raise TypeError(
                    f'{type(self).__name__} needs a transport; '
                    'use DotNetSoapClient or GenericSoapClient'
                )
            transport = self.transport_class()

        self.transport: SoapTransport = transport

        self.results: str | None = None
        self.results_document: etree._Element | None = None
        self.error: str | None = None
        self.last_result: FetchResult | None = None

        logger.debug('Initialized %r', self)

    @classmethod
    def from_config_file(
        cls, config_path: Path | str, transport: SoapTransport | None = None
    ) -> 'SoapClient':
        """
        Build a client from a YAML file and configure package logging from it.

        Args:
            config_path: Path to a config.yaml with 'service' and 'logging' sections.
            transport: Optional transport overriding the class default.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the configuration is invalid.
        """
        logger.info('Loading SOAP service configuration from: %r', config_path)
        file_config = load_config(config_path)
        setup_logger_from_config(file_config.logging)
        return cls(file_config.service, transport=transport)

    # ------------------------------------------------------------------
    # Configuration accessors
    # ------------------------------------------------------------------

    @property
    def uri(self) -> str:
        return self.config.uri

    @property
    def proxy(self) -> str:
        return str(self.config.proxy)

    @property
    def xmlns(self) -> str:
        return self.config.xmlns

    @property
    def soapversion(self) -> str:
        return self.config.soapversion

    @property
    def timeout(self) -> float:
        return self.config.timeout

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _call(self, method: str | None, xml: str | None) -> FetchResult:
        """Run one call through converter, transport and normalizer."""
        if not method or not method.strip():
            logger.error('Cannot call a SOAP method without a method name')
            return FetchResult.failure(
                'method is required', FailureKind.MISSING_PARAMETER
            )

        if xml is None:
            logger.error('Cannot call %r without an xml argument', method)
            return FetchResult.failure('xml is required', FailureKind.MISSING_PARAMETER)

        try:
            tree: ParameterTree = convert_fragment(xml)
        except XmlParseError as parse_error:
            return FetchResult.failure(str(parse_error), parse_error.kind)

        for depth, node in tree.walk():
            logger.debug('%s%s (%s)', '  ' * depth, node.name, node.type)

        raw_response: str = self.transport.send(tree, method, self.config)

        return normalize_response(raw_response, self.config.strip_default_namespace)

    def fetch(self, method: str | None, xml: str | None) -> str | None:
        """
        Call a SOAP method.

        Args:
            method: The SOAP method name, e.g. 'GetActivity'.
            xml: The method's parameters as XML; the part inside the method
                 element of the service descriptor. May be empty, never None.
                 Add _value_type to an element to set its SOAP type.

        Returns:
            The response XML (SOAP wrapper included) on success, or None. On
            None, `error` says what went wrong: unparseable request XML, a
            transport problem, an unparseable response, or a SOAP fault.
            Callers still need to validate that the XML holds what they expect.

        Example:
            >>> xml_result = client.fetch('GetActivity', "<userId _value_type='long'>900109</userId>")
        """
        logger.info('Calling SOAP method: %r', method)

        self.error = None
        self.results = None
        self.results_document = None

        result: FetchResult = self._call(method, xml)
        self.last_result = result

        if not result.ok:
            self.error = result.error
            logger.warning('SOAP method %r failed: %s', method, result.error)
            return None

        self.results = result.xml
        self.results_document = result.document
        return result.xml

    def fetch_or_raise(self, method: str | None, xml: str | None) -> str:
        """
        Call a SOAP method, raising instead of returning None on failure.

        Raises:
            MissingParameterError: If the method name or xml is missing.
            XmlParseError: If the request XML or the response is not well-formed.
            TransportError: If the transport reported a status line.
            ApplicationFaultError: If the response carries a SOAP fault.
        """
        xml_result: str | None = self.fetch(method, xml)
        if xml_result is not None:
            return xml_result

        failed: FetchResult | None = self.last_result
        kind: FailureKind = (
            failed.kind if failed and failed.kind else FailureKind.TRANSPORT_ERROR
        )
        raise error_for_kind(kind)(self.error or '')

    def results_body(self) -> etree._Element:
        """
        The SOAP Body of the last successful response.

        Raises:
            ValueError: If there is no successful response or it has no Body.
        """
        if self.results_document is None:
            raise ValueError('No successful response to extract a SOAP Body from')
        return extract_soap_body(self.results_document)

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}('
            f'proxy={self.config.proxy}, '
            f'uri={self.config.uri}, '
            f'soapversion={self.config.soapversion}'
            f')'
        )


class DotNetSoapClient(SoapClient):
    """Client for .NET services: SOAPAction uri/method, method in the xmlns namespace."""

    transport_class = DotNetTransport


class GenericSoapClient(SoapClient):
    """Client for non-.NET services: SOAPAction uri#method, prefixed method element."""

    transport_class = GenericTransport
