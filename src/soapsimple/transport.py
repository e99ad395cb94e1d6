# soapsimple/transport.py
"""
SOAP transports

A transport takes the ParameterTree built from the caller's XML, wraps it
in a SOAP envelope for a given method and POSTs it to the service. It
returns the raw response text, or a numeric status line such as
'500 Internal Server Error' when the HTTP exchange failed, so the response
normalizer can tell transport failures apart from XML.

Two flavours of HTTP transport exist, differing only in how the SOAPAction
and the method namespace are attached:

- DotNetTransport: SOAPAction "<uri>/<method>", <method xmlns="<xmlns>">
- GenericTransport: SOAPAction "<uri>#<method>", <namesp1:method xmlns:namesp1="<uri>">
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import requests
from jinja2 import Environment, FileSystemLoader, Template

from soapsimple.models import ParameterTree
from soapsimple.utils.config_loader import ServiceSection
from soapsimple.utils.xml_parser import SOAP_ENVELOPE_NAMESPACES

# Set up module-level logger
logger: logging.Logger = logging.getLogger(__name__)

ENVELOPE_TEMPLATE_NAME: str = 'envelope.xml'

# Prefix SOAP toolkits conventionally give the method namespace of generic services
GENERIC_METHOD_PREFIX: str = 'namesp1'


class SoapTransport(ABC):
    """
    Anything able to deliver a SOAP call and hand back the raw response.

    Implementations must never raise for transport problems; they report
    them as a string starting with a numeric status code instead.
    """

    @abstractmethod
    def send(self, tree: ParameterTree, method: str, config: ServiceSection) -> str:
        """
        Send one SOAP call.

        Args:
            tree: The call parameters.
            method: The SOAP method name.
            config: The service the call is sent to.

        Returns:
            The raw response XML, or a '<code> <reason>' status line on failure.
        """


class HttpSoapTransport(SoapTransport):
    """
    SOAP over HTTP POST using requests, with the envelope rendered by Jinja2.

    Subclasses decide how the SOAPAction and the method element look.

    Attributes:
        jinja_env: The Jinja2 environment for loading and rendering templates.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        """
        Set up the template environment.

        Args:
            templates_dir: Directory holding envelope.xml. Defaults to the
                           templates shipped with the package.

        Raises:
            FileNotFoundError: If the templates directory does not exist.
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / 'templates'

        if not templates_dir.exists():
            error_message: str = f'Templates directory not found at: {templates_dir}'
            logger.error(error_message)
            raise FileNotFoundError(error_message)

        self.jinja_env: Environment = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,  # Automatically escape variables for XML safety
            trim_blocks=True,
            lstrip_blocks=True,
        )
        logger.debug(
            'Jinja2 environment initialized with templates from: %r', templates_dir
        )

    @abstractmethod
    def soap_action(self, method: str, config: ServiceSection) -> str:
        """Return the (unquoted) SOAP action for a method."""

    @abstractmethod
    def method_element(
        self, method: str, config: ServiceSection
    ) -> tuple[str, dict[str, str]]:
        """Return the method element's tag and its attributes."""

    def build_headers(self, method: str, config: ServiceSection) -> dict[str, str]:
        """
        Build the HTTP headers for a SOAP call.

        SOAP 1.1 carries the action in a SOAPAction header; SOAP 1.2 moves
        it into the action parameter of the Content-Type.

        Args:
            method: The SOAP method name.
            config: The service configuration.

        Returns:
            A dictionary of HTTP headers ready for the request.
        """
        action: str = self.soap_action(method, config)

        if config.soapversion == '1.2':
            return {
                'Content-Type': f'application/soap+xml; charset=utf-8; action="{action}"',
                'Accept': 'application/soap+xml, text/xml',
            }

        return {
            'Content-Type': 'text/xml; charset=utf-8',
            'Accept': 'text/xml',
            'SOAPAction': f'"{action}"',
        }

    def render_envelope(
        self, tree: ParameterTree, method: str, config: ServiceSection
    ) -> str:
        """
        Render the SOAP envelope for a call.

        Args:
            tree: The call parameters.
            method: The SOAP method name.
            config: The service configuration.

        Returns:
            The SOAP envelope as an XML string.

        Raises:
            jinja2.TemplateNotFound: If the template file doesn't exist.
        """
        method_tag, method_attributes = self.method_element(method, config)

        template: Template = self.jinja_env.get_template(ENVELOPE_TEMPLATE_NAME)
        rendered_xml: str = template.render(
            envelope_namespace=SOAP_ENVELOPE_NAMESPACES[config.soapversion],
            method_tag=method_tag,
            method_attributes=method_attributes,
            tree=tree,
        )
        logger.debug('Rendered envelope for %r with %d nodes', method, len(tree))
        return rendered_xml

    def send(self, tree: ParameterTree, method: str, config: ServiceSection) -> str:
        headers: dict[str, str] = self.build_headers(method, config)
        body: str = self.render_envelope(tree, method, config)

        try:
            logger.debug(
                'Sending SOAP request to %r (timeout=%r)', str(config.proxy), config.timeout
            )
            response: requests.Response = requests.post(
                str(config.proxy),
                data=body.encode('utf-8'),
                headers=headers,
                timeout=config.timeout,
                verify=config.verify_ssl,
            )

        except requests.exceptions.Timeout as timeout_error:
            logger.error(
                'Request timeout for method %r after %r: %r',
                method,
                config.timeout,
                timeout_error,
            )
            return f'500 Request timed out after {config.timeout}s'

        except requests.exceptions.RequestException as request_error:
            logger.error('Network error for method %r: %r', method, request_error)
            return f'500 {request_error}'

        logger.debug(
            'Received response for method %r: HTTP %r', method, response.status_code
        )

        if response.ok:
            logger.info(
                'Method %r completed (HTTP %r)', method, response.status_code
            )
            return response.text

        # SOAP 1.1 faults travel with HTTP 500; hand the XML on so the fault is reported
        if response.text.lstrip().startswith('<'):
            logger.warning(
                'HTTP %r for method %r carried an XML body', response.status_code, method
            )
            return response.text

        logger.error(
            'HTTP error for method %r: %r %r', method, response.status_code, response.reason
        )
        logger.debug('***REQUEST HEADERS***')
        logger.debug('\n'.join(f'  {k}: {v}' for k, v in headers.items()))
        logger.debug('***REQUEST BODY (XML)***')
        logger.debug(body)
        logger.debug('***RESPONSE BODY***')
        logger.debug(response.text)

        return f'{response.status_code} {response.reason or ""}'.rstrip()


class DotNetTransport(HttpSoapTransport):
    """
    Transport for .NET (ASMX) services.

    .NET expects the SOAPAction as uri/method rather than uri#method, and
    the method element in the service's default namespace.
    """

    def soap_action(self, method: str, config: ServiceSection) -> str:
        return f'{config.uri.rstrip("/")}/{method}'

    def method_element(
        self, method: str, config: ServiceSection
    ) -> tuple[str, dict[str, str]]:
        return method, {'xmlns': config.xmlns}


class GenericTransport(HttpSoapTransport):
    """Transport for other SOAP servers: uri#method and a prefixed method element."""

    def soap_action(self, method: str, config: ServiceSection) -> str:
        return f'{config.uri}#{method}'

    def method_element(
        self, method: str, config: ServiceSection
    ) -> tuple[str, dict[str, str]]:
        return (
            f'{GENERIC_METHOD_PREFIX}:{method}',
            {f'xmlns:{GENERIC_METHOD_PREFIX}': config.uri},
        )
