# soapsimple/__init__.py

from .client import DotNetSoapClient, GenericSoapClient, SoapClient
from .exceptions import (
    ApplicationFaultError,
    MissingParameterError,
    SoapSimpleError,
    TransportError,
    XmlParseError,
)
from .models import FailureKind, FetchResult, ParameterNode, ParameterTree
from .transport import DotNetTransport, GenericTransport, HttpSoapTransport, SoapTransport

__all__: list[str] = [
    # exceptions.py
    'ApplicationFaultError',
    # client.py
    'DotNetSoapClient',
    # transport.py
    'DotNetTransport',
    # models.py
    'FailureKind',
    'FetchResult',
    'GenericSoapClient',
    'GenericTransport',
    'HttpSoapTransport',
    'MissingParameterError',
    'ParameterNode',
    'ParameterTree',
    'SoapClient',
    'SoapSimpleError',
    'SoapTransport',
    'TransportError',
    'XmlParseError',
]
