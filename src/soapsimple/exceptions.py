# soapsimple/exceptions.py
"""Exceptions raised by the soapsimple package."""

from soapsimple.models import FailureKind


class SoapSimpleError(RuntimeError):
    """Base exception for every failure surfaced by a SOAP call."""

    kind: FailureKind = FailureKind.TRANSPORT_ERROR


class XmlParseError(SoapSimpleError):
    """Raised when a request fragment or a response is not well-formed XML."""

    kind = FailureKind.XML_PARSE_ERROR


class MissingParameterError(SoapSimpleError):
    """Raised when the method name or the XML argument was not supplied."""

    kind = FailureKind.MISSING_PARAMETER


class TransportError(SoapSimpleError):
    """Raised when the transport returned a status line instead of XML."""

    kind = FailureKind.TRANSPORT_ERROR


class ApplicationFaultError(SoapSimpleError):
    """Raised when a well-formed response carries a SOAP Fault."""

    kind = FailureKind.APPLICATION_FAULT


_ERRORS_BY_KIND: dict[FailureKind, type[SoapSimpleError]] = {
    FailureKind.XML_PARSE_ERROR: XmlParseError,
    FailureKind.MISSING_PARAMETER: MissingParameterError,
    FailureKind.TRANSPORT_ERROR: TransportError,
    FailureKind.APPLICATION_FAULT: ApplicationFaultError,
}


def error_for_kind(kind: FailureKind) -> type[SoapSimpleError]:
    """Return the exception class matching a failure kind."""
    return _ERRORS_BY_KIND[kind]


__all__: list[str] = [
    'ApplicationFaultError',
    'MissingParameterError',
    'SoapSimpleError',
    'TransportError',
    'XmlParseError',
    'error_for_kind',
]
