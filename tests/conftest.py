"""Pytest configuration and shared fixtures for soapsimple tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import yaml
from requests import Response

from soapsimple.utils import ServiceSection


@pytest.fixture
def service_settings() -> dict[str, Any]:
    """Raw settings for a .NET style service."""
    return {
        'uri': 'http://www.yourdomain.com/services',
        'proxy': 'http://www.yourproxy.com/services/services.asmx',
        'xmlns': 'http://www.yourdomain.com/services',
    }


@pytest.fixture
def sample_config(service_settings: dict[str, Any]) -> ServiceSection:
    """Create a sample ServiceSection for testing."""
    return ServiceSection.model_validate(service_settings)


@pytest.fixture
def mock_soap_response() -> str:
    """Create a mock .NET SOAP response for testing."""
    return """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
    <soap:Body>
        <GetActivityResponse xmlns="http://www.yourdomain.com/services">
            <GetActivityResult>
                <Activity>
                    <Id>12345</Id>
                    <Description>Viewing</Description>
                </Activity>
            </GetActivityResult>
        </GetActivityResponse>
    </soap:Body>
</soap:Envelope>"""


@pytest.fixture
def mock_soap_fault() -> str:
    """Create a mock SOAP fault response for testing."""
    return """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
    <soap:Body>
        <soap:Fault>
            <faultcode>soap:Client</faultcode>
            <faultstring>Server was unable to read request.</faultstring>
        </soap:Fault>
    </soap:Body>
</soap:Envelope>"""


def make_response(
    text: str, status_code: int = 200, reason: str = 'OK'
) -> Mock:
    """Create a mock requests.Response object."""
    response = Mock(spec=Response)
    response.status_code = status_code
    response.reason = reason
    response.ok = status_code < 400  # noqa: PLR2004
    response.text = text
    response.headers = {'Content-Type': 'text/xml; charset=utf-8'}
    return response


@pytest.fixture
def mock_requests_response(mock_soap_response: str) -> Mock:
    """Create a successful mock requests.Response object."""
    return make_response(mock_soap_response)


@pytest.fixture
def temp_config_file(tmp_path: Path, service_settings: dict[str, Any]) -> Path:
    """Create a temporary config file for testing."""
    config_path: Path = tmp_path / 'config.yaml'
    config_dict: dict[str, Any] = {
        'service': {
            **service_settings,
            'soapversion': '1.1',
            'timeout': 15,
        },
        'logging': {
            'console_level': 'WARNING',
        },
    }
    config_path.write_text(yaml.safe_dump(config_dict, sort_keys=False))
    return config_path


@pytest.fixture
def response_factory() -> Callable[..., Mock]:
    """Factory building mock requests.Response objects."""
    return make_response
