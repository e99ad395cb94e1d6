"""Tests for configuration loading."""

import logging
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from soapsimple.utils.config_loader import (
    LoggingSection,
    ServiceSection,
    SoapSimpleConfig,
    load_config,
)


class TestServiceSection:
    """Tests for ServiceSection model."""

    def test_defaults(self) -> None:
        """Test that only uri, proxy and xmlns are required."""
        section = ServiceSection(
            uri='urn:svc', proxy='https://svc.example.com/soap', xmlns='urn:svc'
        )

        assert section.soapversion == '1.1'
        assert section.timeout == 30.0  # noqa: PLR2004
        assert section.strip_default_namespace is True
        assert section.verify_ssl is True

    def test_numeric_soapversion_from_yaml(self) -> None:
        """Test that an unquoted YAML version is accepted."""
        raw = yaml.safe_load('uri: urn:svc\nproxy: http://h/\nxmlns: urn:svc\nsoapversion: 1.2\n')

        assert ServiceSection.model_validate(raw).soapversion == '1.2'

    @pytest.mark.parametrize(
        ('field', 'value'),
        [
            ('soapversion', '1.3'),
            ('timeout', 0),
            ('proxy', 'not a url'),
            ('uri', ''),
            ('unexpected', 'x'),
        ],
    )
    def test_invalid_values_raise(self, field: str, value: object) -> None:
        """Test that invalid settings are rejected."""
        settings: dict[str, object] = {
            'uri': 'urn:svc',
            'proxy': 'http://h/',
            'xmlns': 'urn:svc',
            field: value,
        }

        with pytest.raises(ValidationError):
            ServiceSection.model_validate(settings)


class TestLoggingSection:
    """Tests for LoggingSection model."""

    @pytest.mark.parametrize(
        ('level', 'expected'),
        [(10, logging.DEBUG), ('ERROR', logging.ERROR), ('warning', logging.WARNING)],
    )
    def test_levels_as_names_or_numbers(self, level: str | int, expected: int) -> None:
        """Test that level names and numbers are stored as numbers."""
        section = LoggingSection(console_level=level)

        assert section.console_level == expected
        assert section.file_level is None

    @pytest.mark.parametrize('level', [15, 'LOUD'])
    def test_unknown_level_raises(self, level: str | int) -> None:
        """Test that levels logging does not define are rejected."""
        with pytest.raises(ValidationError):
            LoggingSection(console_level=level)

    def test_file_path_defaults_file_level(self) -> None:
        """Test that file_level defaults to DEBUG when only file_path is set."""
        section = LoggingSection(file_path=Path('soap.log'))

        assert section.file_level == logging.DEBUG

    def test_file_level_without_path_raises(self) -> None:
        """Test that file_level alone is rejected."""
        with pytest.raises(ValidationError, match='file_path is missing'):
            LoggingSection(file_level='DEBUG')


class TestSoapSimpleConfig:
    """Tests for SoapSimpleConfig model."""

    def test_logging_section_is_optional(self) -> None:
        """Test that a config with only a service section is valid."""
        config = SoapSimpleConfig.model_validate(
            {'service': {'uri': 'urn:svc', 'proxy': 'http://h/', 'xmlns': 'urn:svc'}}
        )

        assert config.logging.console_level == logging.INFO

    def test_missing_service_raises(self) -> None:
        """Test that the service section is required."""
        with pytest.raises(ValidationError):
            SoapSimpleConfig.model_validate({'logging': {'console_level': 'INFO'}})


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_from_file(self, temp_config_file: Path) -> None:
        """Test loading config from a file."""
        config = load_config(temp_config_file)

        assert config.service.uri == 'http://www.yourdomain.com/services'
        assert config.service.timeout == 15.0  # noqa: PLR2004
        assert config.logging.console_level == logging.WARNING

    def test_load_config_with_string_path(self, temp_config_file: Path) -> None:
        """Test loading config with string path."""
        config = load_config(str(temp_config_file))

        assert config.service.xmlns == 'http://www.yourdomain.com/services'

    def test_load_config_file_not_found_raises_error(self) -> None:
        """Test that loading non-existent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path('/nonexistent/config.yaml'))

    def test_load_invalid_yaml_raises_error(self, tmp_path: Path) -> None:
        """Test that invalid YAML raises a YAML error."""
        invalid_yaml = tmp_path / 'invalid.yaml'
        invalid_yaml.write_text('invalid: yaml: content: [')

        with pytest.raises(yaml.YAMLError):
            load_config(invalid_yaml)

    def test_load_empty_file_raises_validation_error(self, tmp_path: Path) -> None:
        """Test that an empty file is reported as missing configuration."""
        empty = tmp_path / 'empty.yaml'
        empty.write_text('')

        with pytest.raises(ValidationError):
            load_config(empty)
