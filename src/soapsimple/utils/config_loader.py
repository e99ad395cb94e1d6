# soapsimple/utils/config_loader.py
"""
Service Configuration Loader with Pydantic Validation

This module loads and validates configuration from a YAML file using Pydantic
for strong type checking and validation. The same models validate settings
passed directly to a client, so a client can never be built without the
uri, proxy and xmlns it needs to talk to a service.

Key Design Decisions:
- Pydantic models mirror the exact structure of config.yaml for maintainability
- Validation occurs at construction time to fail fast if config is malformed
- Log levels support both string names ("DEBUG") and numeric values (10)
- File logging is optional; console logging is always enabled
"""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)

# Set up a logger for this module
logger: logging.Logger = logging.getLogger(__name__)

# =============================================================================
# Type Aliases for Clarity
# =============================================================================

# SOAP protocol versions a transport can speak
SoapVersion = Literal['1.1', '1.2']

DEFAULT_SOAP_VERSION: SoapVersion = '1.1'
DEFAULT_TIMEOUT_SECONDS: float = 30.0

# =============================================================================
# Configuration Models (Schema)
# =============================================================================


class ServiceSection(BaseModel):
    """
    Schema for the 'service' section of config.yaml.

    Describes where a SOAP service lives and how to address it. uri, proxy
    and xmlns are required; everything else has a default.

    Example:
        >>> ServiceSection(
        ...     uri='http://www.yourdomain.com/services',
        ...     proxy='http://www.yourproxy.com/services/services.asmx',
        ...     xmlns='http://www.yourdomain.com/services',
        ... )
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    uri: str = Field(
        ...,
        min_length=1,
        description='Service namespace URI, used to build the SOAPAction header.',
    )

    proxy: HttpUrl = Field(
        ...,
        description='Endpoint URL the SOAP request is POSTed to.',
    )

    xmlns: str = Field(
        ...,
        min_length=1,
        description='Namespace declared on the method element (.NET services).',
    )

    soapversion: SoapVersion = Field(
        default=DEFAULT_SOAP_VERSION,
        description='SOAP protocol version of the envelope.',
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0.0,
        description='HTTP timeout in seconds, handed to the transport as is.',
    )

    strip_default_namespace: bool = Field(
        default=True,
        description='Remove xmlns="..." declarations from responses before parsing, '
        'so the returned document can be queried without namespaces.',
    )

    verify_ssl: bool = Field(
        default=True,
        description='Whether to verify SSL certificates of the proxy endpoint.',
    )

    @field_validator('soapversion', mode='before')
    @classmethod
    def coerce_soapversion(cls, v: Any) -> Any:
        """
        Accept numeric versions as written in YAML (1.1 instead of '1.1').
        """
        if isinstance(v, float | int) and not isinstance(v, bool):
            return f'{float(v):.1f}'
        return v


class LoggingSection(BaseModel):
    """
    Schema for the 'logging' section of config.yaml.

    Levels are written as names (DEBUG) or numbers (10) and stored as the
    numeric level, ready for setup_logger. Console logging is always on;
    file logging is on when file_path is set.
    """

    model_config = ConfigDict(extra='forbid')

    console_level: int = Field(
        default=logging.INFO,
        description='Level of the stdout handler.',
    )

    file_path: Path | None = Field(
        default=None,
        description='Optional log file. Parent directories are created on setup.',
    )

    file_level: int | None = Field(
        default=None,
        description='Level of the file handler; DEBUG when only file_path is set.',
    )

    @field_validator('console_level', 'file_level', mode='before')
    @classmethod
    def to_level_number(cls, v: Any) -> Any:
        """Map level names to numbers and reject levels logging does not know."""
        if v is None:
            return v

        levels: dict[str, int] = logging.getLevelNamesMapping()
        if isinstance(v, str):
            if v.upper() not in levels:
                raise ValueError(f'Unknown log level name: {v!r}')
            return levels[v.upper()]

        if isinstance(v, bool) or v not in levels.values():
            raise ValueError(
                f'Numeric log level must be one of {sorted(set(levels.values()))}, got {v}'
            )
        return v

    @model_validator(mode='after')
    def check_file_logging(self) -> 'LoggingSection':
        """A file level needs a file; a file alone logs at DEBUG."""
        if self.file_path is None:
            if self.file_level is not None:
                raise ValueError('file_level is specified but file_path is missing')
            return self

        if self.file_level is None:
            self.file_level = logging.DEBUG
        return self


class SoapSimpleConfig(BaseModel):
    """
    Root configuration model.

    Usage:
        config = load_config('config.yaml')
        endpoint = config.service.proxy
        log_level = config.logging.console_level
    """

    model_config = ConfigDict(extra='forbid')
    service: ServiceSection
    logging: LoggingSection = Field(default_factory=LoggingSection)


# =============================================================================
# Loader Logic
# =============================================================================


def load_config(config_path: Path | str) -> SoapSimpleConfig:
    """
    Load, parse, and validate a configuration file.

    Handles the whole chain: file resolution -> YAML parsing -> Pydantic
    validation -> typed object, failing fast with a logged error at each step.

    Args:
        config_path: Path to a YAML file with a 'service' section and an
                     optional 'logging' section.

    Returns:
        A fully validated SoapSimpleConfig object.

    Raises:
        FileNotFoundError: The specified config file does not exist on disk.
        yaml.YAMLError: The file exists but contains invalid YAML syntax.
        ValidationError: The YAML is valid but the configuration is invalid.

    Example:
        config = load_config('/etc/soapsimple/config.yaml')
        proxy = config.service.proxy
    """
    path_obj: Path = Path(config_path)
    logger.debug('Resolving configuration from: %s', path_obj)

    if not path_obj.exists():
        error_msg: str = f'Configuration file not found at: {path_obj}'
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    try:
        with open(path_obj, encoding='utf-8') as f:
            raw_config: dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error('Failed to parse YAML config file: %s', e)
        raise

    try:
        config = SoapSimpleConfig.model_validate(raw_config)
        logger.debug('Configuration validated successfully.')
        return config
    except ValidationError as e:
        logger.error('Configuration validation failed: %s', e)
        raise
