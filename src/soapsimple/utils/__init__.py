# soapsimple/utils/__init__.py

from .config_loader import LoggingSection, ServiceSection, SoapSimpleConfig, load_config
from .logger import setup_logger, setup_logger_from_config
from .xml_converter import convert_fragment
from .xml_parser import (
    extract_soap_body,
    find_fault_string,
    normalize_response,
    parse_soap_response,
    strip_default_namespaces,
)

__all__: list[str] = [
    'LoggingSection',
    'ServiceSection',
    'SoapSimpleConfig',
    # xml_converter.py
    'convert_fragment',
    # xml_parser.py
    'extract_soap_body',
    'find_fault_string',
    # config_loader.py
    'load_config',
    'normalize_response',
    'parse_soap_response',
    # logger.py
    'setup_logger',
    'setup_logger_from_config',
    'strip_default_namespaces',
]
