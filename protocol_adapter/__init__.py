# protocol_adapter/__init__.py
"""
Protocol adapter for the device-management platform.

Translates between a vendor device protocol (property reports, alarms,
command issues and replies) and the platform's message envelope, resolving
customer ids to internal ids through an identifier registry built from the
protocol manifest.
"""

__version__ = "0.1.0"

from protocol_adapter.registry import IdentifierRegistry
from protocol_adapter.translation import ConverterService, InboundConverter, OutboundConverter, RegistrySource

__all__ = [
    'ConverterService',
    'IdentifierRegistry',
    'InboundConverter',
    'OutboundConverter',
    'RegistrySource',
]
