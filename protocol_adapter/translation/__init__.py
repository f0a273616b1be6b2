# protocol_adapter/translation/__init__.py

"""
Conversion layer between device wire messages and the platform envelope.

Outbound conversion turns issue requests into device messages and topics,
inbound conversion turns device reports, alarms and command replies into
platform envelopes.
"""

from .base import BaseConverter
from .inbound import InboundConverter
from .manager import ConverterService, RegistrySource
from .outbound import OutboundConverter

__all__ = [
    'BaseConverter',
    'ConverterService',
    'InboundConverter',
    'OutboundConverter',
    'RegistrySource',
]
