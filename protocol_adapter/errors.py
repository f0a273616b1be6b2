# protocol_adapter/errors.py
"""
Error kinds raised by the registry and the converters.

Every error carries a ``kind`` string so the converter service can report it
back to the caller inside a result object.
"""


class ConversionError(Exception):
    """Base class for all adapter errors."""
    kind = "ConversionError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownDevice(ConversionError):
    """Raised when a device id (internal or customer) is not in the registry."""
    kind = "UnknownDevice"


class UnknownFeature(ConversionError):
    """Raised when a feature id is not in the registry."""
    kind = "UnknownFeature"


class UnknownFeatureOrParam(ConversionError):
    """Raised when a customer type matches neither a feature nor an output param."""
    kind = "UnknownFeatureOrParam"


class MalformedConfiguration(ConversionError):
    """Raised when a protocol manifest cannot be decoded or validated."""
    kind = "MalformedConfiguration"


class MalformedMessage(ConversionError):
    """Raised when a device message cannot be decoded."""
    kind = "MalformedMessage"


class SerializationFailure(ConversionError):
    """Raised when a payload or envelope cannot be encoded."""
    kind = "SerializationFailure"
