import logging
from abc import ABC, abstractmethod
from typing import Optional

from protocol_adapter.errors import SerializationFailure
from protocol_adapter.models.messages import WireModel
from protocol_adapter.models.protocol import Device, Feature, Param
from protocol_adapter.registry import IdentifierRegistry


class BaseConverter(ABC):
    """Base class for converters between device wire messages and platform messages."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(self.__class__.__module__)

    @property
    @abstractmethod
    def direction(self) -> str:
        """Either 'outbound' (platform to device) or 'inbound' (device to platform)."""
        pass

    def resolve_feature(
        self,
        registry: IdentifierRegistry,
        device: Device,
        feature_id: str,
        model_id: Optional[str] = None,
    ) -> Optional[Feature]:
        """
        Resolve an internal feature id, preferring the features of the given
        model (or the device's own model) over the global table.
        """
        feature = registry.feature_of_model(model_id or device.model_id, feature_id)
        if feature is None:
            feature = registry.by_feature_id(feature_id)
        return feature

    def resolve_custom_feature(
        self,
        registry: IdentifierRegistry,
        device: Device,
        custom_feature_id: str,
    ) -> Optional[Feature]:
        """Resolve a customer feature id, preferring the device's own model."""
        feature = registry.custom_feature_of_model(device.model_id, custom_feature_id)
        if feature is None:
            feature = registry.by_custom_feature_id(custom_feature_id)
        return feature

    def resolve_custom_output_param(
        self,
        registry: IdentifierRegistry,
        device: Device,
        custom_param_id: str,
    ) -> Optional[Param]:
        """Resolve a customer output param id, preferring the device's own model."""
        param = registry.custom_output_param_of_model(device.model_id, custom_param_id)
        if param is None:
            param = registry.by_custom_output_param_id(custom_param_id)
        return param

    def serialize(self, message: WireModel) -> str:
        """
        Serialize a wire model to compact JSON.

        Raises:
            SerializationFailure: If the model cannot be encoded
        """
        try:
            return message.to_json()
        except (TypeError, ValueError) as e:
            self.logger.error(f"Failed to serialize {message.__class__.__name__}: {e}")
            raise SerializationFailure(
                f"Failed to serialize {message.__class__.__name__}: {e}"
            ) from e
