"""
Outbound converter.

Turns internal issue requests (property writes and commands) into the wire
messages a device understands, together with the topics to publish them on.
"""

from typing import Dict, List, Optional

from protocol_adapter.errors import UnknownDevice, UnknownFeature
from protocol_adapter.models.messages import CommandParam, CommandPayload, DeviceMessage
from protocol_adapter.models.protocol import FeatureType
from protocol_adapter.models.translation import IssueResult
from protocol_adapter.registry import IdentifierRegistry
from .base import BaseConverter


class OutboundConverter(BaseConverter):
    """Converts platform issue requests to device wire messages."""

    @property
    def direction(self) -> str:
        return "outbound"

    def convert_issue(
        self,
        registry: IdentifierRegistry,
        device_id: str,
        model_id: str,
        feature_id: str,
        values: Dict[str, str],
    ) -> IssueResult:
        """
        Convert an issue request to the protocol the device understands.

        Args:
            registry: Identifier registry to resolve ids against
            device_id: Internal id of the target device
            model_id: Internal id of the device model
            feature_id: Internal id of the property or command to issue
            values: Values keyed by feature id (property) or input param id (command)

        Returns:
            IssueResult with:
            1. input_messages: serialized device messages to publish.
            2. output_param_ids: ids of the output params expected in the reply.
            3. issue_topic: device topic to publish input_messages on.
            4. issue_response_topic: device topic the reply arrives on.

        Raises:
            UnknownDevice: If device_id is not configured
            UnknownFeature: If feature_id is not configured
            SerializationFailure: If the device message cannot be encoded
        """
        device = registry.by_device_id(device_id)
        if device is None:
            self.logger.info(f"No matched device for issue: {device_id}")
            raise UnknownDevice(f"No matched device: {device_id}")

        if model_id and model_id != device.model_id:
            self.logger.warning(
                f"Issue for device {device_id} names model {model_id}, device is configured with {device.model_id}"
            )

        feature = self.resolve_feature(registry, device, feature_id, model_id)
        if feature is None:
            self.logger.info(f"No matched feature for issue to device {device_id}: {feature_id}")
            raise UnknownFeature(f"No matched feature: {feature_id}")

        if feature.type == FeatureType.PROPERTY:
            message = DeviceMessage(
                device=device.custom_device_id,
                type=feature.custom_feature_id,
                value=self._value(values, feature.id, device_id),
            )
            self.logger.debug(f"Property issue for device {device_id}: {feature.id} -> {feature.custom_feature_id}")
            return IssueResult(
                input_messages=[self.serialize(message)],
                output_param_ids=[],
                issue_topic=device.issue_topic,
                issue_response_topic="",
            )

        if feature.type == FeatureType.COMMAND:
            payload = CommandPayload(
                device=device.custom_device_id,
                params=[
                    CommandParam(id=param.custom_param_id, value=self._value(values, param.id, device_id))
                    for param in feature.input_params
                ],
            )
            self.logger.debug(
                f"Command issue for device {device_id}: {feature.id} with {len(payload.params)} input params"
            )
            return IssueResult(
                input_messages=[self.serialize(payload)],
                output_param_ids=[param.id for param in feature.output_params],
                issue_topic=device.issue_topic,
                issue_response_topic=device.issue_response_topic,
            )

        # Unknown feature kinds are a no-op
        self.logger.debug(f"Feature {feature.id} has type '{feature.type}', nothing to issue")
        return IssueResult()

    def convert_report_request(
        self,
        registry: IdentifierRegistry,
        model_id: str,
        feature_id: str,
    ) -> List[str]:
        """
        Convert a data report request to a message for each device of the model.

        Each message asks a device to report the feature; the value slot is empty.

        Raises:
            UnknownFeature: If feature_id is not configured
        """
        devices = registry.devices_of_model(model_id)
        if not devices:
            self.logger.info(f"No devices configured for model {model_id}")
            return []

        messages = []
        for device in devices:
            feature = self.resolve_feature(registry, device, feature_id, model_id)
            if feature is None:
                raise UnknownFeature(f"No matched feature: {feature_id}")
            messages.append(self.serialize(DeviceMessage(
                device=device.custom_device_id,
                type=feature.custom_feature_id,
            )))

        self.logger.debug(f"Report request for {feature_id} fanned out to {len(messages)} devices of model {model_id}")
        return messages

    def _value(self, values: Dict[str, str], key: str, device_id: str) -> str:
        value: Optional[str] = values.get(key)
        if value is None:
            self.logger.warning(f"No value supplied for '{key}' in issue to device {device_id}, sending empty value")
            return ""
        return str(value)
