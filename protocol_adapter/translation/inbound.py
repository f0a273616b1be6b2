"""
Inbound converter.

Turns device-originated messages (property reports, alarms and command
replies) into the platform's normative envelope and its routing topic.

Batch handling: the first property or alarm message that resolves wins and
ends processing. Command reply fragments aggregate, so a reply split over
several messages for the same device ends up in one envelope. Once a reply has
started, messages that do not continue it are skipped.
"""

import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from protocol_adapter.errors import (
    ConversionError,
    MalformedMessage,
    UnknownDevice,
    UnknownFeatureOrParam,
)
from protocol_adapter.models.messages import (
    DEFAULT_ENVELOPE_VERSION,
    CommandPayload,
    DeviceMessage,
    EnvelopeParam,
    PlatformEnvelope,
)
from protocol_adapter.models.protocol import Device, FeatureType
from protocol_adapter.models.translation import EnvelopeResult
from protocol_adapter.registry import IdentifierRegistry
from .base import BaseConverter

PROPERTY_TOPIC = "thing.report.{model_id}.{device_id}.property"
ALARM_TOPIC = "thing.report.{model_id}.{device_id}.alarm"
COMMAND_REPLY_TOPIC = "thing.issue_reply.{model_id}.{device_id}.command"

REPORT_TOPICS = {
    FeatureType.PROPERTY.value: PROPERTY_TOPIC,
    FeatureType.ALARM.value: ALARM_TOPIC,
}


def build_topic(template: str, device: Device) -> str:
    return template.format(model_id=device.model_id, device_id=device.device_id)


class InboundConverter(BaseConverter):
    """Converts device messages to platform envelopes."""

    def __init__(self, logger: Optional[logging.Logger] = None, envelope_version: str = DEFAULT_ENVELOPE_VERSION):
        super().__init__(logger)
        self.envelope_version = envelope_version

    @property
    def direction(self) -> str:
        return "inbound"

    def convert_to_envelope(self, registry: IdentifierRegistry, messages: List[str]) -> EnvelopeResult:
        """
        Convert a batch of device messages to one platform envelope.

        Args:
            registry: Identifier registry to resolve customer ids against
            messages: JSON-encoded device messages, either {device, type, value}
                or the multi-param reply shape {device, params: [{id, value}]}

        Returns:
            EnvelopeResult with the routing topic and the serialized envelope

        Raises:
            MalformedMessage: If a message cannot be decoded, or the batch is empty
            UnknownDevice: If the device of a message is not configured
            UnknownFeatureOrParam: If a type matches neither a feature nor an output param
            SerializationFailure: If the envelope cannot be encoded
        """
        if not messages:
            raise MalformedMessage("Empty message batch")

        reply_device: Optional[Device] = None
        reply_params: List[EnvelopeParam] = []

        for index, raw in enumerate(messages):
            try:
                message = self._decode(raw)
                device = self._resolve_device(registry, message.device)
            except ConversionError as e:
                if reply_device is None:
                    raise
                self.logger.warning(f"Skipping message {index} after command reply started: {e}")
                continue

            if reply_device is not None and device.device_id != reply_device.device_id:
                self.logger.warning(
                    f"Skipping message {index} for device {device.device_id}, "
                    f"command reply in progress for {reply_device.device_id}"
                )
                continue

            if isinstance(message, CommandPayload):
                params = self._reply_params(registry, device, message)
                if not params:
                    if reply_device is None:
                        raise UnknownFeatureOrParam(
                            f"No matched output params in command reply from device {device.device_id}"
                        )
                    continue
                reply_device = device
                reply_params.extend(params)
                continue

            feature = self.resolve_custom_feature(registry, device, message.type)
            if feature is not None and feature.type in REPORT_TOPICS:
                if reply_device is not None:
                    self.logger.warning(
                        f"Skipping {feature.type} message {index} for device {device.device_id} "
                        f"inside a command reply batch"
                    )
                    continue
                topic = build_topic(REPORT_TOPICS[feature.type], device)
                self.logger.debug(f"Device {device.device_id} reported {feature.type} {feature.id}")
                return self._envelope(topic, [EnvelopeParam(id=feature.id, value=message.value)])

            param = self.resolve_custom_output_param(registry, device, message.type)
            if param is None:
                if reply_device is None:
                    self.logger.info(f"No matched feature or param for device {device.device_id}: {message.type}")
                    raise UnknownFeatureOrParam(f"No matched feature or output param: {message.type}")
                self.logger.warning(f"Skipping message {index}, no matched output param: {message.type}")
                continue

            reply_device = device
            reply_params.append(EnvelopeParam(id=param.id, value=message.value))

        topic = build_topic(COMMAND_REPLY_TOPIC, reply_device)
        self.logger.debug(f"Device {reply_device.device_id} replied with {len(reply_params)} params")
        return self._envelope(topic, reply_params)

    def _decode(self, raw) -> DeviceMessage | CommandPayload:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            self.logger.info(f"unmarshal msg error: {e}")
            raise MalformedMessage(f"Failed to decode device message: {e}") from e

        if not isinstance(data, dict):
            raise MalformedMessage(f"Device message must be a JSON object, got: {type(data).__name__}")

        try:
            if "params" in data and "type" not in data:
                return CommandPayload.model_validate(data)
            return DeviceMessage.model_validate(data)
        except ValidationError as e:
            self.logger.info(f"invalid device message: {e}")
            raise MalformedMessage(f"Invalid device message: {e}") from e

    def _resolve_device(self, registry: IdentifierRegistry, custom_device_id: str) -> Device:
        device = registry.by_custom_device_id(custom_device_id)
        if device is None:
            self.logger.info(f"No matched device: {custom_device_id}")
            raise UnknownDevice(f"No matched device: {custom_device_id}")
        return device

    def _reply_params(
        self,
        registry: IdentifierRegistry,
        device: Device,
        payload: CommandPayload,
    ) -> List[EnvelopeParam]:
        params = []
        for param in payload.params:
            output = self.resolve_custom_output_param(registry, device, param.id)
            if output is None:
                self.logger.info(f"issue_reply from device {device.device_id}, no matched param: {param.id}")
                continue
            params.append(EnvelopeParam(id=output.id, value=param.value))
        return params

    def _envelope(self, topic: str, params: List[EnvelopeParam]) -> EnvelopeResult:
        envelope = PlatformEnvelope(version=self.envelope_version, topic=topic, params=params)
        payload = self.serialize(envelope).encode("utf-8")
        self.logger.debug(f"[{envelope.msg_id}] Built envelope for topic {topic}")
        return EnvelopeResult(topic=topic, payload=payload, envelope=envelope)

