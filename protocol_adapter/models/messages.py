# protocol_adapter/models/messages.py
from typing import List, Optional
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENVELOPE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_ENVELOPE_VERSION = "1.0.0"


def generate_msg_id() -> str:
    return str(uuid.uuid4())


def envelope_timestamp() -> str:
    return datetime.now().strftime(ENVELOPE_TIMESTAMP_FORMAT)


class WireModel(BaseModel):
    """Base model for everything exchanged with devices or the platform."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    def to_json(self) -> str:
        """Serialize to compact JSON using wire (camelCase) names, dropping unset optionals."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class DeviceMessage(WireModel):
    """
    Generic device message, used both for reports and for property issues.
    ``type`` holds a customer feature id or a customer param id.
    """
    device: str
    type: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def null_value_is_empty(cls, v):
        return "" if v is None else v


class CommandParam(WireModel):
    id: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def null_value_is_empty(cls, v):
        return "" if v is None else v


class CommandPayload(WireModel):
    """Command issue sent to a device, also the shape of a multi-param command reply."""
    device: str
    params: List[CommandParam] = Field(default_factory=list)


class EnvelopeParam(WireModel):
    id: str
    value: str
    timestamp: Optional[str] = None


class PlatformEnvelope(WireModel):
    """
    Normative message wrapper for all device-to-platform traffic.
    Routed by ``topic`` on the platform message bus.
    """
    msg_id: str = Field(default_factory=generate_msg_id, alias="msgId")
    version: str = DEFAULT_ENVELOPE_VERSION
    topic: str
    timestamp: str = Field(default_factory=envelope_timestamp)
    params: List[EnvelopeParam] = Field(default_factory=list)
