# protocol_adapter/models/protocol.py
"""
Typed representation of a protocol manifest.

Devices and models are recursive trees (a node plus its children). The
``iter_devices`` and ``iter_models`` helpers flatten them in declaration order.
"""
from enum import Enum
from typing import Iterator, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class FeatureType(str, Enum):
    PROPERTY = "property"
    COMMAND = "command"
    ALARM = "alarm"


class ManifestModel(BaseModel):
    """Base for manifest entries: camelCase keys on the wire, frozen after load."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore", protected_namespaces=())


class Param(ManifestModel):
    """One command argument or one command-reply value slot."""
    id: str = Field(..., validation_alias=AliasChoices("id", "paramId"))
    custom_param_id: str = Field(..., alias="customParamId")


class Feature(ManifestModel):
    """
    A property, alarm or command exposed by a device model.

    ``type`` is kept as a plain string so feature kinds this adapter does not
    know about still load.
    """
    id: str = Field(..., validation_alias=AliasChoices("id", "featureId"))
    custom_feature_id: str = Field(..., alias="customFeatureId")
    type: str = Field(..., validation_alias=AliasChoices("type", "featureType"))
    input_params: List[Param] = Field(default_factory=list, alias="inputParams")
    output_params: List[Param] = Field(default_factory=list, alias="outputParams")

    @property
    def is_command(self) -> bool:
        return self.type == FeatureType.COMMAND


class Model(ManifestModel):
    model_id: str = Field(..., alias="modelId")
    features: List[Feature] = Field(default_factory=list)
    sub_models: List["Model"] = Field(default_factory=list, alias="subModels")


class Device(ManifestModel):
    device_id: str = Field(..., alias="deviceId")
    custom_device_id: str = Field(..., alias="customDeviceId")
    model_id: str = Field(..., alias="modelId")
    issue_topic: str = Field("", alias="issueTopic")
    issue_response_topic: str = Field("", alias="issueResponseTopic")
    sub_devices: List["Device"] = Field(default_factory=list, alias="subDevices")


class Protocol(ManifestModel):
    """Root of a protocol manifest."""
    devices: List[Device] = Field(default_factory=list)
    models: List[Model] = Field(default_factory=list)


Model.model_rebuild()
Device.model_rebuild()


def iter_devices(devices: List[Device]) -> Iterator[Device]:
    """Yield every device and its sub-devices, parents before children."""
    for device in devices:
        yield device
        yield from iter_devices(device.sub_devices)


def iter_models(models: List[Model]) -> Iterator[Model]:
    """Yield every model and its sub-models, parents before children."""
    for model in models:
        yield model
        yield from iter_models(model.sub_models)


def iter_model_features(model: Model) -> Iterator[Feature]:
    """Yield the features of a model followed by those of its sub-models."""
    for node in iter_models([model]):
        yield from node.features
