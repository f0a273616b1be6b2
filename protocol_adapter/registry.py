# protocol_adapter/registry.py
"""
Identifier registry.

Builds bidirectional lookup tables between internal ids and customer ids from
a protocol manifest. The registry is read-only once built and can be shared
between concurrent callers.
"""
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from protocol_adapter.errors import MalformedConfiguration
from protocol_adapter.models.protocol import (
    Device,
    Feature,
    Param,
    Protocol,
    iter_devices,
    iter_model_features,
    iter_models,
)

logger = logging.getLogger(__name__)

ConfigSource = Union[Protocol, Mapping[str, Any], str, bytes]


def _put(table: Dict[str, Any], key: str, value: Any, table_name: str) -> None:
    # Last write wins on duplicate keys, in declaration order.
    if key in table:
        logger.debug(f"Duplicate key '{key}' in {table_name}, later entry overwrites earlier one")
    table[key] = value


def parse_protocol(config: ConfigSource) -> Protocol:
    """
    Turn any supported configuration form into a Protocol.

    Args:
        config: A Protocol, a mapping, or a serialized JSON/YAML snapshot

    Returns:
        The validated Protocol

    Raises:
        MalformedConfiguration: If the snapshot cannot be decoded or validated
    """
    if isinstance(config, Protocol):
        return config

    if isinstance(config, (str, bytes)):
        try:
            # Snapshots are normally JSON, fall back to YAML
            data = json.loads(config)
        except ValueError:
            try:
                data = yaml.safe_load(config)
            except yaml.YAMLError as e:
                raise MalformedConfiguration(f"Failed to decode configuration snapshot: {e}") from e
    else:
        data = config

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise MalformedConfiguration(
            f"Configuration must be a mapping, got: {type(data).__name__}"
        )

    try:
        return Protocol.model_validate(dict(data))
    except ValidationError as e:
        raise MalformedConfiguration(f"Invalid protocol configuration: {e}") from e


class IdentifierRegistry:
    """
    Lookup tables between internal ids and customer ids for devices,
    features and params.

    Features and output params are indexed per model as well as globally, so
    a device resolves ids within its own model before falling back to the
    global tables.

    Lookups return the entry or None and never raise.
    """

    def __init__(self, protocol: Protocol):
        self.protocol = protocol

        devices: Dict[str, Device] = {}
        custom_devices: Dict[str, Device] = {}
        model_devices: Dict[str, List[Device]] = {}
        for device in iter_devices(protocol.devices):
            _put(devices, device.device_id, device, "devices")
            _put(custom_devices, device.custom_device_id, device, "custom devices")
            model_devices.setdefault(device.model_id, []).append(device)

        model_features: Dict[str, Dict[str, Feature]] = {}
        model_custom_features: Dict[str, Dict[str, Feature]] = {}
        model_custom_output_params: Dict[str, Dict[str, Param]] = {}
        features: Dict[str, Feature] = {}
        custom_features: Dict[str, Feature] = {}
        params: Dict[str, Param] = {}
        custom_params: Dict[str, Param] = {}
        output_params: Dict[str, Param] = {}
        custom_output_params: Dict[str, Param] = {}

        for model in iter_models(protocol.models):
            scoped = model_features.setdefault(model.model_id, {})
            custom_scoped = model_custom_features.setdefault(model.model_id, {})
            outputs_scoped = model_custom_output_params.setdefault(model.model_id, {})
            # Sub-model features are also reachable through their parent model
            for feature in iter_model_features(model):
                _put(scoped, feature.id, feature, f"features of model {model.model_id}")
                _put(custom_scoped, feature.custom_feature_id, feature,
                     f"custom features of model {model.model_id}")
                if feature.is_command:
                    for param in feature.output_params:
                        _put(outputs_scoped, param.custom_param_id, param,
                             f"custom output params of model {model.model_id}")

            for feature in model.features:
                _put(features, feature.id, feature, "features")
                _put(custom_features, feature.custom_feature_id, feature, "custom features")
                if not feature.is_command:
                    continue
                for param in feature.input_params:
                    _put(params, param.id, param, "params")
                    _put(custom_params, param.custom_param_id, param, "custom params")
                for param in feature.output_params:
                    _put(output_params, param.id, param, "output params")
                    _put(custom_output_params, param.custom_param_id, param, "custom output params")
                    _put(params, param.id, param, "params")
                    _put(custom_params, param.custom_param_id, param, "custom params")

        self._devices = MappingProxyType(devices)
        self._custom_devices = MappingProxyType(custom_devices)
        self._model_devices = MappingProxyType({k: tuple(v) for k, v in model_devices.items()})
        self._model_features = MappingProxyType(
            {k: MappingProxyType(v) for k, v in model_features.items()}
        )
        self._model_custom_features = MappingProxyType(
            {k: MappingProxyType(v) for k, v in model_custom_features.items()}
        )
        self._model_custom_output_params = MappingProxyType(
            {k: MappingProxyType(v) for k, v in model_custom_output_params.items()}
        )
        self._features = MappingProxyType(features)
        self._custom_features = MappingProxyType(custom_features)
        self._params = MappingProxyType(params)
        self._custom_params = MappingProxyType(custom_params)
        self._output_params = MappingProxyType(output_params)
        self._custom_output_params = MappingProxyType(custom_output_params)

        logger.debug(
            f"Built identifier registry: {len(devices)} devices, {len(model_features)} models, "
            f"{len(features)} features, {len(params)} params"
        )

    @classmethod
    def build(cls, config: ConfigSource) -> "IdentifierRegistry":
        """
        Build a registry from a Protocol, a mapping or a serialized snapshot.

        Raises:
            MalformedConfiguration: If the configuration is structurally invalid
        """
        return cls(parse_protocol(config))

    # Devices

    def by_device_id(self, device_id: str) -> Optional[Device]:
        return self._devices.get(device_id)

    def by_custom_device_id(self, custom_device_id: str) -> Optional[Device]:
        return self._custom_devices.get(custom_device_id)

    def devices_of_model(self, model_id: str) -> List[Device]:
        return list(self._model_devices.get(model_id, ()))

    # Features

    def feature_of_model(self, model_id: str, feature_id: str) -> Optional[Feature]:
        """Look up a feature within one model (including its sub-models)."""
        scoped = self._model_features.get(model_id)
        if scoped is None:
            return None
        return scoped.get(feature_id)

    def custom_feature_of_model(self, model_id: str, custom_feature_id: str) -> Optional[Feature]:
        """Look up a feature by customer id within one model (including its sub-models)."""
        scoped = self._model_custom_features.get(model_id)
        if scoped is None:
            return None
        return scoped.get(custom_feature_id)

    def by_feature_id(self, feature_id: str) -> Optional[Feature]:
        return self._features.get(feature_id)

    def by_custom_feature_id(self, custom_feature_id: str) -> Optional[Feature]:
        return self._custom_features.get(custom_feature_id)

    # Params

    def by_param_id(self, param_id: str) -> Optional[Param]:
        return self._params.get(param_id)

    def by_custom_param_id(self, custom_param_id: str) -> Optional[Param]:
        return self._custom_params.get(custom_param_id)

    def by_output_param_id(self, param_id: str) -> Optional[Param]:
        return self._output_params.get(param_id)

    def by_custom_output_param_id(self, custom_param_id: str) -> Optional[Param]:
        return self._custom_output_params.get(custom_param_id)

    def custom_output_param_of_model(self, model_id: str, custom_param_id: str) -> Optional[Param]:
        """Look up a command output param by customer id within one model (including its sub-models)."""
        scoped = self._model_custom_output_params.get(model_id)
        if scoped is None:
            return None
        return scoped.get(custom_param_id)

    # Read-only views, mostly useful for inspection and tests

    @property
    def devices(self) -> Mapping[str, Device]:
        return self._devices

    @property
    def features(self) -> Mapping[str, Feature]:
        return self._features

    @property
    def params(self) -> Mapping[str, Param]:
        return self._params
