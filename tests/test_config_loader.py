"""
Tests for loading the protocol manifest from disk.
"""

import json
from pathlib import Path

import pytest
import yaml

from protocol_adapter.config_loader import load_protocol_config
from protocol_adapter.errors import MalformedConfiguration
from protocol_adapter.registry import IdentifierRegistry

SAMPLE_MANIFEST = Path(__file__).parent.parent / "config" / "protocol.yaml"


def test_load_yaml_manifest(tmp_path, protocol_dict):
    path = tmp_path / "protocol.yaml"
    path.write_text(yaml.safe_dump(protocol_dict))

    protocol = load_protocol_config(str(path))

    assert [d.device_id for d in protocol.devices] == ["d1", "d2"]
    assert protocol.devices[0].sub_devices[0].device_id == "d1-probe"
    assert protocol.models[0].sub_models[0].model_id == "m1-probe"


def test_load_json_manifest(tmp_path, protocol_dict):
    path = tmp_path / "protocol.json"
    path.write_text(json.dumps(protocol_dict))

    protocol = load_protocol_config(str(path))
    assert protocol.models[0].features[2].input_params[0].custom_param_id == "offset"


def test_missing_manifest(tmp_path):
    with pytest.raises(MalformedConfiguration):
        load_protocol_config(str(tmp_path / "missing.yaml"))


def test_unparseable_manifest(tmp_path):
    path = tmp_path / "protocol.yaml"
    path.write_text("devices: [\n")

    with pytest.raises(MalformedConfiguration):
        load_protocol_config(str(path))


def test_invalid_manifest(tmp_path):
    path = tmp_path / "protocol.yaml"
    path.write_text("devices:\n  - customDeviceId: dev-1\n")

    with pytest.raises(MalformedConfiguration):
        load_protocol_config(str(path))


def test_empty_manifest(tmp_path):
    path = tmp_path / "protocol.yaml"
    path.write_text("")

    protocol = load_protocol_config(str(path))
    assert protocol.devices == []
    assert protocol.models == []


def test_sample_manifest_builds_registry():
    registry = IdentifierRegistry.build(load_protocol_config(str(SAMPLE_MANIFEST)))

    assert registry.by_custom_device_id("dev-1-probe").model_id == "m1-probe"
    assert registry.by_custom_output_param_id("applied").id == "p-applied"
