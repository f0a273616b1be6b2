"""
Shared fixtures: a protocol manifest with one device (plus a sub-device),
one model (plus a sub-model) and a property, an alarm and a command.
"""

import copy

import pytest

from protocol_adapter.registry import IdentifierRegistry
from protocol_adapter.translation.inbound import InboundConverter
from protocol_adapter.translation.outbound import OutboundConverter

PROTOCOL = {
    "devices": [
        {
            "deviceId": "d1",
            "customDeviceId": "dev-1",
            "modelId": "m1",
            "issueTopic": "devices/dev-1/issue",
            "issueResponseTopic": "devices/dev-1/issue_reply",
            "subDevices": [
                {
                    "deviceId": "d1-probe",
                    "customDeviceId": "dev-1-probe",
                    "modelId": "m1-probe",
                    "issueTopic": "devices/dev-1/probe/issue",
                    "issueResponseTopic": "devices/dev-1/probe/issue_reply",
                }
            ],
        },
        {
            "deviceId": "d2",
            "customDeviceId": "dev-2",
            "modelId": "m1",
            "issueTopic": "devices/dev-2/issue",
            "issueResponseTopic": "devices/dev-2/issue_reply",
        },
    ],
    "models": [
        {
            "modelId": "m1",
            "features": [
                {"id": "f1", "customFeatureId": "temp", "type": "property"},
                {"id": "f2", "customFeatureId": "overheat", "type": "alarm"},
                {
                    "id": "f3",
                    "customFeatureId": "calibrate",
                    "type": "command",
                    "inputParams": [
                        {"id": "p-offset", "customParamId": "offset"},
                        {"id": "p-unit", "customParamId": "unit"},
                    ],
                    "outputParams": [
                        {"id": "p-status", "customParamId": "status"},
                        {"id": "p-applied", "customParamId": "applied"},
                    ],
                },
                {"id": "f5", "customFeatureId": "blink", "type": "event"},
            ],
            "subModels": [
                {
                    "modelId": "m1-probe",
                    "features": [
                        {"id": "f4", "customFeatureId": "probe_temp", "type": "property"},
                    ],
                }
            ],
        }
    ],
}


@pytest.fixture
def protocol_dict():
    """A fresh copy of the test manifest."""
    return copy.deepcopy(PROTOCOL)


@pytest.fixture
def registry(protocol_dict):
    return IdentifierRegistry.build(protocol_dict)


@pytest.fixture
def outbound():
    return OutboundConverter()


@pytest.fixture
def inbound():
    return InboundConverter()
