"""
Tests for the outbound converter (issue requests to device messages).
"""

import json
import logging

import pytest

from protocol_adapter.errors import UnknownDevice, UnknownFeature
from protocol_adapter.translation.outbound import OutboundConverter


def test_property_issue(outbound, registry):
    result = outbound.convert_issue(registry, "d1", "m1", "f1", {"f1": "23.5"})

    assert result.success
    assert result.input_messages == ['{"device":"dev-1","type":"temp","value":"23.5"}']
    assert result.output_param_ids == []
    assert result.issue_topic == "devices/dev-1/issue"
    assert result.issue_response_topic == ""


def test_command_issue(outbound, registry):
    result = outbound.convert_issue(
        registry, "d1", "m1", "f3", {"p-offset": "0.5", "p-unit": "C"}
    )

    assert result.success
    assert len(result.input_messages) == 1
    assert json.loads(result.input_messages[0]) == {
        "device": "dev-1",
        "params": [
            {"id": "offset", "value": "0.5"},
            {"id": "unit", "value": "C"},
        ],
    }
    assert result.output_param_ids == ["p-status", "p-applied"]
    assert result.issue_topic == "devices/dev-1/issue"
    assert result.issue_response_topic == "devices/dev-1/issue_reply"


def test_command_issue_keeps_input_param_order(outbound, registry):
    result = outbound.convert_issue(
        registry, "d1", "m1", "f3", {"p-unit": "F", "p-offset": "1"}
    )
    params = json.loads(result.input_messages[0])["params"]
    assert [p["id"] for p in params] == ["offset", "unit"]


def test_missing_value_is_sent_empty(outbound, registry, caplog):
    with caplog.at_level(logging.WARNING):
        result = outbound.convert_issue(registry, "d1", "m1", "f3", {"p-offset": "0.5"})

    params = json.loads(result.input_messages[0])["params"]
    assert params[1] == {"id": "unit", "value": ""}
    assert "p-unit" in caplog.text


def test_unknown_device(outbound, registry):
    with pytest.raises(UnknownDevice):
        outbound.convert_issue(registry, "nope", "m1", "f1", {"f1": "1"})


def test_unknown_feature(outbound, registry):
    with pytest.raises(UnknownFeature):
        outbound.convert_issue(registry, "d1", "m1", "nope", {})


def test_unknown_feature_type_is_a_no_op(outbound, registry):
    result = outbound.convert_issue(registry, "d1", "m1", "f5", {"f5": "on"})

    assert result.success
    assert result.input_messages == []
    assert result.output_param_ids == []
    assert result.issue_topic == ""


def test_sub_device_issue_uses_its_own_topic(outbound, registry):
    result = outbound.convert_issue(registry, "d1-probe", "m1-probe", "f4", {"f4": "19"})

    assert result.input_messages == ['{"device":"dev-1-probe","type":"probe_temp","value":"19"}']
    assert result.issue_topic == "devices/dev-1/probe/issue"


def test_empty_model_id_falls_back_to_device_model(outbound, registry):
    result = outbound.convert_issue(registry, "d2", "", "f1", {"f1": "20"})
    assert result.input_messages == ['{"device":"dev-2","type":"temp","value":"20"}']
    assert result.issue_topic == "devices/dev-2/issue"


def test_issue_is_deterministic(outbound, registry):
    first = outbound.convert_issue(registry, "d1", "m1", "f3", {"p-offset": "1", "p-unit": "C"})
    second = outbound.convert_issue(registry, "d1", "m1", "f3", {"p-offset": "1", "p-unit": "C"})
    assert first == second


def test_report_request_fans_out_to_model_devices(outbound, registry):
    messages = outbound.convert_report_request(registry, "m1", "f1")

    assert messages == [
        '{"device":"dev-1","type":"temp","value":""}',
        '{"device":"dev-2","type":"temp","value":""}',
    ]


def test_report_request_for_unknown_model(outbound, registry):
    assert outbound.convert_report_request(registry, "nope", "f1") == []


def test_report_request_for_unknown_feature(outbound, registry):
    with pytest.raises(UnknownFeature):
        outbound.convert_report_request(registry, "m1", "nope")


def test_injected_logger_is_used(registry, caplog):
    injected = logging.getLogger("tests.injected.outbound")
    converter = OutboundConverter(logger=injected)

    with caplog.at_level(logging.INFO, logger="tests.injected.outbound"):
        with pytest.raises(UnknownDevice):
            converter.convert_issue(registry, "nope", "m1", "f1", {})

    assert any(record.name == "tests.injected.outbound" for record in caplog.records)
    assert converter.direction == "outbound"
