from __future__ import annotations

import pytest

from pyvoicelive.exceptions import ArgumentParseError
from pyvoicelive.models.events import FunctionCallArgumentsDone, ServerError, ToolCallRequest, ToolCallResult


def _event(arguments: object) -> FunctionCallArgumentsDone:
    return FunctionCallArgumentsDone.model_validate(
        {"type": "response.function_call_arguments.done", "call_id": "c1", "name": "setLights", "arguments": arguments}
    )


def test_wire_model_keeps_raw_and_ignores_extras() -> None:
    event = FunctionCallArgumentsDone.model_validate(
        {"call_id": "c1", "name": "x", "arguments": "{}", "output_index": 0, "response_id": None}
    )
    assert event.raw["output_index"] == 0
    assert event.response_id is None


@pytest.mark.parametrize(
    ("arguments", "expected"),
    [
        ('{"state": "on"}', {"state": "on"}),
        ("", {}),
        ("   ", {}),
        ({"state": "off"}, {"state": "off"}),
    ],
)
def test_request_from_event(arguments: object, expected: dict) -> None:
    request = ToolCallRequest.from_event(_event(arguments))
    assert request.call_id == "c1"
    assert request.arguments == expected


@pytest.mark.parametrize("arguments", ['{"state": ', "[1, 2]", "42", ["state", "on"], 42, True])
def test_request_rejects_non_object_arguments(arguments: object) -> None:
    with pytest.raises(ArgumentParseError) as exc_info:
        ToolCallRequest.from_event(_event(arguments))
    assert exc_info.value.tool_name == "setLights"


def test_result_wire_messages() -> None:
    result = ToolCallResult(call_id="c1", success=True, payload={"status": "ok", "field": "lights", "value": "on"})
    create, follow_up = result.to_wire()

    assert create == {
        "type": "conversation.item.create",
        "item": {
            "type": "function_call_output",
            "call_id": "c1",
            "output": '{"status":"ok","field":"lights","value":"on"}',
        },
    }
    assert follow_up == {"type": "response.create"}


def test_server_error_defaults() -> None:
    assert ServerError.model_validate({"type": "error"}).message == "Unknown server error"
    err = ServerError.model_validate({"type": "error", "error": {"message": "bad", "code": 400}})
    assert err.message == "bad"
    assert err.code == "400"
