"""Tests for button value and input state parsing."""

import pytest

from slack_store_tools.domain.interactions import (
    ActionReference,
    ActionRequest,
    CommandRequest,
)


def test_reference_encode_and_parse() -> None:
    reference = ActionReference("U1", "1001", "completed")

    assert reference.encode() == "U1|1001|completed"
    assert ActionReference.parse("U1|1001|completed") == reference
    assert ActionReference.parse("U1|314") == ActionReference("U1", "314")


@pytest.mark.parametrize(
    "value", [None, "", "U1", "|1001", "U1|", "U1|1|completed|extra"]
)
def test_reference_parse_rejects_malformed_values(value: str | None) -> None:
    assert ActionReference.parse(value) is None


def test_command_argument_is_trimmed() -> None:
    assert CommandRequest("U1", "C1", "  SKU123\n").argument == "SKU123"


def test_input_value_lookup() -> None:
    action = ActionRequest(
        user_id="U1",
        channel_id="C1",
        action_id="confirm_price",
        value="U1",
        state_values={
            "block-a": {"other": {"value": ""}},
            "block-b": {"new_price": {"value": "9.50"}},
        },
    )

    assert action.input_value("block-b", "new_price") == "9.50"
    assert action.input_value("block-a", "missing") is None
    assert action.first_input_value() == "9.50"
