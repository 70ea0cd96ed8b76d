"""Positional field collection from Slack function inputs.

The Slack functions expose a fixed set of input slots rather than a list:
field1_name/field1_value .. field10_name/field10_value for regular
properties and user_field1_name/user_field1_value .. user_field3_* for
people properties fed by Slack user pickers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.notion_bridge.notion.schemas import CollectedFields

MAX_FIELD_SLOTS = 10
MAX_USER_FIELD_SLOTS = 3


def _is_filled(value: Any) -> bool:
    return value is not None and value != ""


def collect_fields_from_inputs(inputs: Mapping[str, Any]) -> CollectedFields:
    """Collect the non-empty name/value pairs from the positional input slots.

    A slot is kept only when both its name and its value are non-empty.
    Slots beyond the fixed bounds are never read. When two slots share a
    name, the later slot wins.
    """
    properties_data: dict[str, Any] = {}
    user_fields_data: dict[str, str] = {}

    for i in range(1, MAX_USER_FIELD_SLOTS + 1):
        field_name = inputs.get(f"user_field{i}_name")
        field_value = inputs.get(f"user_field{i}_value")

        if _is_filled(field_name) and _is_filled(field_value):
            user_fields_data[str(field_name)] = str(field_value)

    for i in range(1, MAX_FIELD_SLOTS + 1):
        field_name = inputs.get(f"field{i}_name")
        field_value = inputs.get(f"field{i}_value")

        if _is_filled(field_name) and _is_filled(field_value):
            properties_data[str(field_name)] = field_value

    return CollectedFields(
        properties_data=properties_data,
        user_fields_data=user_fields_data,
    )
