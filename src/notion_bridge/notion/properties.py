"""Property conversion -- raw field values to Notion page properties.

Defines:
- UserMappingFunction: Protocol for Slack -> Notion user resolution, injected
  so the converter can run against a deterministic stand-in in tests.
- normalize_date(): Coerces the date spellings Slack workflows produce to
  ISO 8601 calendar dates (YYYY-MM-DD).
- convert_property_value(): Pure per-type conversion (everything but people).
- find_property_definition(): Name lookup in the writable schema.
- convert_to_notion_properties(): Full conversion of collected fields,
  accumulating user-mapping warnings.

Unknown property names, unsupported property types and unparseable numbers
or dates are dropped and logged only. Failed user mappings are dropped and
reported back to the caller as warnings.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from numbers import Real
from typing import Any, Protocol

import structlog

from src.notion_bridge.notion.schemas import (
    CollectedFields,
    ConversionResult,
    DatabaseProperty,
    PropertyType,
)
from src.notion_bridge.users.schemas import UserMappingResult

logger = structlog.get_logger(__name__)


# ── User mapping protocol ─────────────────────────────────────────────────


class UserMappingFunction(Protocol):
    """Resolves Slack user handles to Notion user ids."""

    async def map_single(self, user_id: str) -> UserMappingResult: ...

    async def map_multiple(self, user_ids: str) -> list[UserMappingResult]: ...


# ── Date normalization ────────────────────────────────────────────────────

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

# Slack renders timestamps like "December 26th, 2025 at 1:04 AM UTC"
_SLACK_DATE_RE = re.compile(
    r"^(January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+(\d{1,2})(?:st|nd|rd|th),?\s+(\d{4})",
    re.IGNORECASE | re.ASCII,
)

_MONTH_NUMBERS = {
    "january": "01",
    "february": "02",
    "march": "03",
    "april": "04",
    "may": "05",
    "june": "06",
    "july": "07",
    "august": "08",
    "september": "09",
    "october": "10",
    "november": "11",
    "december": "12",
}


def normalize_date(value: Any) -> str | None:
    """Normalize a date value to YYYY-MM-DD, or None if it cannot be.

    Accepts YYYY-MM-DD as is, YYYY/M/D (month and day zero-padded), and
    Slack's long form "<Month> <Day><st|nd|rd|th>, <Year> ..." with any
    trailing time ignored. The result is checked for shape only, so
    "2025-13-45" passes.
    """
    iso_date = str(value)

    if _ISO_DATE_RE.fullmatch(iso_date):
        return iso_date

    if "/" in iso_date:
        parts = iso_date.split("/")
        if len(parts) == 3:
            iso_date = f"{parts[0]}-{parts[1].zfill(2)}-{parts[2].zfill(2)}"

    match = _SLACK_DATE_RE.match(iso_date)
    if match:
        month = _MONTH_NUMBERS[match.group(1).lower()]
        day = match.group(2).zfill(2)
        year = match.group(3)
        iso_date = f"{year}-{month}-{day}"

    if not _ISO_DATE_RE.fullmatch(iso_date):
        return None
    return iso_date


# ── Per-type conversion ───────────────────────────────────────────────────


# Leading decimal literal; trailing text ("5 points") is ignored
_NUMBER_PREFIX_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _parse_number(value: Any) -> float | int | None:
    if isinstance(value, Real) and not isinstance(value, bool):
        number = value
    else:
        match = _NUMBER_PREFIX_RE.match(str(value))
        if match is None:
            return None
        number = float(match.group())
    if not math.isfinite(number):
        return None
    return number


def _text_content(value: Any) -> list[dict[str, Any]]:
    return [{"text": {"content": str(value)}}]


def convert_property_value(
    field_name: str,
    field_value: Any,
    property_type: str,
) -> dict[str, Any] | None:
    """Convert one raw value to a Notion property value (people excluded).

    Returns None for empty values, unsupported types, and values that do
    not parse as the declared type.
    """
    if field_value is None or field_value == "":
        return None

    if property_type == PropertyType.TITLE:
        return {"type": "title", "title": _text_content(field_value)}

    if property_type == PropertyType.RICH_TEXT:
        return {"type": "rich_text", "rich_text": _text_content(field_value)}

    if property_type == PropertyType.NUMBER:
        number = _parse_number(field_value)
        if number is None:
            logger.warning(
                "property_converter.invalid_number",
                field=field_name,
                value=field_value,
            )
            return None
        return {"type": "number", "number": number}

    if property_type == PropertyType.SELECT:
        return {"type": "select", "select": {"name": str(field_value)}}

    if property_type == PropertyType.MULTI_SELECT:
        if isinstance(field_value, Sequence) and not isinstance(field_value, str):
            values = list(field_value)
        else:
            values = [field_value]
        return {
            "type": "multi_select",
            "multi_select": [{"name": str(v)} for v in values],
        }

    if property_type == PropertyType.DATE:
        iso_date = normalize_date(field_value)
        if iso_date is None:
            logger.warning(
                "property_converter.invalid_date",
                field=field_name,
                value=field_value,
                expected="YYYY-MM-DD",
            )
            return None
        return {"type": "date", "date": {"start": iso_date}}

    if property_type == PropertyType.CHECKBOX:
        return {
            "type": "checkbox",
            "checkbox": field_value is True or field_value == "true",
        }

    if property_type == PropertyType.URL:
        return {"type": "url", "url": str(field_value)}

    if property_type == PropertyType.EMAIL:
        return {"type": "email", "email": str(field_value)}

    if property_type == PropertyType.PHONE_NUMBER:
        return {"type": "phone_number", "phone_number": str(field_value)}

    return None


def find_property_definition(
    field_name: str,
    writable_properties: Sequence[DatabaseProperty],
) -> DatabaseProperty | None:
    """Return the first writable property named field_name, if any."""
    for prop in writable_properties:
        if prop.name == field_name:
            return prop
    return None


# ── Full conversion ───────────────────────────────────────────────────────


async def convert_to_notion_properties(
    collected_fields: CollectedFields,
    writable_properties: Sequence[DatabaseProperty],
    user_mapping: UserMappingFunction,
) -> ConversionResult:
    """Convert collected fields into a Notion properties payload.

    User fields (single Slack user per people property) are processed
    first, then regular fields. A regular field that targets a people
    property is read as Slack user handles, either a list or one
    comma-separated string.

    Args:
        collected_fields: Output of collect_fields_from_inputs().
        writable_properties: Writable schema of the target database.
        user_mapping: Slack -> Notion user resolution.

    Returns:
        ConversionResult with the converted properties and one warning per
        Slack user that could not be mapped.
    """
    notion_properties: dict[str, dict[str, Any]] = {}
    warnings: list[str] = []

    for field_name, user_id in collected_fields.user_fields_data.items():
        if not user_id:
            continue

        property_def = find_property_definition(field_name, writable_properties)
        if property_def is None:
            logger.warning("property_converter.unknown_property", field=field_name)
            continue

        if property_def.type != PropertyType.PEOPLE:
            logger.warning(
                "property_converter.user_field_not_people",
                field=field_name,
                property_type=property_def.type,
            )
            continue

        mapping = await user_mapping.map_single(user_id)

        if mapping.notion_user_id:
            notion_properties[field_name] = {
                "type": "people",
                "people": [{"id": mapping.notion_user_id}],
            }
            logger.info(
                "property_converter.user_field_mapped",
                field=field_name,
                slack_user_id=user_id,
                notion_user_id=mapping.notion_user_id,
            )
        else:
            warning = (
                f"Failed to map user field {field_name} ({user_id}): "
                f"{mapping.error or 'Unknown error'}"
            )
            logger.warning("property_converter.user_field_unmapped", warning=warning)
            warnings.append(warning)

    for field_name, field_value in collected_fields.properties_data.items():
        if field_value is None or field_value == "":
            continue

        property_def = find_property_definition(field_name, writable_properties)
        if property_def is None:
            logger.warning("property_converter.unknown_property", field=field_name)
            continue

        if property_def.type == PropertyType.PEOPLE:
            if isinstance(field_value, Sequence) and not isinstance(field_value, str):
                user_ids = ",".join(str(v) for v in field_value)
            else:
                user_ids = str(field_value)
            results = await user_mapping.map_multiple(user_ids)

            for failed in results:
                if failed.notion_user_id is not None:
                    continue
                warning = (
                    f"Failed to map Slack user {failed.slack_user_id}: "
                    f"{failed.error or 'Unknown error'}"
                )
                logger.warning("property_converter.people_user_unmapped", warning=warning)
                warnings.append(warning)

            notion_user_ids = [
                r.notion_user_id for r in results if r.notion_user_id is not None
            ]
            if notion_user_ids:
                notion_properties[field_name] = {
                    "type": "people",
                    "people": [{"id": user_id} for user_id in notion_user_ids],
                }
            elif results:
                logger.warning("property_converter.no_people_mapped", field=field_name)
            continue

        converted = convert_property_value(field_name, field_value, property_def.type)
        if converted is not None:
            notion_properties[field_name] = converted
        else:
            logger.warning(
                "property_converter.unsupported_or_invalid",
                field=field_name,
                property_type=property_def.type,
            )

    return ConversionResult(notion_properties=notion_properties, warnings=warnings)
