"""Notion integration layer -- schema access, field collection, property conversion.

Provides:
- NotionClient: Schema Accessor and Record Writer over the Notion API
- collect_fields_from_inputs: Positional Slack function inputs -> CollectedFields
- convert_to_notion_properties: CollectedFields + writable schema -> page properties
- convert_property_value / normalize_date: Pure per-type conversion helpers
"""

from src.notion_bridge.notion.client import NotionClient
from src.notion_bridge.notion.fields import (
    MAX_FIELD_SLOTS,
    MAX_USER_FIELD_SLOTS,
    collect_fields_from_inputs,
)
from src.notion_bridge.notion.properties import (
    UserMappingFunction,
    convert_property_value,
    convert_to_notion_properties,
    find_property_definition,
    normalize_date,
)
from src.notion_bridge.notion.schemas import (
    READ_ONLY_PROPERTY_TYPES,
    CollectedFields,
    ConversionResult,
    DatabaseProperty,
    PropertyType,
)

__all__ = [
    "NotionClient",
    "MAX_FIELD_SLOTS",
    "MAX_USER_FIELD_SLOTS",
    "collect_fields_from_inputs",
    "UserMappingFunction",
    "convert_property_value",
    "convert_to_notion_properties",
    "find_property_definition",
    "normalize_date",
    "READ_ONLY_PROPERTY_TYPES",
    "CollectedFields",
    "ConversionResult",
    "DatabaseProperty",
    "PropertyType",
]
