"""create_notion_item -- create a page in a Notion database from Slack inputs.

Inputs: database_id, field1..field10 name/value pairs, user_field1..3
name/Slack-user pairs. Outputs: FunctionOutputs (page id/url on success,
user mapping warnings joined with "; ").

The database's title property, when it has one, must be among the
converted properties; otherwise no page is created.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from src.notion_bridge.core.errors import (
    ConfigurationError,
    InvalidInputError,
    PolicyViolationError,
)
from src.notion_bridge.core.monitoring import track_function_call
from src.notion_bridge.functions.runtime import FunctionRuntime, require_input
from src.notion_bridge.functions.schemas import FunctionOutputs
from src.notion_bridge.notion.schemas import DatabaseProperty, PropertyType

logger = structlog.get_logger(__name__)

FUNCTION_NAME = "create_notion_item"


def check_required_title(
    writable_properties: list[DatabaseProperty],
    notion_properties: Mapping[str, Any],
) -> None:
    """Raise PolicyViolationError if the title property was not produced."""
    title_property = next(
        (p for p in writable_properties if p.type == PropertyType.TITLE), None
    )
    if title_property is not None and title_property.name not in notion_properties:
        raise PolicyViolationError(f'Title field "{title_property.name}" is required')


async def run_create_notion_item(
    inputs: Mapping[str, Any],
    runtime: FunctionRuntime,
) -> FunctionOutputs:
    """Create a Notion database page from Slack function inputs."""
    async with track_function_call(FUNCTION_NAME) as tracker:
        outputs = await _create(inputs, runtime, tracker)
        tracker["outcome"] = "success" if outputs.success else "error"
        return outputs


async def _create(
    inputs: Mapping[str, Any],
    runtime: FunctionRuntime,
    tracker: dict[str, Any],
) -> FunctionOutputs:
    try:
        runtime.require_notion_token()
        database_id = require_input(inputs, "database_id")
    except (ConfigurationError, InvalidInputError) as exc:
        logger.error("create_item.rejected", error=str(exc))
        return FunctionOutputs.failure(str(exc))

    try:
        async with runtime.notion_client() as notion_client:
            database = await notion_client.get_database_schema(database_id)
            writable_properties = notion_client.get_writable_properties(database)

            conversion = await runtime.convert_inputs(inputs, writable_properties, notion_client)
            tracker["warnings"] = len(conversion.warnings)
            check_required_title(writable_properties, conversion.notion_properties)

            page = await notion_client.create_page(database_id, conversion.notion_properties)

    except PolicyViolationError as exc:
        logger.warning("create_item.policy_violation", database_id=database_id, error=str(exc))
        return FunctionOutputs.failure(str(exc))
    except Exception as exc:
        logger.exception("create_item.failed", database_id=database_id)
        return FunctionOutputs.failure(f"Failed to create Notion item: {exc}")

    logger.info(
        "create_item.succeeded",
        page_id=page.id,
        database_id=database_id,
        warnings=len(conversion.warnings),
    )
    return FunctionOutputs.succeeded(page.id, page.url, conversion.warnings)
