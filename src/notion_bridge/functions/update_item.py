"""update_notion_item -- update an existing Notion database page from Slack inputs.

Inputs: page_id, field1..field10 name/value pairs, user_field1..3
name/Slack-user pairs. The page's parent database supplies the schema the
inputs are converted against. Nothing is written when no input converts.
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

logger = structlog.get_logger(__name__)

FUNCTION_NAME = "update_notion_item"


async def run_update_notion_item(
    inputs: Mapping[str, Any],
    runtime: FunctionRuntime,
) -> FunctionOutputs:
    """Update a Notion database page from Slack function inputs."""
    async with track_function_call(FUNCTION_NAME) as tracker:
        outputs = await _update(inputs, runtime, tracker)
        tracker["outcome"] = "success" if outputs.success else "error"
        return outputs


async def _update(
    inputs: Mapping[str, Any],
    runtime: FunctionRuntime,
    tracker: dict[str, Any],
) -> FunctionOutputs:
    try:
        runtime.require_notion_token()
        page_id = require_input(inputs, "page_id")
    except (ConfigurationError, InvalidInputError) as exc:
        logger.error("update_item.rejected", error=str(exc))
        return FunctionOutputs.failure(str(exc))

    try:
        async with runtime.notion_client() as notion_client:
            page_info = await notion_client.get_page(page_id)
            if page_info.parent_type != "database_id" or not page_info.parent_database_id:
                raise PolicyViolationError("The specified page is not part of a database")

            database = await notion_client.get_database_schema(page_info.parent_database_id)
            writable_properties = notion_client.get_writable_properties(database)

            conversion = await runtime.convert_inputs(inputs, writable_properties, notion_client)
            tracker["warnings"] = len(conversion.warnings)
            if not conversion.notion_properties:
                raise PolicyViolationError("No valid properties to update")

            page = await notion_client.update_page(page_id, conversion.notion_properties)

    except PolicyViolationError as exc:
        logger.warning("update_item.policy_violation", page_id=page_id, error=str(exc))
        return FunctionOutputs.failure(str(exc))
    except Exception as exc:
        logger.exception("update_item.failed", page_id=page_id)
        return FunctionOutputs.failure(f"Failed to update Notion item: {exc}")

    logger.info(
        "update_item.succeeded",
        page_id=page.id,
        database_id=page_info.parent_database_id,
        warnings=len(conversion.warnings),
    )
    return FunctionOutputs.succeeded(page.id, page.url, conversion.warnings)
