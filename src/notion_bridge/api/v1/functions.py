"""HTTP endpoints for the Slack custom functions.

A Slack function step (or any workflow runner) posts the function's input
parameters as a flat bag and receives the output parameters back. Function
failures are reported in the body (success=false, error=...) with HTTP 200,
matching the Slack function output contract; only authentication problems
produce an HTTP error status.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.notion_bridge.api.deps import get_runtime, verify_api_key
from src.notion_bridge.functions.create_item import run_create_notion_item
from src.notion_bridge.functions.runtime import FunctionRuntime
from src.notion_bridge.functions.schemas import FunctionOutputs
from src.notion_bridge.functions.update_item import run_update_notion_item

router = APIRouter(
    prefix="/functions",
    tags=["functions"],
    dependencies=[Depends(verify_api_key)],
)


class FunctionRequest(BaseModel):
    """Input parameters of one function invocation."""

    inputs: dict[str, Any] = Field(default_factory=dict)


@router.post(
    "/create_notion_item",
    response_model=FunctionOutputs,
    response_model_exclude_none=True,
)
async def create_notion_item(
    body: FunctionRequest,
    runtime: FunctionRuntime = Depends(get_runtime),
) -> FunctionOutputs:
    """Create a page in a Notion database."""
    return await run_create_notion_item(body.inputs, runtime)


@router.post(
    "/update_notion_item",
    response_model=FunctionOutputs,
    response_model_exclude_none=True,
)
async def update_notion_item(
    body: FunctionRequest,
    runtime: FunctionRuntime = Depends(get_runtime),
) -> FunctionOutputs:
    """Update an existing page in a Notion database."""
    return await run_update_notion_item(body.inputs, runtime)
