"""Slack custom functions backed by Notion.

- create_notion_item: create a database page from positional field inputs
- update_notion_item: update a database page from positional field inputs

Both share FunctionRuntime (settings, user directory cache, client
construction) and return FunctionOutputs.
"""

from src.notion_bridge.functions.create_item import run_create_notion_item
from src.notion_bridge.functions.runtime import FunctionRuntime
from src.notion_bridge.functions.schemas import FunctionOutputs
from src.notion_bridge.functions.update_item import run_update_notion_item

__all__ = [
    "FunctionRuntime",
    "FunctionOutputs",
    "run_create_notion_item",
    "run_update_notion_item",
]
