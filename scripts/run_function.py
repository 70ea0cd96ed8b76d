#!/usr/bin/env python3
"""Run create_notion_item / update_notion_item from the command line.

Builds the same flat input bag a Slack workflow step would send and prints
the function outputs as JSON. Credentials come from the environment or .env
(NOTION_TOKEN, SLACK_BOT_TOKEN).

Usage:
    python scripts/run_function.py create --database-id <db> \
        --field "Name=Write release notes" --field "Due=December 26th, 2025" \
        --user-field "Assignee=<@U0123ABCDE>"

    python scripts/run_function.py update --page-id <page> --field "Status=Done"

Exit code 0 on success, 1 on failure.
"""

import argparse
import asyncio
import json
import os
import sys

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


def _split_pair(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    return name.strip(), value


def build_inputs(args: argparse.Namespace) -> dict[str, str]:
    """Lay out --field / --user-field pairs in the positional input slots."""
    from src.notion_bridge.notion.fields import MAX_FIELD_SLOTS, MAX_USER_FIELD_SLOTS

    if len(args.field) > MAX_FIELD_SLOTS:
        raise SystemExit(f"At most {MAX_FIELD_SLOTS} --field arguments are supported")
    if len(args.user_field) > MAX_USER_FIELD_SLOTS:
        raise SystemExit(f"At most {MAX_USER_FIELD_SLOTS} --user-field arguments are supported")

    inputs: dict[str, str] = {}
    if args.command == "create":
        inputs["database_id"] = args.database_id
    else:
        inputs["page_id"] = args.page_id

    for i, (name, value) in enumerate(args.field, start=1):
        inputs[f"field{i}_name"] = name
        inputs[f"field{i}_value"] = value
    for i, (name, value) in enumerate(args.user_field, start=1):
        inputs[f"user_field{i}_name"] = name
        inputs[f"user_field{i}_value"] = value
    return inputs


async def run(args: argparse.Namespace) -> bool:
    from src.notion_bridge.api.middleware.logging import configure_structlog
    from src.notion_bridge.config import get_settings
    from src.notion_bridge.functions import (
        FunctionRuntime,
        run_create_notion_item,
        run_update_notion_item,
    )

    configure_structlog()
    runtime = FunctionRuntime(get_settings())
    inputs = build_inputs(args)

    if args.command == "create":
        outputs = await run_create_notion_item(inputs, runtime)
    else:
        outputs = await run_update_notion_item(inputs, runtime)

    print(json.dumps(outputs.model_dump(exclude_none=True), indent=2))
    return outputs.success


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or update a Notion database item")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a page in a database")
    create.add_argument("--database-id", required=True, help="Notion database ID")

    update = sub.add_parser("update", help="Update an existing database page")
    update.add_argument("--page-id", required=True, help="Notion page ID")

    for p in (create, update):
        p.add_argument(
            "--field", type=_split_pair, action="append", default=[],
            help="Property NAME=VALUE (repeatable, max 10)",
        )
        p.add_argument(
            "--user-field", type=_split_pair, action="append", default=[],
            help="People property NAME=SLACK_USER (repeatable, max 3)",
        )

    args = parser.parse_args()
    ok = asyncio.run(run(args))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
