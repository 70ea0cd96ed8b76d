"""Pydantic schemas for Slack -> Notion user mapping."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DuplicateEmailPolicy(str, Enum):
    """What to do when several Notion people share the Slack user's email."""

    FIRST = "first"  # Take the first match in Notion's listing order
    REJECT = "reject"  # Treat the ambiguity as a mapping failure


class UserMappingResult(BaseModel):
    """Outcome of mapping one Slack user handle to a Notion user.

    On success notion_user_id is set and error is None; on failure
    notion_user_id is None and error says why.
    """

    model_config = ConfigDict(frozen=True)

    notion_user_id: str | None = None
    slack_user_id: str
    error: str | None = None


class SlackUserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    real_name: str | None = None
    display_name: str | None = None


class SlackUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None
    profile: SlackUserProfile = Field(default_factory=SlackUserProfile)


class SlackUserInfoResponse(BaseModel):
    """Body of a Slack users.info response."""

    model_config = ConfigDict(extra="ignore")

    ok: bool
    error: str | None = None
    user: SlackUser | None = None
