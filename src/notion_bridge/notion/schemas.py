"""Pydantic schemas for the Notion side of the bridge.

Defines:
- PropertyType / READ_ONLY_PROPERTY_TYPES: Notion database property types
- DatabaseProperty, NotionDatabase: database schema as fetched from the API
- NotionUser, NotionUsersPage: workspace users (paginated /users listing)
- CreatedPage, PageInfo: Record Writer responses
- CollectedFields, ConversionResult: Field Collector / converter payloads

Page property values themselves are plain dicts shaped exactly as the
Notion API expects them (e.g. {"type": "select", "select": {"name": "Done"}}).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Property Types ─────────────────────────────────────────────────────────


class PropertyType(str, Enum):
    """Notion database property types known to the bridge."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    PEOPLE = "people"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    CREATED_TIME = "created_time"
    CREATED_BY = "created_by"
    LAST_EDITED_TIME = "last_edited_time"
    LAST_EDITED_BY = "last_edited_by"


# Computed by Notion, never accepted in a page create/update payload
READ_ONLY_PROPERTY_TYPES: frozenset[str] = frozenset(
    {
        PropertyType.CREATED_TIME.value,
        PropertyType.CREATED_BY.value,
        PropertyType.LAST_EDITED_TIME.value,
        PropertyType.LAST_EDITED_BY.value,
    }
)


# ── Database Schema ────────────────────────────────────────────────────────


class DatabaseProperty(BaseModel):
    """A single writable field definition of a Notion database.

    `type` stays a plain string: Notion adds property types over time
    (formula, relation, status, ...) and the converter skips anything it
    does not support instead of failing validation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str


class RawDatabaseProperty(BaseModel):
    """Property entry as returned by GET /databases/{id}."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str | None = None
    type: str


class NotionDatabase(BaseModel):
    """Database object as returned by GET /databases/{id}."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: list[dict[str, Any]] = Field(default_factory=list)
    properties: dict[str, RawDatabaseProperty] = Field(default_factory=dict)


# ── Users ──────────────────────────────────────────────────────────────────


class NotionPerson(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None


class NotionUser(BaseModel):
    """Workspace user from GET /users. Bots have type "bot" and no person."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    type: str | None = None
    name: str | None = None
    person: NotionPerson | None = None

    @property
    def email(self) -> str | None:
        if self.person is None:
            return None
        return self.person.email


class NotionUsersPage(BaseModel):
    """One page of the paginated GET /users listing."""

    model_config = ConfigDict(extra="ignore")

    results: list[NotionUser] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None


# ── Pages ──────────────────────────────────────────────────────────────────


class CreatedPage(BaseModel):
    """Identity of a page returned by create/update page calls."""

    model_config = ConfigDict(extra="ignore")

    id: str
    url: str = ""


class PageInfo(BaseModel):
    """Page identity plus the database that governs its schema.

    parent_database_id is None when the page lives under another page or
    the workspace rather than a database.
    """

    id: str
    url: str = ""
    parent_type: str | None = None
    parent_database_id: str | None = None


# ── Conversion Payloads ────────────────────────────────────────────────────


class CollectedFields(BaseModel):
    """Name/value pairs extracted from the positional function inputs.

    properties_data: regular fieldN_name -> fieldN_value pairs.
    user_fields_data: user_fieldN_name -> Slack user handle pairs.
    """

    properties_data: dict[str, Any] = Field(default_factory=dict)
    user_fields_data: dict[str, str] = Field(default_factory=dict)


class ConversionResult(BaseModel):
    """Converted Notion page properties plus user-mapping warnings."""

    notion_properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
