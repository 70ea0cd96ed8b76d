"""Exception hierarchy for Notion item operations.

Only fatal conditions are exceptions. Field-level conversion problems are
logged and Slack/Notion user mapping problems become warnings, so neither
appears here.
"""

from __future__ import annotations


class NotionBridgeError(Exception):
    """Base class for errors that abort a create/update operation."""


class ConfigurationError(NotionBridgeError):
    """A required credential or setting is missing."""


class PolicyViolationError(NotionBridgeError):
    """The converted properties do not satisfy the write policy.

    Raised before any write is attempted (missing title on create, nothing
    to update, page not in a database).
    """


class NotionAPIError(NotionBridgeError):
    """The Notion API answered a request with a non-success response."""

    def __init__(self, status: int | None, code: str | None, message: str) -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"Notion API error ({status}): {message}")


class InvalidInputError(NotionBridgeError):
    """A required function input (database_id, page_id) is missing."""
