"""Output contract shared by the Slack functions."""

from __future__ import annotations

from pydantic import BaseModel

WARNING_SEPARATOR = "; "


class FunctionOutputs(BaseModel):
    """Output parameters returned to the Slack workflow.

    Exactly one outcome per invocation: success with optional page
    identity and warnings, or success=False with an error message.
    """

    success: bool
    page_id: str | None = None
    page_url: str | None = None
    error: str | None = None
    user_mapping_warnings: str | None = None

    @classmethod
    def failure(cls, error: str) -> FunctionOutputs:
        return cls(success=False, error=error)

    @classmethod
    def succeeded(
        cls, page_id: str, page_url: str, warnings: list[str] | None = None
    ) -> FunctionOutputs:
        return cls(
            success=True,
            page_id=page_id,
            page_url=page_url,
            user_mapping_warnings=WARNING_SEPARATOR.join(warnings) if warnings else None,
        )
