"""FastAPI dependency injection for the function endpoints.

These dependencies are used in endpoint signatures to inject the shared
FunctionRuntime and to enforce the optional X-API-Key shared secret.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from src.notion_bridge.config import Settings, get_settings
from src.notion_bridge.functions.runtime import FunctionRuntime


async def get_runtime(request: Request) -> FunctionRuntime:
    """Get the process-wide FunctionRuntime created during app startup."""
    runtime = getattr(request.app.state, "function_runtime", None)
    if runtime is None:
        runtime = FunctionRuntime(get_settings())
        request.app.state.function_runtime = runtime
    return runtime


async def verify_api_key(
    x_api_key: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Require X-API-Key to match FUNCTION_API_KEY when one is configured.

    Raises:
        HTTPException(401): If the key is missing or does not match.
    """
    expected = settings.FUNCTION_API_KEY
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(
        x_api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
