"""API authentication via the ``X-API-Key`` header."""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

if TYPE_CHECKING:
    from consult_ai.core.config import AuthConfig

log = logging.getLogger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_auth(
    request: Request,
    api_key: str | None = Security(_api_key_header),
) -> None:
    """Reject the request unless auth is disabled or a configured key is presented."""
    config: AuthConfig = request.app.state.settings.auth

    if not config.enabled:
        return None

    if api_key and any(hmac.compare_digest(api_key, k) for k in config.api_keys):
        return None

    log.info("Rejected unauthenticated request", extra={"path": request.url.path})
    raise HTTPException(
        status_code=401,
        detail="Authentication required. Provide an X-API-Key header.",
    )
