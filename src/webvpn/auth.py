"""Optional API key guard for the link service.

An empty configured key leaves the service open, which is the normal case
for a service bound to localhost. Otherwise the X-API-Key header must match.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

audit_logger = logging.getLogger("webvpn.audit")

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def key_matches(expected_key: str, supplied: str | None) -> bool:
    if supplied is None:
        return False
    return secrets.compare_digest(expected_key.encode("utf-8"), supplied.encode("utf-8"))


def make_api_key_checker(expected_key: str):
    """Build the dependency guarding a router. No-op when expected_key is empty."""

    async def check_api_key(
        request: Request,
        api_key: str | None = Security(_api_key_header),
    ) -> str | None:
        if not expected_key:
            return None
        if not key_matches(expected_key, api_key):
            audit_logger.warning("Rejected API key for %s %s", request.method, request.url.path)
            raise HTTPException(status_code=401, detail="Invalid or missing API key")
        return api_key

    return check_api_key
