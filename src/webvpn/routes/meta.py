"""Meta endpoints — health and version."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from webvpn.codec import Codec
from webvpn.deps import get_codec

router = APIRouter(prefix="/api/v1", tags=["meta"])


@router.get("/health")
def health():
    return {"status": "ok", "service": "webvpn"}


@router.get("/version")
def version(codec: Codec = Depends(get_codec)):
    return {"service": "0.1.0", "scheme": codec.name}
