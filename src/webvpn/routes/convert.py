"""Codec endpoints — encode a URL, decode a path for verification."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from webvpn.codec import Codec
from webvpn.deps import get_codec
from webvpn.models import DecodeRequest, DecodeResponse, EncodeRequest, EncodeResponse

router = APIRouter(prefix="/api/v1", tags=["codec"])


@router.post("/encode", response_model=EncodeResponse)
def encode_url(body: EncodeRequest, codec: Codec = Depends(get_codec)):
    return EncodeResponse(path=codec.encode(body.url), scheme=codec.name)


@router.post("/decode", response_model=DecodeResponse)
def decode_path(body: DecodeRequest, codec: Codec = Depends(get_codec)):
    return DecodeResponse(url=codec.decode(body.path))
