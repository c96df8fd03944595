"""Request and response bodies for the link service."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EncodeRequest(BaseModel):
    url: str


class EncodeResponse(BaseModel):
    path: str
    scheme: str


class DecodeRequest(BaseModel):
    path: str


class DecodeResponse(BaseModel):
    url: str


class LinkRequest(BaseModel):
    url: str
    base_url: str | None = Field(
        default=None,
        description="Overrides the saved base URL for this request only.",
    )


class LinkResponse(BaseModel):
    path: str
    base_url: str
    vpn_url: str


class BaseUrlBody(BaseModel):
    base_url: str


class BaseUrlState(BaseModel):
    base_url: str
    saved: bool
