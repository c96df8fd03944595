"""Preference endpoints — the saved gateway base URL."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from webvpn.config import WebvpnConfig
from webvpn.deps import get_config, get_store
from webvpn.links import normalize_base_url
from webvpn.models import BaseUrlBody, BaseUrlState
from webvpn.prefs import PreferenceStore, get_saved_base_url, save_base_url

router = APIRouter(prefix="/api/v1", tags=["prefs"])


@router.get("/base-url", response_model=BaseUrlState)
def read_base_url(
    store: PreferenceStore = Depends(get_store),
    config: WebvpnConfig = Depends(get_config),
):
    saved = get_saved_base_url(store)
    if saved:
        return BaseUrlState(base_url=saved, saved=True)
    return BaseUrlState(base_url=normalize_base_url(config.base_url), saved=False)


@router.put("/base-url", response_model=BaseUrlState)
def write_base_url(body: BaseUrlBody, store: PreferenceStore = Depends(get_store)):
    return BaseUrlState(base_url=save_base_url(store, body.base_url), saved=True)
