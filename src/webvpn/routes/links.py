"""Link endpoints — full gateway addresses and redirects.

Base URL precedence: request override, then the saved preference, then the
configured default.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from webvpn.browser import Converter, StoreBackedBridge
from webvpn.codec import Codec
from webvpn.config import WebvpnConfig
from webvpn.deps import get_codec, get_config, get_store
from webvpn.models import LinkRequest, LinkResponse
from webvpn.prefs import PreferenceStore

router = APIRouter(prefix="/api/v1", tags=["links"])


def _converter(
    url: str, store: PreferenceStore, codec: Codec, config: WebvpnConfig
) -> Converter:
    bridge = StoreBackedBridge(store, tab_url=url)
    return Converter(bridge, codec, default_base_url=config.base_url)


@router.post("/links", response_model=LinkResponse)
def create_link(
    body: LinkRequest,
    codec: Codec = Depends(get_codec),
    store: PreferenceStore = Depends(get_store),
    config: WebvpnConfig = Depends(get_config),
):
    converter = _converter(body.url, store, codec, config)
    vpn_url = converter.generate(body.base_url)
    base = converter.resolve_base_url(body.base_url)
    return LinkResponse(path=vpn_url[len(base) :], base_url=base, vpn_url=vpn_url)


@router.get("/go")
def go(
    url: str = Query(...),
    codec: Codec = Depends(get_codec),
    store: PreferenceStore = Depends(get_store),
    config: WebvpnConfig = Depends(get_config),
):
    # No per-request base here: a link to this endpoint must not choose the
    # redirect origin.
    target = _converter(url, store, codec, config).redirect()
    return RedirectResponse(target, status_code=307)
