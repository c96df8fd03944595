"""Tests for the link service HTTP layer.

Uses an in-memory preference store, so nothing touches the user's files.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webvpn.app import create_app
from webvpn.codec import decode, encode
from webvpn.config import WebvpnConfig
from webvpn.links import STORAGE_KEY
from webvpn.prefs import InMemoryPreferenceStore

GATEWAY = "https://webvpn.xauat.edu.cn"


def _make_client(store=None, **overrides) -> TestClient:
    config = WebvpnConfig(**overrides)
    app = create_app(config, store=store if store is not None else InMemoryPreferenceStore())
    return TestClient(app)


@pytest.fixture
def client():
    return _make_client()


class TestMeta:
    def test_health(self, client):
        r = client.get("/api/v1/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "service": "webvpn"}

    def test_version_reports_scheme(self, client):
        r = client.get("/api/v1/version")
        assert r.status_code == 200
        assert r.json()["scheme"] == "sealed"

    def test_unknown_scheme_fails_at_startup(self):
        with pytest.raises(ValueError):
            create_app(WebvpnConfig(scheme="rot13"), store=InMemoryPreferenceStore())


class TestCodecEndpoints:
    def test_encode(self, client):
        r = client.post("/api/v1/encode", json={"url": "https://example.com/a?b=c"})
        assert r.status_code == 200
        assert r.json() == {"path": encode("https://example.com/a?b=c"), "scheme": "sealed"}

    def test_decode(self, client):
        path = encode("https://example.com/a?b=c")
        r = client.post("/api/v1/decode", json={"path": path})
        assert r.status_code == 200
        assert r.json() == {"url": "https://example.com/a?b=c"}

    def test_encode_rejects_other_schemes(self, client):
        r = client.post("/api/v1/encode", json={"url": "ftp://host/x"})
        assert r.status_code == 422
        assert r.json()["error"] == "InvalidInputError"

    def test_encode_missing_body_field(self, client):
        r = client.post("/api/v1/encode", json={})
        assert r.status_code == 422

    def test_decode_malformed(self, client):
        r = client.post("/api/v1/decode", json={"path": "/nope/abc"})
        assert r.status_code == 400
        assert r.json()["error"] == "MalformedPathError"

    def test_decode_tampered(self, client):
        path = encode("https://example.com/some/longer/path?with=query")
        tampered = path[:-1] + ("0" if path[-1] != "0" else "1")
        r = client.post("/api/v1/decode", json={"path": tampered})
        assert r.status_code in (400, 422)
        assert r.json()["error"] in ("PaddingError", "InvalidInputError")

    def test_wrd_scheme(self):
        c = _make_client(scheme="wrdvpn")
        r = c.post("/api/v1/encode", json={"url": "https://example.com/x"})
        assert r.status_code == 200
        assert r.json()["path"].startswith("/https/77726476706e69737468656265737421")
        assert r.json()["scheme"] == "wrdvpn"


class TestLinks:
    def test_default_base(self, client):
        r = client.post("/api/v1/links", json={"url": "https://example.com/"})
        assert r.status_code == 200
        data = r.json()
        assert data["base_url"] == GATEWAY
        assert data["vpn_url"] == GATEWAY + data["path"]
        assert decode(data["path"]) == "https://example.com/"

    def test_override_base(self, client):
        r = client.post(
            "/api/v1/links",
            json={"url": "https://example.com/", "base_url": "gw.local/"},
        )
        assert r.json()["base_url"] == "https://gw.local"
        assert r.json()["vpn_url"].startswith("https://gw.local/webvpn/")

    def test_saved_base(self):
        c = _make_client(InMemoryPreferenceStore({STORAGE_KEY: "https://saved.local"}))
        r = c.post("/api/v1/links", json={"url": "https://example.com/"})
        assert r.json()["base_url"] == "https://saved.local"

    def test_configured_default(self):
        c = _make_client(base_url="campus.gateway")
        r = c.post("/api/v1/links", json={"url": "https://example.com/"})
        assert r.json()["base_url"] == "https://campus.gateway"

    def test_non_http_url(self, client):
        r = client.post("/api/v1/links", json={"url": "about:blank"})
        assert r.status_code == 422

    def test_go_redirects(self, client):
        r = client.get(
            "/api/v1/go",
            params={"url": "https://example.com/a?b=c"},
            follow_redirects=False,
        )
        assert r.status_code == 307
        assert r.headers["location"] == GATEWAY + encode("https://example.com/a?b=c")

    def test_go_ignores_caller_supplied_base(self, client):
        r = client.get(
            "/api/v1/go",
            params={"url": "https://example.com/", "base_url": "evil.example"},
            follow_redirects=False,
        )
        assert r.status_code == 307
        assert r.headers["location"] == GATEWAY + encode("https://example.com/")

    def test_go_uses_saved_base(self):
        c = _make_client(InMemoryPreferenceStore({STORAGE_KEY: "https://saved.local"}))
        r = c.get("/api/v1/go", params={"url": "https://example.com/"}, follow_redirects=False)
        assert r.headers["location"].startswith("https://saved.local/webvpn/")

    def test_go_rejects_bad_url(self, client):
        r = client.get("/api/v1/go", params={"url": "ftp://x/"}, follow_redirects=False)
        assert r.status_code == 422


class TestBaseUrlPreference:
    def test_unsaved_reports_default(self, client):
        r = client.get("/api/v1/base-url")
        assert r.status_code == 200
        assert r.json() == {"base_url": GATEWAY, "saved": False}

    def test_save_and_read(self, client):
        r = client.put("/api/v1/base-url", json={"base_url": "gw.local///"})
        assert r.status_code == 200
        assert r.json() == {"base_url": "https://gw.local", "saved": True}

        r = client.get("/api/v1/base-url")
        assert r.json() == {"base_url": "https://gw.local", "saved": True}

        r = client.post("/api/v1/links", json={"url": "https://example.com/"})
        assert r.json()["base_url"] == "https://gw.local"

    def test_save_empty(self, client):
        r = client.put("/api/v1/base-url", json={"base_url": "  "})
        assert r.status_code == 422

    def test_corrupt_store(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{broken")
        c = TestClient(create_app(WebvpnConfig(prefs_path=str(path))))
        r = c.get("/api/v1/base-url")
        assert r.status_code == 500
        assert r.json()["error"] == "PreferenceError"


class TestAuth:
    def test_no_key_required_by_default(self, client):
        r = client.post("/api/v1/encode", json={"url": "https://example.com/"})
        assert r.status_code == 200

    def test_key_required_when_configured(self):
        c = _make_client(api_key="secret-key-123")

        r = c.post("/api/v1/encode", json={"url": "https://example.com/"})
        assert r.status_code == 401

        r = c.post(
            "/api/v1/encode",
            json={"url": "https://example.com/"},
            headers={"X-API-Key": "wrong"},
        )
        assert r.status_code == 401

        r = c.post(
            "/api/v1/encode",
            json={"url": "https://example.com/"},
            headers={"X-API-Key": "secret-key-123"},
        )
        assert r.status_code == 200

    def test_meta_routes_guarded_when_configured(self):
        c = _make_client(api_key="secret-key-123")
        assert c.get("/api/v1/health").status_code == 401
        assert c.get("/api/v1/version").status_code == 401
        r = c.get("/api/v1/health", headers={"X-API-Key": "secret-key-123"})
        assert r.status_code == 200
