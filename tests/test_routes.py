from __future__ import annotations

import jwt

from conftest import TWILIO_ENV
from voice.routing import render_voice_response


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_token_returns_token_for_requested_identity(client):
    response = client.post("/token", json={"identity": "agent-7"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["identity"] == "agent-7"
    claims = jwt.decode(payload["token"], TWILIO_ENV["TWILIO_API_SECRET"], algorithms=["HS256"])
    assert claims["grants"]["identity"] == "agent-7"
    assert response.headers["access-control-allow-origin"] == "*"


def test_token_uses_default_identity(client, configure):
    configure(DEFAULT_IDENTITY="front-desk")

    assert client.post("/token", json={}).json()["identity"] == "front-desk"
    assert client.post("/token").json()["identity"] == "front-desk"


def test_token_accepts_form_body(client):
    response = client.post("/token", data={"identity": "form-agent"})
    assert response.json()["identity"] == "form-agent"


def test_token_reports_every_missing_setting(client, configure):
    configure(TWILIO_API_KEY=None, TWILIO_API_SECRET=None)

    response = client.post("/token", json={"identity": "agent-7"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert "TWILIO_API_KEY" in error
    assert "TWILIO_API_SECRET" in error
    assert "TWILIO_ACCOUNT_SID" not in error


def test_token_rejects_malformed_json(client):
    response = client.post("/token", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}


def test_token_echoes_allowed_origin(client, configure):
    configure(ALLOWED_ORIGIN="https://a.example,https://b.example")

    allowed = client.post("/token", json={}, headers={"Origin": "https://b.example"})
    unknown = client.post("/token", json={}, headers={"Origin": "https://evil.example"})

    assert allowed.headers["access-control-allow-origin"] == "https://b.example"
    assert unknown.headers["access-control-allow-origin"] == "https://a.example"


def test_token_preflight_is_empty_204(client, configure, monkeypatch):
    import api.routes as routes

    def _fail():
        raise AssertionError("pre-flight must not issue tokens")

    monkeypatch.setattr(routes, "build_credential_issuer", _fail)
    configure(ALLOWED_ORIGIN="https://a.example")

    response = client.options("/token", headers={"Origin": "https://a.example"})

    assert response.status_code == 204
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "https://a.example"
    assert response.headers["access-control-allow-headers"] == "Content-Type"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


def test_token_rejects_get(client):
    response = client.get("/token")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}


def test_voice_dials_form_destination(client):
    response = client.post("/voice", data={"To": "+14155552671"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/xml")
    assert "<Number>+14155552671</Number>" in response.text
    assert "callerId" not in response.text


def test_voice_falls_back_to_query_parameter(client):
    response = client.post("/voice?To=%2B14155552671")
    assert "<Number>+14155552671</Number>" in response.text


def test_voice_without_destination_matches_absent_document(client):
    response = client.post("/voice", data={"CallSid": "CA123"})

    assert response.status_code == 200
    assert response.text == render_voice_response(None)


def test_voice_attaches_configured_caller_id(client, configure):
    configure(TWILIO_CALLER_ID="+15005550006")

    response = client.post("/voice", data={"To": "+14155552671"})
    assert 'callerId="+15005550006"' in response.text


def test_voice_requires_configuration(client, configure):
    configure(TWILIO_TWIML_APP_SID=None)

    response = client.post("/voice", data={"To": "+14155552671"})

    assert response.status_code == 500
    assert "TWILIO_TWIML_APP_SID" in response.json()["error"]


def test_voice_rejects_malformed_json(client):
    response = client.post("/voice", content=b"[", headers={"content-type": "application/json"})
    assert response.status_code == 400


def test_voice_rejects_get(client):
    response = client.get("/voice")
    assert response.status_code == 405


def test_voice_rejects_options_and_head_with_error_body(client):
    options = client.options("/voice")
    head = client.head("/voice")

    assert options.status_code == 405
    assert options.json() == {"error": "Method Not Allowed"}
    assert head.status_code == 405


def test_voice_treats_blank_destination_as_missing(client):
    response = client.post("/voice", data={"To": " "})
    assert response.text == render_voice_response(None)
