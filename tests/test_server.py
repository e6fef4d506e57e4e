"""Tests for the HTTP sidecar."""

import json
import threading
import urllib.error
import urllib.request
from http.server import HTTPServer

import pytest

from anonimizador.server import AnonymizerHandler, BadRequest, handle_anonymize, handle_anonymize_messages


# ── Handlers ─────────────────────────────────────────────────────────

def test_handle_anonymize_default_config():
    out = handle_anonymize({"text": "CPF 123.456.789-00", "names": []})
    assert out == {"text": "CPF [CPF]", "counts": {"CPF": 1}}


def test_handle_anonymize_with_settings():
    out = handle_anonymize({
        "text": "Pedro, CPF 123.456.789-00",
        "config": {"enabled": True, "cpf": False, "nomesUsuario": ["Pedro"]},
    })
    assert out["text"] == "[PESSOA 1], CPF 123.456.789-00"


def test_handle_anonymize_null_config_is_identity():
    assert handle_anonymize({"text": "CPF 123.456.789-00", "config": None})["text"] == "CPF 123.456.789-00"


def test_handle_messages():
    out = handle_anonymize_messages({"messages": [{"role": "user", "content": "a@b.com"}]})
    assert out == {"messages": [{"role": "user", "content": "[EMAIL]"}]}


def test_bad_bodies():
    with pytest.raises(BadRequest):
        handle_anonymize({"text": 42})
    with pytest.raises(BadRequest):
        handle_anonymize({"text": "x", "names": "Pedro"})
    with pytest.raises(BadRequest):
        handle_anonymize_messages({"messages": "oi"})


# ── Over HTTP ────────────────────────────────────────────────────────

@pytest.fixture
def base_url():
    server = HTTPServer(("127.0.0.1", 0), AnonymizerHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def post(url, body):
    data = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"})
    with urllib.request.urlopen(req) as resp:
        return resp.status, json.loads(resp.read())


def test_health_and_categories(base_url):
    with urllib.request.urlopen(base_url + "/health") as resp:
        assert json.loads(resp.read()) == {"status": "ok"}
    with urllib.request.urlopen(base_url + "/categories") as resp:
        cats = json.loads(resp.read())["categories"]
    assert cats[0] == {"category": "PROCESSO", "placeholder": "[PROCESSO]", "flag": "processo"}


def test_post_anonymize(base_url):
    status, data = post(base_url + "/anonymize", {"text": "João Silva, (11) 9876-5432", "names": ["João Silva"]})
    assert status == 200
    assert data["text"] == "[PESSOA 1], [TELEFONE]"


def test_bad_config_is_400(base_url):
    with pytest.raises(urllib.error.HTTPError) as exc:
        post(base_url + "/anonymize", {"text": "x", "config": {"enabled": "sim"}})
    assert exc.value.code == 400


def test_bad_json_is_400(base_url):
    with pytest.raises(urllib.error.HTTPError) as exc:
        post(base_url + "/anonymize", b"{oops")
    assert exc.value.code == 400


def test_unknown_path_is_404(base_url):
    with pytest.raises(urllib.error.HTTPError) as exc:
        post(base_url + "/rehydrate", {"text": "x"})
    assert exc.value.code == 404
