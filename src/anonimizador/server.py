"""HTTP sidecar server for anonimizador.

Runs as a lightweight stdlib HTTP server on localhost, so a browser app
or gateway can anonymize text without spawning a process per request.

Endpoints:
    POST /anonymize           — Anonymize a text
    POST /anonymize-messages  — Anonymize OpenAI-format messages
    GET  /categories          — Categories and placeholders
    GET  /health              — Health check

All endpoints expect/return JSON.
Body format: {"config": {...settings...}, "names": [...], "text"|"messages": ...}
A missing "config" means the default one (every category but R$ amounts).
"""

from __future__ import annotations
import json
import logging
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .config import AnonymizationConfig, ConfigError, load_config
from .engine import anonymize_detailed, anonymize_messages
from .log import configure_logging
from .patterns import REGISTRY

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("ANONIMIZADOR_PORT", "18792"))


class BadRequest(Exception):
    """Client sent something the sidecar cannot use."""


def _config_from(body: dict[str, Any]) -> AnonymizationConfig | None:
    if "config" not in body:
        return AnonymizationConfig()
    return load_config(body["config"])


def _names_from(body: dict[str, Any]) -> list[str] | None:
    names = body.get("names")
    if names is not None and (not isinstance(names, list) or not all(isinstance(n, str) for n in names)):
        raise BadRequest("'names' must be a list of strings")
    return names


def handle_anonymize(body: dict[str, Any]) -> dict[str, Any]:
    text = body.get("text", "")
    if not isinstance(text, str):
        raise BadRequest("'text' must be a string")
    result = anonymize_detailed(text, _config_from(body), _names_from(body))
    return {"text": result.text, "counts": result.counts()}


def handle_anonymize_messages(body: dict[str, Any]) -> dict[str, Any]:
    messages = body.get("messages", [])
    if not isinstance(messages, list) or not all(isinstance(m, dict) for m in messages):
        raise BadRequest("'messages' must be a list of objects")
    return {"messages": anonymize_messages(messages, _config_from(body), _names_from(body))}


def list_categories() -> dict[str, Any]:
    return {
        "categories": [
            {"category": rule.category, "placeholder": rule.placeholder, "flag": rule.flag}
            for rule in REGISTRY
        ],
    }


_POST_ROUTES = {
    "/anonymize": handle_anonymize,
    "/anonymize-messages": handle_anonymize_messages,
}


class AnonymizerHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the anonymizer sidecar."""

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        data = json.loads(body) if body else {}
        if not isinstance(data, dict):
            raise BadRequest("body must be a JSON object")
        return data

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        # Request lines go through logging, at debug, and never carry bodies
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok"})
        elif self.path == "/categories":
            self._respond(200, list_categories())
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        route = _POST_ROUTES.get(self.path)
        if route is None:
            self._respond(404, {"error": "not found"})
            return
        try:
            self._respond(200, route(self._read_json()))
        except (BadRequest, ConfigError, json.JSONDecodeError, UnicodeDecodeError) as e:
            self._respond(400, {"error": str(e)})
        except Exception:
            logger.exception("request to %s failed", self.path)
            self._respond(500, {"error": "internal error"})


def serve(port: int = DEFAULT_PORT) -> None:
    """Start the anonymizer HTTP sidecar."""
    server = HTTPServer(("127.0.0.1", port), AnonymizerHandler)
    print(f"anonimizador sidecar listening on http://127.0.0.1:{port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        server.server_close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Anonymizer HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()
    configure_logging(args.log_level)
    serve(port=args.port)
