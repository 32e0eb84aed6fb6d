"""HTTP sidecar server for doc-redactor.

Runs as a lightweight stdlib HTTP server on localhost so a host
integration can call detection without spawning a process per document.

Endpoints:
    POST /detect   {"text": "..."} → {"matches": [{"type", "value"}, ...]}
    POST /redact   {"text": "..."} → redaction result
    GET  /health   health check

All endpoints expect/return JSON.
"""

from __future__ import annotations
import json
import logging
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .config import create_redactor, load_from_yaml
from .patterns import detect
from .redactor import Redactor

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("DOC_REDACTOR_PORT", "18792"))
DEFAULT_CONFIG = os.environ.get("DOC_REDACTOR_CONFIG", "")

# Shared state
_redactor: Redactor | None = None
_config_path: str = DEFAULT_CONFIG


class BadRequest(ValueError):
    pass


def _get_redactor() -> Redactor:
    global _redactor
    if _redactor is None:
        _redactor = create_redactor(load_from_yaml(_config_path) if _config_path else None)
    return _redactor


class RedactionHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the redaction sidecar."""

    def _read_json(self) -> dict[str, Any]:
        try:
            length = int(self.headers.get("Content-Length", 0))
        except ValueError as e:
            raise BadRequest("invalid Content-Length") from e
        if length < 0:
            raise BadRequest("invalid Content-Length")
        try:
            body = self.rfile.read(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise BadRequest("body must be UTF-8") from e
        try:
            data = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise BadRequest(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise BadRequest("body must be a JSON object")
        return data

    def _read_text(self) -> str:
        text = self._read_json().get("text", "")
        if not isinstance(text, str):
            raise BadRequest("'text' must be a string")
        return text

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok"})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        try:
            if self.path == "/detect":
                matches = detect(self._read_text())
                self._respond(200, {"matches": [m.to_dict() for m in matches]})

            elif self.path == "/redact":
                result = _get_redactor().redact(self._read_text())
                self._respond(200, result.to_dict())

            else:
                self._respond(404, {"error": "not found"})

        except BadRequest as e:
            self._respond(400, {"error": str(e)})
        except Exception as e:
            logger.exception("request to %s failed", self.path)
            self._respond(500, {"error": str(e)})


def make_server(port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> HTTPServer:
    return HTTPServer((host, port), RedactionHandler)


def serve(port: int = DEFAULT_PORT, config_path: str = DEFAULT_CONFIG) -> None:
    """Start the redaction HTTP sidecar."""
    global _config_path, _redactor
    _config_path = config_path
    _redactor = None

    server = make_server(port)
    logger.info("doc-redactor sidecar listening on http://127.0.0.1:%d", port)
    if config_path:
        logger.info("  config: %s", config_path)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()


def main(argv: list[str] | None = None) -> None:
    import argparse
    parser = argparse.ArgumentParser(description="doc-redactor HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--config", default=DEFAULT_CONFIG)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    serve(port=args.port, config_path=args.config)


if __name__ == "__main__":
    main()
