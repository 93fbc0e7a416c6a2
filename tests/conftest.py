"""
Shared fixtures: a local HTTP server that the stage can call for real, and
schemas/configs for a typical url -> response stage.
"""
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from recordhttp.schema import Field, Schema
from recordhttp.stage_config import StageConfig

PROXY_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy")
JSON_OBJECT = {"title": "hello", "userId": 7, "program": "from-service", "note": None}


class _Handler(BaseHTTPRequestHandler):
    """
    /ok          -> 200 "ok"
    /status/<n>  -> status n
    /unicode     -> 200 with a UTF-8 body
    /echo        -> 200 with the method, headers and body as JSON
    /json        -> 200 with a JSON object
    /json-list   -> 200 with a JSON array
    /redirect/<host> -> 302 to /echo on <host>, same port
    """

    def log_message(self, format, *args):
        pass

    def _send(self, status, body: bytes, content_type="text/plain; charset=utf-8"):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else None
        self.server.requests.append({"method": self.command, "path": self.path, "headers": dict(self.headers), "body": body})

        if self.path == "/ok":
            self._send(200, b"ok")
        elif self.path.startswith("/status/"):
            status = int(self.path.rsplit("/", 1)[1])
            self._send(status, b"failure body")
        elif self.path == "/unicode":
            self._send(200, "  café ✓\n".encode("utf-8"))
        elif self.path == "/json":
            self._send(200, json.dumps(JSON_OBJECT).encode("utf-8"), "application/json")
        elif self.path == "/json-list":
            self._send(200, b"[1, 2]", "application/json")
        elif self.path.startswith("/redirect/"):
            host = self.path.rsplit("/", 1)[1]
            self.send_response(302)
            self.send_header("Location", f"http://{host}:{self.server.server_address[1]}/echo")
            self.send_header("Content-Length", "0")
            self.end_headers()
        elif self.path == "/echo":
            payload = {"method": self.command, "headers": dict(self.headers), "body": body}
            self._send(200, json.dumps(payload).encode("utf-8"), "application/json")
        else:
            self._send(404, b"not found")

    do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = do_HEAD = do_OPTIONS = _handle


@pytest.fixture(autouse=True)
def no_proxy_env(monkeypatch):
    for name in PROXY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    server.base_url = f"http://127.0.0.1:{server.server_address[1]}"
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port_url():
    """URL on a local port nobody listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/x"


@pytest.fixture
def input_schema():
    return Schema.record_of(
        "input",
        Field.of("url"),
        Field.of("program"),
        Field.of("payload", nullable=True),
        Field.of("count", "int"),
    )


@pytest.fixture
def output_schema():
    return Schema.record_of(
        "output",
        Field.of("url"),
        Field.of("program", nullable=True),
        Field.of("count", "int"),
        Field.of("response"),
    )


@pytest.fixture
def make_config(output_schema):
    def _make(**properties):
        base = {"httpURLField": "url", "responseField": "response", "schema": output_schema.to_json()}
        base.update(properties)
        return StageConfig.from_properties(base)

    return _make
