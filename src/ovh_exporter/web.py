import base64
import binascii
import hmac
import html
import ssl
import threading
from typing import Any, Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer

from ovh_exporter import __version__

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]

_LANDING_PAGE = """<html>
<head><title>OVH Exporter</title></head>
<body>
<h1>OVH Exporter</h1>
<p>Prometheus OVH API Exporter</p>
<p>Version: {version}</p>
<ul><li><a href="{path}">Metrics</a></li></ul>
</body>
</html>
"""


class _SilentHandler(WSGIRequestHandler):
    def log_message(self, format: "str", *args: "Any") -> "None":
        """
        silences the per-request access log.
        """


def _check_basic_auth(environ: "dict", username: "str", password: "str") -> "bool":
    header = environ.get("HTTP_AUTHORIZATION", "")
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic":
        return False

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False

    user, sep, secret = decoded.partition(":")
    # compare both parts to keep timing independent of which one is wrong
    user_ok = hmac.compare_digest(user.encode(), username.encode())
    secret_ok = hmac.compare_digest(secret.encode(), password.encode())
    return bool(sep) and user_ok and secret_ok


def make_app(
    registry: "CollectorRegistry",
    telemetry_path: "str" = "/metrics",
    basic_auth: "tuple[str, str] | None" = None,
) -> "WSGIApp":
    """
    builds the WSGI app serving the registry on telemetry_path
    and a landing page on "/". When basic_auth is a
    (username, password) pair every path requires it.
    """
    telemetry_path = telemetry_path or "/"
    metrics_app = make_wsgi_app(registry)
    landing = _LANDING_PAGE.format(
        version=__version__,
        path=html.escape(telemetry_path, quote=True),
    ).encode("utf-8")

    def app(environ: "dict", start_response: "Callable[..., Any]") -> "Iterable[bytes]":
        if basic_auth is not None and not _check_basic_auth(environ, *basic_auth):
            start_response(
                "401 Unauthorized",
                [
                    ("Content-Type", "text/plain"),
                    ("WWW-Authenticate", 'Basic realm="ovh-exporter"'),
                ],
            )
            return [b"Unauthorized"]

        path = environ.get("PATH_INFO") or "/"

        if path == telemetry_path:
            return metrics_app(environ, start_response)

        if path == "/":
            start_response(
                "200 OK",
                [("Content-Type", "text/html; charset=utf-8")],
            )
            return [landing]

        start_response("404 Not Found", [("Content-Type", "text/plain")])
        return [b"Not Found"]

    return app


def make_ssl_context(certfile: "str", keyfile: "str") -> "ssl.SSLContext":
    """
    builds the server-side TLS context from a certificate and
    its private key.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(certfile=certfile, keyfile=keyfile)
    return context


def start_server(
    app: "WSGIApp",
    host: "str",
    port: "int",
    certfile: "str" = "",
    keyfile: "str" = "",
) -> "tuple[ThreadingWSGIServer, threading.Thread]":
    """
    serves the app from a daemon thread, over TLS when a
    certificate and key are given. Returns the server so
    callers can shut it down.
    """
    # the context is built first so a bad certificate fails before binding
    context = make_ssl_context(certfile, keyfile) if certfile else None
    server = make_server(
        host, port, app, ThreadingWSGIServer, handler_class=_SilentHandler
    )
    if context is not None:
        server.socket = context.wrap_socket(server.socket, server_side=True)

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, thread
