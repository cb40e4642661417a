"""http: read-only HTTP file server for a directory."""

from __future__ import annotations

import html
import json
import mimetypes
from pathlib import Path
from urllib.parse import quote
from wsgiref.util import FileWrapper

import click

from ..walk import check_root, scan_dir
from ._helpers import main, _library_errors


# Register extensions that Python's mimetypes module doesn't know.
mimetypes.add_type("text/markdown", ".md")
mimetypes.add_type("application/geo+json", ".geojson")

# MIME overrides for types that browsers download instead of displaying.
_MIME_OVERRIDES = {
    "application/json": "text/plain; charset=utf-8",
    "application/geo+json": "text/plain; charset=utf-8",
    "application/xml": "text/xml; charset=utf-8",
    "application/yaml": "text/plain; charset=utf-8",
    "application/x-yaml": "text/plain; charset=utf-8",
    "text/markdown": "text/plain; charset=utf-8",
}


def _guess_mime(path):
    """Return a browser-friendly MIME type for *path*."""
    mime, _ = mimetypes.guess_type(path)
    if mime is None:
        return "application/octet-stream"
    return _MIME_OVERRIDES.get(mime, mime)


def _href(*segments: str) -> str:
    """Build an HTML-safe href from path segments.

    Each segment is percent-encoded (preserving ``/`` within segments),
    then the whole value is HTML-attribute-escaped.
    """
    parts = [quote(s, safe="/") for s in segments if s]
    raw = "/".join(parts)
    if not raw.startswith("/"):
        raw = "/" + raw
    return html.escape(raw, quote=True)


def _request_path(environ) -> str:
    """PATH_INFO as text; WSGI servers hand it over latin-1 decoded."""
    raw = environ.get("PATH_INFO", "/")
    try:
        return raw.encode("latin-1").decode("utf-8")
    except UnicodeError:
        return raw


# ---------------------------------------------------------------------------
# WSGI middlewares
# ---------------------------------------------------------------------------

def _cors_middleware(app):
    """WSGI middleware that adds permissive CORS headers."""
    _CORS_HEADERS = [
        ("Access-Control-Allow-Origin", "*"),
        ("Access-Control-Allow-Methods", "GET, HEAD, OPTIONS"),
        ("Access-Control-Allow-Headers", "Accept"),
        ("Access-Control-Expose-Headers", "Content-Length"),
    ]

    def wrapped(environ, start_response):
        if environ.get("REQUEST_METHOD") == "OPTIONS":
            start_response("204 No Content", _CORS_HEADERS)
            return [b""]

        def cors_start_response(status, headers):
            return start_response(status, headers + _CORS_HEADERS)

        return app(environ, cors_start_response)

    return wrapped


def _no_cache_middleware(app):
    """WSGI middleware that adds Cache-Control: no-store."""

    def wrapped(environ, start_response):
        def nocache_start_response(status, headers):
            return start_response(status, headers + [("Cache-Control", "no-store")])

        return app(environ, nocache_start_response)

    return wrapped


# ---------------------------------------------------------------------------
# WSGI app
# ---------------------------------------------------------------------------

def _make_app(root, *, cors=False, no_cache=False):
    """Return a WSGI application serving the directory *root* read-only.

    ``/`` lists *root*; ``/<path>`` serves a file or a directory listing.
    Listings are HTML unless the client sends ``Accept: application/json``.
    Requests that resolve outside *root* (``..`` or symlinks pointing
    elsewhere) get a 403.
    """
    base = Path(root).resolve()

    def app(environ, start_response):
        method = environ.get("REQUEST_METHOD", "GET")
        if method not in ("GET", "HEAD"):
            return _send_error(start_response, "405 Method Not Allowed",
                               f"Method not allowed: {method}")
        path = _request_path(environ).strip("/")
        want_json = "application/json" in environ.get("HTTP_ACCEPT", "")

        try:
            target = (base / path).resolve() if path else base
            target.relative_to(base)
        except ValueError:
            return _send_error(start_response, "403 Forbidden", f"Forbidden: {path}")

        if not target.exists():
            return _send_404(start_response, f"Not found: {path}")

        if target.is_dir():
            body_iter = _serve_dir(start_response, target, path, want_json)
        else:
            body_iter = _serve_file(environ, start_response, target, path, want_json)
        if method == "HEAD":
            if hasattr(body_iter, "close"):
                body_iter.close()
            return [b""]
        return body_iter

    result = app
    if cors:
        result = _cors_middleware(result)
    if no_cache:
        result = _no_cache_middleware(result)
    return result


def _send_json(start_response, data):
    body = json.dumps(data).encode()
    start_response("200 OK", [
        ("Content-Type", "application/json"),
        ("Content-Length", str(len(body))),
    ])
    return [body]


def _serve_file(environ, start_response, target, path, want_json):
    """Serve file contents or JSON metadata."""
    try:
        size = target.stat().st_size
        if want_json:
            return _send_json(start_response, {"path": path, "size": size, "type": "file"})
        f = open(target, "rb")
    except PermissionError:
        return _send_error(start_response, "403 Forbidden", f"Forbidden: {path}")

    start_response("200 OK", [
        ("Content-Type", _guess_mime(target.name)),
        ("Content-Length", str(size)),
    ])
    wrapper = environ.get("wsgi.file_wrapper", FileWrapper)
    return wrapper(f)


def _serve_dir(start_response, target, path, want_json):
    """Serve directory listing as JSON or HTML."""
    try:
        children = scan_dir(target)
    except PermissionError:
        return _send_error(start_response, "403 Forbidden", f"Forbidden: {path}")
    entries = [(c.name, c.is_dir()) for c in children]
    entries.sort(key=lambda e: (not e[1], e[0].lower()))

    if want_json:
        return _send_json(start_response, {
            "path": path,
            "entries": [name + "/" if is_dir else name for name, is_dir in entries],
            "type": "directory",
        })

    # HTML listing
    display_path = "/" + path if path else "/"
    lines = [
        "<html><head><meta charset=\"utf-8\">",
        f"<title>{html.escape(display_path)}</title></head><body>",
        f"<h1>{html.escape(display_path)}</h1>",
        "<ul>",
    ]
    if path:
        parent = path.rsplit("/", 1)[0] if "/" in path else ""
        lines.append(f'<li><a href="{_href(parent)}">..</a></li>')
    for name, is_dir in entries:
        label = name + "/" if is_dir else name
        lines.append(f'<li><a href="{_href(path, name)}">{html.escape(label)}</a></li>')
    lines.append("</ul>")
    lines.append("</body></html>")
    body = "\n".join(lines).encode()
    start_response("200 OK", [
        ("Content-Type", "text/html; charset=utf-8"),
        ("Content-Length", str(len(body))),
    ])
    return [body]


def _send_error(start_response, status, message):
    body = message.encode()
    start_response(status, [
        ("Content-Type", "text/plain; charset=utf-8"),
        ("Content-Length", str(len(body))),
    ])
    return [body]


def _send_404(start_response, message="Not found"):
    """Send a 404 response."""
    return _send_error(start_response, "404 Not Found", message)


# ---------------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------------

@main.command()
@click.argument("port", default=8080, type=click.IntRange(0, 65535))
@click.argument("directory", default=".", type=click.Path())
@click.option("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1).")
@click.option("--cors", is_flag=True, default=False,
              help="Enable CORS headers (Access-Control-Allow-Origin: *).")
@click.option("--no-cache", "no_cache", is_flag=True, default=False,
              help="Send Cache-Control: no-store on every response.")
@click.option("--open", "open_browser", is_flag=True, default=False,
              help="Open the URL in the default browser on start.")
@click.option("--quiet", "-q", is_flag=True, default=False,
              help="Suppress per-request log output.")
@click.pass_context
def http(ctx, port, directory, host, cors, no_cache, open_browser, quiet):
    """Serve DIRECTORY read-only over HTTP on PORT (default 8080).

    \b
    Examples:
        vasu http
        vasu http 9000 ~/Downloads
        vasu http 0 . --host 0.0.0.0 --cors
    """
    from wsgiref.simple_server import make_server, WSGIRequestHandler

    with _library_errors():
        root = check_root(directory)
    app = _make_app(root, cors=cors, no_cache=no_cache)

    if quiet:
        class _Handler(WSGIRequestHandler):
            def log_request(self, code="-", size="-"):
                pass
    else:
        class _Handler(WSGIRequestHandler):
            def log_request(self, code="-", size="-"):
                click.echo(
                    f"{self.client_address[0]} - {self.command} {self.path} {code}",
                    err=True,
                )

    try:
        server = make_server(host, port, app, handler_class=_Handler)
    except OSError as exc:
        raise click.ClickException(f"Cannot listen on {host}:{port}: {exc.strerror or exc}")
    url = f"http://{host}:{server.server_port}/"
    click.echo(f"Serving {root} at {url}", err=True)
    click.echo("Press Ctrl+C to stop.", err=True)

    if open_browser:
        import webbrowser
        webbrowser.open(url)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        click.echo("\nStopped.", err=True)
    finally:
        server.server_close()
