"""Minimal development server for the generated site."""

from __future__ import annotations

import http.server
import logging
import socketserver
from functools import partial
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class SiteHandler(http.server.SimpleHTTPRequestHandler):
    def send_head(self):
        # shared by GET and HEAD
        if self.path in ("", "/"):
            self.path = "/index.html"

        path = Path(self.translate_path(self.path))
        if not path.is_file():
            logger.warning("Could not find %s", path)
            self.send_error(404, "Not found")
            return None

        return http.server.SimpleHTTPRequestHandler.send_head(self)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class SiteServer(socketserver.ThreadingMixIn, http.server.HTTPServer):
    daemon_threads = True
    allow_reuse_address = True


def make_server(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> SiteServer:
    handler = partial(SiteHandler, directory=str(output_dir))
    return SiteServer((host, port), handler)


def serve(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    httpd = make_server(output_dir, host, port)
    bound_host, bound_port = httpd.server_address[:2]
    logger.info("Running at http://%s:%s", bound_host, bound_port)
    logger.info("Serving directory '%s'", output_dir)

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        httpd.server_close()
