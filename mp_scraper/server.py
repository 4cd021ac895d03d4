"""
server.py — Flask HTTP service exposing the attachment scraper.

Usage:
    from mp_scraper.server import AttachmentService
    service = AttachmentService(port=8000)
    service.serve_forever()       # blocks (main.py --serve)
    service.start()               # or run in a daemon background thread

Contract (any path — the method is the only discriminator):
    POST {"url": "..."}  → 200 [{"nombre": ..., "url_descarga": ...}, ...]
    missing/empty url    → 400 {"error": ...}
    non-POST             → 405
    anything unexpected  → 500 {"error": ...}
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable

from flask import Flask, Response, jsonify, request

from mp_scraper import config
from mp_scraper.extractor import AttachmentRecord
from mp_scraper.scraper import scrape_attachments

logger = logging.getLogger("mp_scraper.server")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ScrapeFn = Callable[[str], Awaitable[list[AttachmentRecord]]]


class InputError(ValueError):
    """The request body does not carry a usable URL."""


def _read_url() -> str:
    # Invalid JSON raises werkzeug's BadRequest here, which is reported as a 500
    data = request.get_json(force=True)
    if not isinstance(data, dict):
        raise InputError("Request body must be a JSON object")
    url = data.get("url")
    if not url:
        raise InputError("url is required")
    if not isinstance(url, str):
        raise InputError("url must be a string")
    return url


class AttachmentService:
    """Single-endpoint Flask app; every request gets its own browser via `scrape`."""

    def __init__(self, host: str | None = None, port: int | None = None, scrape: ScrapeFn | None = None):
        self.host = host or config.HOST
        self.port = port or config.PORT
        self._scrape = scrape or scrape_attachments
        self.app = self._create_app()

    # ── Flask app ────────────────────────────────────────────
    def _create_app(self) -> Flask:
        app = Flask(__name__)
        app.logger.setLevel(logging.WARNING)  # silence Flask request logs

        def handle(path: str = "") -> tuple[Response, int]:
            if request.method != "POST":
                return Response("Method not allowed", status=405), 405

            try:
                url = _read_url()
            except InputError as e:
                logger.warning("Rejected request: %s", e)
                return jsonify({"error": str(e)}), 400
            except Exception as e:
                logger.error("Could not read request body: %s", e)
                return jsonify({"error": str(e)}), 500

            try:
                # Fresh event loop per request thread; the browser lives and dies inside it
                records = asyncio.run(self._scrape(url))
            except Exception as e:
                logger.error("Request for %s failed: %s", url, e, exc_info=True)
                return jsonify({"error": str(e)}), 500

            return jsonify([record.to_dict() for record in records]), 200

        for rule in ("/", "/<path:path>"):
            app.add_url_rule(
                rule,
                endpoint="handle" if rule == "/" else "handle_path",
                view_func=handle,
                methods=ALL_METHODS,
                provide_automatic_options=False,
            )
        return app

    # ── Public interface ─────────────────────────────────────
    def serve_forever(self):
        """Run the server on the calling thread (blocks)."""
        logger.info("Scraping service ready for requests on %s:%d", self.host, self.port)
        self.app.run(host=self.host, port=self.port, debug=False, use_reloader=False, threaded=True)

    def start(self) -> threading.Thread:
        """Start the server in a daemon background thread."""
        thread = threading.Thread(
            target=self.serve_forever,
            daemon=True,
            name="attachment-service",
        )
        thread.start()
        return thread
