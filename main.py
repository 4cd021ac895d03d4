"""
main.py — Entry point for the Mercado Público attachment scraper.

Usage:
    python main.py                   # Start the HTTP service on $PORT (default 8000)
    python main.py --run-now URL     # One-shot scrape, prints JSON to stdout
    python main.py --warm-browser    # Launch and close Chromium once (deployment check)
"""

import sys
import json
import signal
import asyncio
import logging
import argparse
from logging.handlers import TimedRotatingFileHandler

from mp_scraper import config


logger = logging.getLogger("mp_scraper")


# ── Logging setup ────────────────────────────────────────────
def setup_logging():
    """Configure logging to console + rotating file."""
    log_format = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root = logging.getLogger("mp_scraper")
    root.setLevel(logging.DEBUG)

    # Console handler
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(config.LOG_LEVEL)
    console.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    root.addHandler(console)

    # File handler (rotate daily, keep 7 days)
    config.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        str(config.LOG_FILE),
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    root.addHandler(file_handler)


# ── One-shot run ─────────────────────────────────────────────
async def run_once(url: str) -> list[dict]:
    """Scrape a single bid page and return the wire-format records."""
    from mp_scraper.scraper import scrape_attachments

    records = await scrape_attachments(url)
    return [record.to_dict() for record in records]


# ── CLI ──────────────────────────────────────────────────────
def main():
    setup_logging()

    parser = argparse.ArgumentParser(description="Mercado Público attachment scraper")
    parser.add_argument("--run-now", metavar="URL", help="Scrape one bid page and print the attachments")
    parser.add_argument("--warm-browser", action="store_true", help="Launch and close Chromium once")
    args = parser.parse_args()

    # Graceful shutdown
    def shutdown_handler(sig, frame):
        logger.info("Received signal %s — shutting down...", sig)
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    if args.warm_browser:
        from mp_scraper.scraper import warm_browser
        asyncio.run(warm_browser())
    elif args.run_now:
        attachments = asyncio.run(run_once(args.run_now))
        print(json.dumps(attachments, indent=2, ensure_ascii=False))
    else:
        from mp_scraper.server import AttachmentService
        AttachmentService(host=config.HOST, port=config.PORT).serve_forever()


if __name__ == "__main__":
    main()
