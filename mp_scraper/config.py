"""
config.py — Central configuration loaded from .env file.
All settings are exposed as module-level constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# ── HTTP service ─────────────────────────────────────────────
PORT = int(os.getenv("PORT", "8000"))
HOST = os.getenv("HOST", "0.0.0.0")

# ── Browser ──────────────────────────────────────────────────
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"
NAVIGATION_TIMEOUT_MS = int(os.getenv("NAVIGATION_TIMEOUT_MS", "30000"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
)
# Needed when Chromium runs as root inside a container
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# ── Platform ─────────────────────────────────────────────────
PLATFORM_BASE_URL = os.getenv("PLATFORM_BASE_URL", "https://www.mercadopublico.cl").rstrip("/")

# ── Logging ──────────────────────────────────────────────────
LOG_FILE = BASE_DIR / os.getenv("LOG_FILE", "logs/scraper.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
