"""
Runtime configuration for the SEO analyzer backend.

Optional settings may be defined in a .env file in the backend root:

PORT=3000
LOG_LEVEL=INFO
CORS_ORIGINS=*

The app loads environment variables automatically using python-dotenv.
Fetch limits below are fixed and intentionally not read from the environment.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()] or ["*"]

FETCH_TIMEOUT_MS = 10000
MAX_REDIRECTS = 5
MAX_CONTENT_BYTES = 10 * 1024 * 1024
CHUNK_SIZE = 64 * 1024
USER_AGENT = "SEO-Analyzer-Bot/1.0"
ACCEPTED_CONTENT_TYPES = ("text/html", "text/plain")

# Target sites with self-signed or expired certificates must still be analyzable.
VERIFY_TLS_CERTIFICATES = False
