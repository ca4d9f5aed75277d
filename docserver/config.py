"""Configuration settings for the document server."""

import os
from common.constants import DEFAULT_SERVER_PORT, MAX_UPLOAD_BYTES as DEFAULT_MAX_UPLOAD_BYTES


DATABASE_PATH = os.environ.get("DOCS_DATABASE_PATH", "./data/askdoc.db")

UPLOADS_DIR = os.environ.get("DOCS_UPLOADS_DIR", "./uploads")

SERVER_HOST = os.environ.get("DOCS_SERVER_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("DOCS_SERVER_PORT", str(DEFAULT_SERVER_PORT)))

MAX_UPLOAD_BYTES = int(os.environ.get("DOCS_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))

SEED_DEFAULTS = os.environ.get("DOCS_SEED_DEFAULTS", "false").lower() in ("1", "true", "yes")
