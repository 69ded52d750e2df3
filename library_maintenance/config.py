from __future__ import annotations

import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME = "Library Maintenance API"
SERVICE_VERSION = "1.0.0"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5001


def database_url() -> str:
    """Build the Postgres conninfo from the environment.

    ``LIBRARY_DATABASE_URL`` wins when set; otherwise the URL is assembled
    from the ``POSTGRES_*`` variables.
    """
    url = os.environ.get("LIBRARY_DATABASE_URL")
    if url:
        return url

    user = quote_plus(os.environ.get("POSTGRES_USER", "postgres"))
    password = quote_plus(os.environ.get("POSTGRES_PASSWORD", ""))
    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    db = os.environ.get("POSTGRES_DB", "library")
    credentials = f"{user}:{password}" if password else user
    return f"postgresql://{credentials}@{host}:{port}/{db}"


def cors_origins() -> list[str]:
    raw = os.environ.get("LIBRARY_CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]
