# /app/core/config.py

"""
Runtime configuration for the grading backend.

Every value is read from the process environment at call time rather than at
import time, so tests and long-running workers always see the current
environment. A local `.env` file is loaded once when this module is imported.
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./grading.db"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_STORAGE_ROOT = "storage"
DEFAULT_PUBLIC_FILES_BASE_URL = "http://localhost:8000/files"
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_google_api_key() -> str:
    """Returns the Gemini API key, or an empty string when it is not set."""
    return os.getenv("GOOGLE_API_KEY", "")


def get_gemini_model() -> str:
    return os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)


def get_storage_root() -> str:
    return os.getenv("STORAGE_ROOT", DEFAULT_STORAGE_ROOT)


def get_public_files_base_url() -> str:
    # Stored without a trailing slash so URLs can be joined with "/".
    return os.getenv("PUBLIC_FILES_BASE_URL", DEFAULT_PUBLIC_FILES_BASE_URL).rstrip("/")


def get_fetch_timeout_seconds() -> float:
    raw_value = os.getenv("FETCH_TIMEOUT_SECONDS")
    if not raw_value:
        return DEFAULT_FETCH_TIMEOUT_SECONDS
    try:
        return float(raw_value)
    except ValueError:
        print(f"[WARNING] Ignoring invalid FETCH_TIMEOUT_SECONDS value: {raw_value!r}")
        return DEFAULT_FETCH_TIMEOUT_SECONDS
