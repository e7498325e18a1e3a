"""
Docforge Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "1.0.0"
    API_VERSION: str = "1"

    # --- Engine ---
    DEFAULT_DOC_TYPE: str = os.getenv("DOCFORGE_DEFAULT_DOC_TYPE", "one-pager")
    MAX_INPUT_CHARS: int = int(os.getenv("DOCFORGE_MAX_INPUT_CHARS", "100000"))
    PROMPT_SIGNAL_THRESHOLD: int = int(
        os.getenv("DOCFORGE_PROMPT_THRESHOLD", "3")
    )

    # --- Batch ---
    BATCH_MAX_ITEMS: int = int(os.getenv("DOCFORGE_BATCH_MAX_ITEMS", "50"))
    BATCH_WORKERS: int = int(os.getenv("DOCFORGE_BATCH_WORKERS", "4"))

    # --- Server ---
    HOST: str = os.getenv("DOCFORGE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("DOCFORGE_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("DOCFORGE_CORS_ORIGINS", "*")


settings = Settings()
