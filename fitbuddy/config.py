from __future__ import annotations

import logging
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_TEMPERATURE: float = 0.2

    # Document store
    STORE_BACKEND: str = "memory"  # "firestore" | "memory"
    FIREBASE_CREDENTIALS: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Generation policies
    HISTORY_LIMIT: int = 30
    DEFAULT_AVAILABLE_MINUTES: int = 60


_SECRET_KEYS = [
    "APP_ENV",
    "LOG_LEVEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_TEMPERATURE",
    "STORE_BACKEND",
    "FIREBASE_CREDENTIALS",
    "FIREBASE_PROJECT_ID",
]


def _streamlit_overrides() -> dict:
    # Streamlit Cloud secrets may provide values that are not in the environment
    overrides: dict = {}
    try:
        import streamlit as _st  # type: ignore
        sec = getattr(_st, "secrets", None)
        if sec:
            for k in _SECRET_KEYS:
                if k in sec and sec[k] is not None and sec[k] != "":
                    overrides[k] = sec[k]
    except Exception:
        # No secrets.toml outside of a Streamlit deployment
        return {}
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**_streamlit_overrides())  # type: ignore[call-arg]


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once, using LOG_LEVEL unless a level is given."""
    name = (level or get_settings().LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
