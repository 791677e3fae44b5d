"""
settings.py — Kanoon Gateway
Process configuration, read once at startup from the environment (and .env).

Required for the case-law routes:
  INDIANKANOON_API_TOKEN   bearer token for api.indiankanoon.org
                           (VITE_INDIANKANOON_API_TOKEN is accepted too, the
                           frontend build already defines it under that name)

Optional:
  KANOON_BASE_URL          upstream base URL (default https://api.indiankanoon.org)
  KANOON_TIMEOUT           upstream timeout in seconds (default 15)
  EXPOSE_UPSTREAM_DETAILS  echo upstream error payloads to clients (default true)
  GROQ_API_KEY             enables the summarizer routes
  SUMMARY_MODEL            Groq model for summaries
  SUMMARY_MAX_CHARS        cap on document text sent to the model
  CORS_ORIGINS             comma-separated origins (default *)
  LOG_LEVEL                root log level (default INFO)
  PORT                     port for `python main.py` (default 3001)
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://api.indiankanoon.org"
DEFAULT_SUMMARY_MODEL = "llama-3.3-70b-versatile"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    kanoon_api_token: Optional[str] = None
    kanoon_base_url: str = DEFAULT_BASE_URL
    kanoon_timeout: float = Field(default=15.0, gt=0)
    expose_upstream_details: bool = True

    groq_api_key: Optional[str] = None
    summary_model: str = DEFAULT_SUMMARY_MODEL
    summary_max_chars: int = Field(default=12000, gt=0)

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    port: int = 3001

    @property
    def upstream_configured(self) -> bool:
        return bool(self.kanoon_api_token)

    @property
    def summarizer_configured(self) -> bool:
        return bool(self.groq_api_key)


def _env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    """First non-blank value among `keys`."""
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip():
            return value.strip()
    return default


def _env_bool(key: str, default: bool) -> bool:
    value = _env(key)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Read .env (without overriding real env vars) and build a Settings."""
    load_dotenv()
    origins = _env("CORS_ORIGINS", default="*")
    return Settings(
        kanoon_api_token=_env("INDIANKANOON_API_TOKEN", "VITE_INDIANKANOON_API_TOKEN"),
        kanoon_base_url=_env("KANOON_BASE_URL", default=DEFAULT_BASE_URL).rstrip("/"),
        kanoon_timeout=float(_env("KANOON_TIMEOUT", default="15")),
        expose_upstream_details=_env_bool("EXPOSE_UPSTREAM_DETAILS", True),
        groq_api_key=_env("GROQ_API_KEY"),
        summary_model=_env("SUMMARY_MODEL", default=DEFAULT_SUMMARY_MODEL),
        summary_max_chars=int(_env("SUMMARY_MAX_CHARS", default="12000")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=_env("LOG_LEVEL", default="INFO").upper(),
        port=int(_env("PORT", default="3001")),
    )
