from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_key: str | None
    api_timeout: int
    upload_url: str | None
    log_level: str
    currency_symbol: str


settings = Settings(
    api_base_url=_get_env("API_BASE_URL", "STORE_API_URL", default="http://127.0.0.1:8085") or "http://127.0.0.1:8085",
    api_key=_get_env("API_KEY", default=None),
    api_timeout=_get_int("API_TIMEOUT", default=10),
    upload_url=_get_env("UPLOAD_URL", default=None),
    log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    currency_symbol=_get_env("CURRENCY_SYMBOL", default="$") or "$",
)
