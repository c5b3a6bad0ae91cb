"""
Quote engine configuration — single source of truth for environment-driven
settings, transport timeouts and lead-capture defaults.

Import from here in services and routes rather than calling os.getenv ad hoc.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

# ── Catalog source ─────────────────────────────────────────────────────────────
# CATALOG_URL wins over CATALOG_PATH; with neither set the embedded catalog is used.
DEFAULT_CATALOG_TIMEOUT_S: float = 5.0

# ── Lead capture ───────────────────────────────────────────────────────────────
# In-flight guard self-clears after this many seconds even if delivery hangs.
DEFAULT_LEAD_RESUBMIT_TIMEOUT_S: float = 10.0
DEFAULT_DELIVERY_TIMEOUT_S: float = 10.0
WEB3FORMS_SUBMIT_URL: str = "https://api.web3forms.com/submit"
WHATSAPP_BASE_URL: str = "https://wa.me"
DEFAULT_LEAD_RECIPIENT_EMAIL: str = "sales@example.com"

# ── HTTP surface ───────────────────────────────────────────────────────────────
DEFAULT_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"
SESSION_HEADER: str = "X-Session-ID"
# Lead-unlocked sessions kept in memory; least recently used is evicted first.
DEFAULT_MAX_SESSIONS: int = 5000


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    catalog_url: str = ""
    catalog_path: str = ""
    catalog_timeout_s: float = DEFAULT_CATALOG_TIMEOUT_S
    email_worker_url: str = ""
    web3forms_access_key: str = ""
    lead_recipient_email: str = DEFAULT_LEAD_RECIPIENT_EMAIL
    whatsapp_business_number: str = ""
    lead_resubmit_timeout_s: float = DEFAULT_LEAD_RESUBMIT_TIMEOUT_S
    delivery_timeout_s: float = DEFAULT_DELIVERY_TIMEOUT_S
    max_sessions: int = DEFAULT_MAX_SESSIONS
    log_level: str = "INFO"
    json_logs: bool = True
    cors_origins: list = field(default_factory=list)


def get_settings() -> Settings:
    """Build a Settings snapshot from the current environment."""
    cors = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        catalog_url=os.getenv("CATALOG_URL", ""),
        catalog_path=os.getenv("CATALOG_PATH", ""),
        catalog_timeout_s=_float_env("CATALOG_TIMEOUT_S", DEFAULT_CATALOG_TIMEOUT_S),
        email_worker_url=os.getenv("EMAIL_WORKER_URL", ""),
        web3forms_access_key=os.getenv("WEB3FORMS_ACCESS_KEY", ""),
        lead_recipient_email=os.getenv("LEAD_RECIPIENT_EMAIL", DEFAULT_LEAD_RECIPIENT_EMAIL),
        whatsapp_business_number=os.getenv("WHATSAPP_BUSINESS_NUMBER", ""),
        lead_resubmit_timeout_s=_float_env("LEAD_RESUBMIT_TIMEOUT_S", DEFAULT_LEAD_RESUBMIT_TIMEOUT_S),
        delivery_timeout_s=_float_env("DELIVERY_TIMEOUT_S", DEFAULT_DELIVERY_TIMEOUT_S),
        max_sessions=_int_env("MAX_SESSIONS", DEFAULT_MAX_SESSIONS),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        json_logs=os.getenv("LOG_FORMAT", "json").lower() != "text",
        cors_origins=[o.strip() for o in cors.split(",") if o.strip()],
    )
