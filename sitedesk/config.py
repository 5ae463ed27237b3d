from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_REPORT_TITLE = "Project Data Report - SiteDesk"
DEFAULT_REPORT_FILENAME = "project-report"
DEFAULT_CORS_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]

RANGE_POLICIES = {"off", "clamp", "reject"}

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[config] {name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"[config] {name}={raw!r} is not a number, using {default}")
        return default


def normalize_range_policy(value: str | None) -> str:
    policy = (value or "").strip().lower()
    return policy if policy in RANGE_POLICIES else "off"


def parse_cors_origins(raw: str | None) -> list[str]:
    origins: list[str] = []
    for item in (raw or "").split(","):
        origin = item.strip()
        if origin and origin not in origins:
            origins.append(origin)
    return origins or list(DEFAULT_CORS_ORIGINS)


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str | None = None
    gemini_timeout_seconds: float = 20.0
    gemini_max_output_tokens: int = 700
    advisory_enabled: bool = True
    numeric_range_policy: str = "off"
    report_title: str = DEFAULT_REPORT_TITLE
    report_filename: str = DEFAULT_REPORT_FILENAME
    seed_demo_data: bool = True
    cors_allow_origins: tuple[str, ...] = tuple(DEFAULT_CORS_ORIGINS)

    @property
    def can_use_ai(self) -> bool:
        return self.advisory_enabled and bool(self.gemini_api_key) and bool(self.gemini_model)


def load_settings() -> Settings:
    return Settings(
        gemini_api_key=(os.getenv("GEMINI_API_KEY") or "").strip(),
        gemini_model=(os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL).strip(),
        gemini_base_url=(os.getenv("GEMINI_BASE_URL") or "").strip() or None,
        gemini_timeout_seconds=max(1.0, _env_float("GEMINI_TIMEOUT_SECONDS", 20.0)),
        gemini_max_output_tokens=max(64, _env_int("GEMINI_MAX_OUTPUT_TOKENS", 700)),
        advisory_enabled=_env_flag("ADVISORY_ENABLED", "true"),
        numeric_range_policy=normalize_range_policy(os.getenv("NUMERIC_RANGE_POLICY")),
        report_title=(os.getenv("REPORT_TITLE") or DEFAULT_REPORT_TITLE).strip(),
        report_filename=(os.getenv("REPORT_FILENAME") or DEFAULT_REPORT_FILENAME).strip(),
        seed_demo_data=_env_flag("SEED_DEMO_DATA", "true"),
        cors_allow_origins=tuple(
            parse_cors_origins(os.getenv("CORS_ALLOW_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS)))
        ),
    )


settings = load_settings()
