from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENGINES = ("playwright", "static")
BROWSERS = ("chromium", "firefox", "webkit")


def _env_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CrawlerConfig:
    engine: str = "playwright"
    # Browser identity: which engine build to drive and how it presents itself.
    browser: str = "chromium"
    user_agent: Optional[str] = None
    headless: bool = True
    fail_on_script_error: bool = False
    default_timeout_ms: int = 30_000

    def __post_init__(self) -> None:
        if self.engine not in ENGINES:
            raise ValueError(f"Unknown engine {self.engine!r}; expected one of {', '.join(ENGINES)}")
        if self.browser not in BROWSERS:
            raise ValueError(f"Unknown browser {self.browser!r}; expected one of {', '.join(BROWSERS)}")
        if self.default_timeout_ms <= 0:
            raise ValueError("default_timeout_ms must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CrawlerConfig":
        env = os.environ if environ is None else environ
        return cls(
            engine=env.get("CRAWLDSL_ENGINE", "playwright"),
            browser=env.get("CRAWLDSL_BROWSER", "chromium"),
            user_agent=env.get("CRAWLDSL_USER_AGENT") or None,
            headless=_env_bool(env, "CRAWLDSL_HEADLESS", True),
            fail_on_script_error=_env_bool(env, "CRAWLDSL_FAIL_ON_SCRIPT_ERROR", False),
            default_timeout_ms=int(env.get("CRAWLDSL_TIMEOUT_MS", "30000")),
        )
