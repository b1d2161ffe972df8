"""DOM engines the crawl DSL can run on."""

from crawldsl.core.config import CrawlerConfig
from crawldsl.core.engines.base import DomEngine
from crawldsl.core.engines.playwright_engine import PlaywrightEngine
from crawldsl.core.engines.static_engine import StaticDocument, StaticHtmlEngine


def create_engine(config: CrawlerConfig) -> DomEngine:
    if config.engine == "static":
        return StaticHtmlEngine(user_agent=config.user_agent, timeout_ms=config.default_timeout_ms)
    return PlaywrightEngine(
        config.browser,
        user_agent=config.user_agent,
        headless=config.headless,
        fail_on_script_error=config.fail_on_script_error,
        default_timeout_ms=config.default_timeout_ms,
    )


__all__ = [
    "DomEngine",
    "PlaywrightEngine",
    "StaticDocument",
    "StaticHtmlEngine",
    "create_engine",
]
