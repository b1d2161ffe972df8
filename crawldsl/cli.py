"""
Command line tool for the crawl DSL.

Navigates to a page and prints one JSON object per node an XPath matches.
Start with: python -m crawldsl URL --xpath EXPR
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from typing import Any, Optional, Sequence, TextIO

from crawldsl.core.config import BROWSERS, ENGINES, CrawlerConfig
from crawldsl.core.descriptors import by_xpath
from crawldsl.core.elements import container
from crawldsl.core.errors import CrawlerError
from crawldsl.core.session import CrawlerSession

logger = logging.getLogger("crawldsl.cli")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List the nodes an XPath matches on a page")
    parser.add_argument("url", help="Page to navigate to")
    parser.add_argument("--xpath", required=True, help="Path expression evaluated against the page")
    parser.add_argument(
        "--attribute",
        action="append",
        default=[],
        help="Attribute to include for each match (repeatable)",
    )
    parser.add_argument("--engine", choices=ENGINES, default=None, help="DOM engine to use")
    parser.add_argument("--browser", choices=BROWSERS, default=None, help="Browser for the playwright engine")
    parser.add_argument("--user-agent", default=None, help="User agent override")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--fail-on-script-error",
        action="store_true",
        help="Treat page script errors as failures",
    )
    parser.add_argument("--timeout-ms", type=int, default=None, help="Engine timeout in milliseconds")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, base: CrawlerConfig | None = None) -> CrawlerConfig:
    config = base or CrawlerConfig.from_env()
    overrides: dict[str, Any] = {}
    if args.engine:
        overrides["engine"] = args.engine
    if args.browser:
        overrides["browser"] = args.browser
    if args.user_agent:
        overrides["user_agent"] = args.user_agent
    if args.headed:
        overrides["headless"] = False
    if args.fail_on_script_error:
        overrides["fail_on_script_error"] = True
    if args.timeout_ms is not None:
        overrides["default_timeout_ms"] = args.timeout_ms
    return dataclasses.replace(config, **overrides)


def collect(session: CrawlerSession, url: str, xpath: str, attributes: Sequence[str] = ()) -> list[dict[str, Any]]:
    def describe(node: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "tag": session.engine.tag_name(node),
            "text": session.text(),
        }
        if attributes:
            record["attributes"] = {name: session.attribute(name) for name in attributes}
        return record

    def list_matches(page: Any) -> list[dict[str, Any]]:
        return session.for_all(container.having(by_xpath(xpath)))(describe)

    records = session.navigate_to(url)(list_matches)
    for index, record in enumerate(records):
        record["index"] = index
    return records


def run(
    args: argparse.Namespace,
    out: TextIO = sys.stdout,
    config: Optional[CrawlerConfig] = None,
) -> int:
    config = config or build_config(args)
    with CrawlerSession(config=config) as session:
        records = collect(session, args.url, args.xpath, args.attribute)
    for record in records:
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
    logger.info("%d nodes matched %s", len(records), args.xpath)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    args = parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    try:
        return run(args, config=config)
    except CrawlerError as exc:
        logger.error("%s", exc)
        return 1
