import io
import json

import pytest

from crawldsl.cli import build_config, main, parse_args, run
from crawldsl.core.config import CrawlerConfig

PAGE = """
<html><body>
  <ul>
    <li><a href="/a" class="x">Alpha</a></li>
    <li><a href="/b">Beta</a></li>
  </ul>
</body></html>
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "CRAWLDSL_ENGINE",
        "CRAWLDSL_BROWSER",
        "CRAWLDSL_USER_AGENT",
        "CRAWLDSL_HEADLESS",
        "CRAWLDSL_FAIL_ON_SCRIPT_ERROR",
        "CRAWLDSL_TIMEOUT_MS",
    ):
        monkeypatch.delenv(key, raising=False)


def test_run_lists_matches(tmp_path) -> None:
    path = tmp_path / "links.html"
    path.write_text(PAGE, encoding="utf-8")
    args = parse_args([path.as_uri(), "--xpath", "//a", "--attribute", "href", "--engine", "static"])
    out = io.StringIO()

    assert run(args, out) == 0

    records = [json.loads(line) for line in out.getvalue().splitlines()]
    assert records == [
        {"tag": "a", "text": "Alpha", "attributes": {"href": "/a"}, "index": 0},
        {"tag": "a", "text": "Beta", "attributes": {"href": "/b"}, "index": 1},
    ]


def test_build_config_overrides() -> None:
    args = parse_args(
        [
            "https://example.test/",
            "--xpath",
            "//a",
            "--browser",
            "webkit",
            "--headed",
            "--fail-on-script-error",
            "--timeout-ms",
            "900",
        ]
    )

    config = build_config(args, CrawlerConfig())

    assert config.browser == "webkit"
    assert config.headless is False
    assert config.fail_on_script_error is True
    assert config.default_timeout_ms == 900
    assert config.engine == "playwright"


def test_main_reports_crawler_errors(tmp_path) -> None:
    missing = (tmp_path / "missing.html").as_uri()

    assert main([missing, "--xpath", "//a", "--engine", "static"]) == 1


def test_main_reports_malformed_path(tmp_path) -> None:
    path = tmp_path / "links.html"
    path.write_text(PAGE, encoding="utf-8")

    assert main([path.as_uri(), "--xpath", "//a[", "--engine", "static"]) == 1


@pytest.mark.parametrize(
    "key, value",
    [("CRAWLDSL_TIMEOUT_MS", "abc"), ("CRAWLDSL_ENGINE", "netscape")],
)
def test_main_reports_bad_environment(monkeypatch, tmp_path, key, value) -> None:
    monkeypatch.setenv(key, value)

    assert main([(tmp_path / "links.html").as_uri(), "--xpath", "//a"]) == 1
