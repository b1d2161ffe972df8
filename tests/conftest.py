"""Shared fixture documents served by the static engine."""

import pytest

from crawldsl.core.engines.static_engine import StaticHtmlEngine
from crawldsl.core.session import CrawlerSession

BASE_URL = "https://example.test"

LOGIN_PAGE = """
<html>
  <head><title>Sign in</title></head>
  <body>
    <form id="login" action="/session" method="get">
      <input type="text" name="user" id="user-field">
      <input type="password" name="pass">
      <textarea name="note"></textarea>
      <input type="submit" name="go" id="go" value="Sign in">
    </form>
    <div id="nav">
      <a href="/one" title="First link">One</a>
      <a href="/two">Two</a>
      <a href="/three" id="third">  Three
      </a>
    </div>
    <img src="/logo.png" alt="Logo">
    <map name="shapes"><area href="/area" shape="rect" coords="0,0,10,10"></map>
  </body>
</html>
"""

SESSION_PAGE = """
<html>
  <head><title>Welcome</title></head>
  <body>
    <div id="greeting">Hello again</div>
    <a href="/logout" id="logout">Log out</a>
  </body>
</html>
"""


def page(title: str, body: str = "") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture
def engine():
    return StaticHtmlEngine(
        pages={
            f"{BASE_URL}/login": LOGIN_PAGE,
            f"{BASE_URL}/session": SESSION_PAGE,
            f"{BASE_URL}/one": page("One"),
            f"{BASE_URL}/two": page("Two"),
            f"{BASE_URL}/three": page("Three"),
        }
    )


@pytest.fixture
def session(engine):
    return CrawlerSession(engine)
