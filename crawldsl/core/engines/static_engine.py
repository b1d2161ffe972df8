"""
Static HTML engine.

Parses documents with lxml and never runs scripts. Documents come from an
in-memory page map, from ``file://`` URLs, or over HTTP(S) with requests.
Clicking a link loads its target; clicking a submit control submits its form.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit
from urllib.request import url2pathname

import requests
from lxml import etree
from lxml import html as lxml_html

from crawldsl.core.engines.base import DomEngine, Node, normalize_text
from crawldsl.core.errors import InvalidExpression, NavigationError, NodeNotFound, TypeMismatch

logger = logging.getLogger("crawldsl.engine.static")

SUBMIT_INPUT_TYPES = {"submit", "image"}


class StaticDocument:
    """A parsed page: the URL it was loaded from and its root element."""

    def __init__(self, url: str, root: lxml_html.HtmlElement) -> None:
        self.url = url
        self.root = root

    @property
    def title(self) -> str:
        found = self.root.find(".//title")
        return normalize_text(found.text_content()) if found is not None else ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StaticDocument):
            return NotImplemented
        return other.root is self.root

    def __hash__(self) -> int:
        return id(self.root)

    def __repr__(self) -> str:
        return f"StaticDocument(url={self.url!r})"


class StaticHtmlEngine(DomEngine):
    name = "static"

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        *,
        user_agent: str | None = None,
        timeout_ms: int = 30_000,
        http: requests.Session | None = None,
    ) -> None:
        self._pages = dict(pages or {})
        self._timeout_s = max(0.001, timeout_ms / 1000.0)
        self._http = http or requests.Session()
        if user_agent:
            self._http.headers["User-Agent"] = user_agent

    def add_page(self, url: str, markup: str) -> None:
        self._pages[url] = markup

    # ─── Loading ─────────────────────────────

    def load_document(self, url: str) -> StaticDocument:
        return self._load(url)

    def _load(self, url: str, data: list[tuple[str, str]] | None = None) -> StaticDocument:
        markup, final_url = self._fetch(url, data)
        try:
            root = lxml_html.document_fromstring(markup, base_url=final_url)
        except (etree.ParserError, ValueError) as exc:
            raise NavigationError(f"Could not parse {final_url}: {exc}") from exc
        logger.debug("Loaded %s", final_url)
        return StaticDocument(final_url, root)

    def _fetch(self, url: str, data: list[tuple[str, str]] | None) -> tuple[str, str]:
        if url in self._pages:
            return self._pages[url], url

        parts = urlsplit(url)
        bare = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        if bare in self._pages:
            return self._pages[bare], url

        if parts.scheme == "file":
            path = Path(url2pathname(parts.path))
            try:
                return path.read_text(encoding="utf-8"), url
            except OSError as exc:
                raise NavigationError(f"Could not read {url}: {exc}") from exc

        if parts.scheme in {"http", "https"}:
            try:
                if data is None:
                    response = self._http.get(url, timeout=self._timeout_s)
                else:
                    response = self._http.post(url, data=data, timeout=self._timeout_s)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise NavigationError(f"Failed to load {url}: {exc}") from exc
            return response.text, response.url or url

        raise NavigationError(f"No page available for {url}")

    # ─── Node access ─────────────────────────

    def _element(self, node: Node) -> lxml_html.HtmlElement:
        if isinstance(node, StaticDocument):
            return node.root
        return node

    def is_document(self, node: Node) -> bool:
        return isinstance(node, StaticDocument)

    def owner_document(self, node: Node) -> StaticDocument:
        if isinstance(node, StaticDocument):
            return node
        # The URL is recorded in docinfo only when a document is parsed with a base URL.
        tree = node.getroottree()
        url = tree.docinfo.URL
        if url is None:
            raise NodeNotFound(f"{node!r} does not belong to a loaded document")
        return StaticDocument(url, tree.getroot())

    def tag_name(self, node: Node) -> str:
        if isinstance(node, StaticDocument):
            return "#document"
        return str(node.tag).lower()

    def attribute(self, node: Node, name: str) -> Optional[str]:
        return self._element(node).get(name)

    def text_content(self, node: Node) -> str:
        return normalize_text(self._element(node).text_content())

    # ─── Queries ─────────────────────────────

    def find_by_identifier(self, root: Node, identifier: str) -> Optional[Node]:
        found = self._element(root).xpath("descendant-or-self::*[@id=$value]", value=identifier)
        return found[0] if found else None

    def find_by_name(self, root: Node, name: str) -> Optional[Node]:
        found = self._element(root).xpath("descendant-or-self::*[@name=$value]", value=name)
        return found[0] if found else None

    def find_by_path(self, root: Node, expression: str) -> list[Node]:
        try:
            if isinstance(root, StaticDocument):
                result: Any = root.root.getroottree().xpath(expression)
            else:
                result = root.xpath(expression)
        except etree.XPathError as exc:
            raise InvalidExpression(expression, str(exc)) from exc
        if not isinstance(result, list):
            return []
        return [item for item in result if isinstance(item, lxml_html.HtmlElement)]

    def find_anchor_by_text(self, root: Node, text: str) -> Optional[Node]:
        wanted = normalize_text(text)
        for anchor in self._element(root).iter("a"):
            if normalize_text(anchor.text_content()) == wanted:
                return anchor
        return None

    # ─── Actions ─────────────────────────────

    def set_value(self, node: Node, text: str) -> None:
        tag = self.tag_name(node)
        if tag == "input":
            node.set("value", text)
        elif tag == "textarea":
            node.text = text
        else:
            raise TypeMismatch(f"Cannot set a value on <{tag}>")

    def activate(self, node: Node) -> StaticDocument:
        if isinstance(node, StaticDocument):
            raise TypeMismatch("Cannot click a document")
        document = self.owner_document(node)
        tag = self.tag_name(node)

        if tag in {"a", "area"}:
            href = (node.get("href") or "").strip()
            if href and not href.startswith(("#", "javascript:")):
                return self._load(urljoin(document.url, href))
            return document

        if self._is_submitter(node):
            form = next((el for el in node.iterancestors("form")), None)
            if form is not None:
                return self._submit(document, form, node)

        return document

    def _is_submitter(self, node: lxml_html.HtmlElement) -> bool:
        tag = self.tag_name(node)
        kind = (node.get("type") or "").lower()
        if tag == "input":
            return kind in SUBMIT_INPUT_TYPES
        return tag == "button" and kind in {"", "submit"}

    def _submit(
        self,
        document: StaticDocument,
        form: lxml_html.FormElement,
        submitter: lxml_html.HtmlElement,
    ) -> StaticDocument:
        fields = list(form.form_values())
        if submitter.get("name"):
            fields.append((submitter.get("name"), submitter.get("value") or ""))

        target = urljoin(document.url, form.get("action") or document.url)
        method = (form.get("method") or "get").lower()
        logger.debug("Submitting form to %s via %s", target, method.upper())
        if method == "post":
            return self._load(target, data=fields)

        parts = urlsplit(target)
        query = urlencode(fields)
        return self._load(urlunsplit((parts.scheme, parts.netloc, parts.path, query, "")))

    def close(self) -> None:
        self._http.close()
