#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/utils/html.py
"""HTML fragment parsing shared by the sanitizer and the converter.

Both components receive their tree from a ``FragmentParser``: any callable
turning an HTML string into a BeautifulSoup ``Tag`` whose children are the
fragment's top-level nodes. The default implementation wraps BeautifulSoup
with a configurable backend; tests and embedders can inject their own.
"""

from __future__ import annotations

from typing import Any, Callable

from richdocx.constants import ABSOLUTE_HTTP_URL_PATTERN, DEFAULT_HTML_PARSER, DEPS_HTML, HtmlParser
from richdocx.utils.decorators import requires_dependencies

FragmentParser = Callable[[str], Any]


def is_absolute_http_url(url: str | None) -> bool:
    """Return True for ``http://`` and ``https://`` URLs (case-insensitive scheme).

    Examples
    --------
        >>> is_absolute_http_url("HTTPS://example.com")
        True
        >>> is_absolute_http_url("javascript:alert(1)")
        False
        >>> is_absolute_http_url("/relative")
        False

    """
    return bool(url) and ABSOLUTE_HTTP_URL_PATTERN.match(url) is not None  # type: ignore[arg-type]


def make_fragment_parser(backend: HtmlParser = DEFAULT_HTML_PARSER, *, literal_attributes: bool = False) -> FragmentParser:
    """Build a BeautifulSoup-backed fragment parser.

    Parameters
    ----------
    backend : {"html.parser", "html5lib", "lxml"}
        BeautifulSoup tree builder. ``html5lib`` and ``lxml`` wrap the
        fragment in ``<html><body>``; the returned root is always the body
        when one exists.
    literal_attributes : bool, default False
        Keep multi-valued attributes such as ``class`` as the literal string
        from the source instead of splitting them into lists.

    Returns
    -------
    FragmentParser
        Callable returning the root ``Tag`` of the parsed fragment.

    """

    @requires_dependencies("html", DEPS_HTML)
    def parse(html_content: str) -> Any:
        from bs4 import BeautifulSoup

        kwargs: dict[str, Any] = {}
        if literal_attributes:
            kwargs["multi_valued_attributes"] = None
        soup = BeautifulSoup(html_content, backend, **kwargs)
        body = soup.find("body")
        return body if body is not None else soup

    return parse
