#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/sanitizer.py
"""Whitelist sanitizer for editor HTML.

The sanitizer restricts arbitrary markup to the small set of tags the
converter understands::

    p, h1, h2, h3, ul, ol, li, b, strong, i, em, a, br, span

It never mutates the parsed input. A new tree is built node by node:

- text passes through unchanged; comments, doctypes and other markup
  declarations are dropped;
- elements outside the whitelist are unwrapped, their children promoted
  into the parent, so ``script``/``style`` leave their raw text behind as
  escaped text;
- whitelisted elements lose every attribute except
    * ``href`` on anchors with an absolute http(s) URL, which also get
      ``rel="noopener noreferrer"`` and ``target="_blank"``; any other
      anchor becomes a plain ``span`` holding its text,
    * ``data-heading`` on list items when it is exactly 1, 2 or 3,
    * ``class="li-text"`` on spans.

An empty (or whitespace-only) result becomes ``<p><br/></p>`` so the editor
never ends up with a document without paragraphs. Sanitizing never raises
and is idempotent.

"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from richdocx.constants import (
    ALLOWED_HEADING_MARKERS,
    ALLOWED_TAGS,
    ANCHOR_REL,
    ANCHOR_TARGET,
    DEPS_HTML,
    EMPTY_DOCUMENT_HTML,
    HEADING_MARKER_ATTRIBUTE,
    LI_TEXT_CLASS,
)
from richdocx.options import SanitizerOptions
from richdocx.utils.decorators import requires_dependencies
from richdocx.utils.html import FragmentParser, is_absolute_http_url, make_fragment_parser

logger = logging.getLogger(__name__)


def _attribute_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


class HtmlSanitizer:
    """Rebuild an HTML fragment so that it only contains whitelisted markup.

    Parameters
    ----------
    options : SanitizerOptions or None
        Sanitizer configuration
    parser : FragmentParser or None
        Injected HTML parsing capability. Defaults to BeautifulSoup with the
        backend named in ``options.html_parser``, keeping attribute values
        literal.

    """

    def __init__(self, options: SanitizerOptions | None = None, parser: FragmentParser | None = None):
        self.options = options or SanitizerOptions()
        self._parse = parser or make_fragment_parser(self.options.html_parser, literal_attributes=True)

    @requires_dependencies("html", DEPS_HTML)
    def sanitize(self, html_content: str) -> str:
        """Return the sanitized form of ``html_content``.

        Parameters
        ----------
        html_content : str
            Arbitrary HTML

        Returns
        -------
        str
            HTML restricted to the whitelist; never empty

        """
        from bs4 import BeautifulSoup

        source = self._parse(html_content or "")
        output = BeautifulSoup("", "html.parser")

        for node in self._rebuild_children(source, output):
            output.append(node)

        if not self._has_content(output):
            return EMPTY_DOCUMENT_HTML

        return output.decode()

    @staticmethod
    def _has_content(output: Any) -> bool:
        from bs4.element import Tag

        return any(isinstance(node, Tag) or str(node).strip() for node in output.contents)

    def _rebuild_children(self, element: Any, output: Any) -> Iterator[Any]:
        for child in list(element.children):
            yield from self._rebuild(child, output)

    def _rebuild(self, node: Any, output: Any) -> Iterator[Any]:
        from bs4.element import NavigableString, PreformattedString, Tag

        if isinstance(node, PreformattedString):
            return
        if isinstance(node, NavigableString):
            yield output.new_string(str(node))
            return
        if not isinstance(node, Tag):
            return

        name = (node.name or "").lower()
        if name not in ALLOWED_TAGS:
            yield from self._rebuild_children(node, output)
            return

        if name == "a":
            href = _attribute_text(node.get("href")) or ""
            if not is_absolute_http_url(href):
                logger.debug("Degrading anchor with unsupported href %r to plain text", href)
                span = output.new_tag("span")
                text = node.get_text()
                if text:
                    span.append(output.new_string(text))
                yield span
                return
            clean = output.new_tag("a", attrs={"href": href, "rel": ANCHOR_REL, "target": ANCHOR_TARGET})
        elif name == "li":
            clean = output.new_tag("li")
            marker = _attribute_text(node.get(HEADING_MARKER_ATTRIBUTE))
            if marker in ALLOWED_HEADING_MARKERS:
                clean[HEADING_MARKER_ATTRIBUTE] = marker
        elif name == "span":
            clean = output.new_tag("span")
            if _attribute_text(node.get("class")) == LI_TEXT_CLASS:
                clean["class"] = LI_TEXT_CLASS
        else:
            clean = output.new_tag(name)

        for child in self._rebuild_children(node, output):
            clean.append(child)
        yield clean


def sanitize_html(
    html_content: str, options: SanitizerOptions | None = None, *, parser: FragmentParser | None = None
) -> str:
    """Sanitize ``html_content`` down to the editor whitelist.

    Examples
    --------
        >>> sanitize_html('<div><a href="javascript:alert(1)">x</a></div>')
        '<span>x</span>'
        >>> sanitize_html("   ")
        '<p><br/></p>'

    """
    return HtmlSanitizer(options, parser=parser).sanitize(html_content)


__all__ = ["HtmlSanitizer", "sanitize_html"]
