#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/converter.py
"""HTML to document model converter.

This module walks a (normally sanitized) HTML tree and produces the flat
paragraph sequence of ``richdocx.model``. Block elements are classified into
a closed set of ``BlockKind`` values and inline nodes into ``InlineKind``
values; each kind has exactly one handler, so adding a kind without a
handler fails loudly at import time instead of falling through silently.

Two values travel down the recursion:

- an indent budget in twips, increased by every ``blockquote``;
- an immutable ``RunStyle`` that inline elements extend (bold, italic,
  pixel font size) for their descendants.

List nesting is not tracked through recursion: the level of a list item is
the number of ``ul``/``ol`` ancestors minus one, read from the tree itself.

"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Iterable

from richdocx.constants import (
    ALLOWED_HEADING_MARKERS,
    BLOCK_ELEMENTS,
    BOLD_TAGS,
    DEFAULT_DESCRIPTION,
    DEPS_HTML,
    HEADING_MARKER_ATTRIBUTE,
    HEADING_TAGS,
    ITALIC_TAGS,
    LIST_TAGS,
)
from richdocx.metadata import DocumentMeta, validate_metadata
from richdocx.model import Document, HyperlinkRun, InlineNode, ListInfo, ListKind, Paragraph, Run, RunStyle
from richdocx.options import ConverterOptions
from richdocx.utils.css import font_size_pt, text_alignment
from richdocx.utils.decorators import requires_dependencies
from richdocx.utils.html import FragmentParser, is_absolute_http_url, make_fragment_parser

logger = logging.getLogger(__name__)

# HTML source whitespace; non-breaking spaces are content
_SOURCE_WHITESPACE = re.compile(r"[ \t\n\r\f]+")


class BlockKind(Enum):
    """Closed classification of block-level elements."""

    HEADING = "heading"
    QUOTE = "quote"
    LIST = "list"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"
    GENERIC = "generic"


class InlineKind(Enum):
    """Closed classification of inline nodes."""

    TEXT = "text"
    ANCHOR = "anchor"
    BOLD = "bold"
    ITALIC = "italic"
    BREAK = "break"
    INLINE = "inline"


def _tag_name(node: Any) -> str:
    return (getattr(node, "name", None) or "").lower()


def _is_tag(node: Any) -> bool:
    from bs4.element import Tag

    return isinstance(node, Tag)


def _is_text(node: Any) -> bool:
    from bs4.element import NavigableString, PreformattedString

    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _is_block(node: Any) -> bool:
    return _is_tag(node) and _tag_name(node) in BLOCK_ELEMENTS


def _is_meaningful(node: Any) -> bool:
    """Whether an inline node should keep an otherwise empty paragraph alive."""
    return _is_tag(node) or (_is_text(node) and bool(str(node).strip()))


def classify_block(element: Any) -> BlockKind:
    """Return the ``BlockKind`` of an element."""
    name = _tag_name(element)
    if name in HEADING_TAGS:
        return BlockKind.HEADING
    if name == "blockquote":
        return BlockKind.QUOTE
    if name in LIST_TAGS:
        return BlockKind.LIST
    if name == "li":
        return BlockKind.LIST_ITEM
    if name == "p":
        return BlockKind.PARAGRAPH
    return BlockKind.GENERIC


def classify_inline(node: Any) -> InlineKind | None:
    """Return the ``InlineKind`` of a node, or None for nodes that carry no content."""
    if _is_text(node):
        return InlineKind.TEXT
    if not _is_tag(node):
        return None

    name = _tag_name(node)
    if name == "a":
        return InlineKind.ANCHOR
    if name in BOLD_TAGS:
        return InlineKind.BOLD
    if name in ITALIC_TAGS:
        return InlineKind.ITALIC
    if name == "br":
        return InlineKind.BREAK
    return InlineKind.INLINE


def _attribute_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


class HtmlToDocumentConverter:
    """Convert HTML into the paragraph-based document model.

    Parameters
    ----------
    options : ConverterOptions or None
        Converter configuration
    parser : FragmentParser or None
        Injected HTML parsing capability; defaults to BeautifulSoup with the
        backend named in ``options.html_parser``

    Examples
    --------
        >>> converter = HtmlToDocumentConverter()
        >>> [p.text for p in converter.to_paragraphs("<h1>Title</h1><p>Body</p>")]
        ['Title', 'Body']

    """

    _BLOCK_HANDLERS = {
        BlockKind.HEADING: "_convert_heading",
        BlockKind.QUOTE: "_convert_quote",
        BlockKind.LIST: "_convert_list",
        BlockKind.LIST_ITEM: "_convert_stray_list_item",
        BlockKind.PARAGRAPH: "_convert_paragraph",
        BlockKind.GENERIC: "_convert_generic",
    }

    _INLINE_HANDLERS = {
        InlineKind.TEXT: "_inline_text",
        InlineKind.ANCHOR: "_inline_anchor",
        InlineKind.BOLD: "_inline_bold",
        InlineKind.ITALIC: "_inline_italic",
        InlineKind.BREAK: "_inline_break",
        InlineKind.INLINE: "_inline_wrapper",
    }

    def __init__(self, options: ConverterOptions | None = None, parser: FragmentParser | None = None):
        self.options = options or ConverterOptions()
        self._parse = parser or make_fragment_parser(self.options.html_parser)

    @requires_dependencies("html", DEPS_HTML)
    def to_paragraphs(self, html_content: str) -> list[Paragraph]:
        """Convert an HTML fragment into paragraphs.

        Returns
        -------
        list of Paragraph
            Paragraphs in document order; a single empty paragraph when the
            input produces none

        """
        root = self._parse(html_content or "")
        paragraphs = self._convert_container(root, indent=0)
        return paragraphs or [Paragraph()]

    def convert(
        self, html_content: str, meta: DocumentMeta, description: str = DEFAULT_DESCRIPTION
    ) -> Document:
        """Convert an HTML fragment into a complete ``Document``.

        Parameters
        ----------
        html_content : str
            HTML fragment
        meta : DocumentMeta
            Title and author; the author becomes the document creator
        description : str
            Free-text description carried into the document properties

        """
        meta = validate_metadata(meta)
        return Document(
            creator=meta.author,
            title=meta.title,
            paragraphs=self.to_paragraphs(html_content),
            description=description,
        )

    # ------------------------------------------------------------------
    # Block level
    # ------------------------------------------------------------------

    def _convert_block(self, element: Any, indent: int) -> list[Paragraph]:
        handler = getattr(self, self._BLOCK_HANDLERS[classify_block(element)])
        return handler(element, indent)

    def _convert_container(self, container: Any, indent: int) -> list[Paragraph]:
        """Convert the children of a container, grouping loose inline content into paragraphs."""
        paragraphs: list[Paragraph] = []
        inline_buffer: list[Any] = []

        def flush() -> None:
            if any(_is_meaningful(node) for node in inline_buffer):
                paragraphs.append(self._build_paragraph(inline_buffer, RunStyle(), indent=indent))
            inline_buffer.clear()

        for child in container.children:
            if _is_block(child):
                flush()
                paragraphs.extend(self._convert_block(child, indent))
            elif _is_tag(child) or _is_text(child):
                inline_buffer.append(child)
        flush()

        return paragraphs

    def _convert_heading(self, element: Any, indent: int) -> list[Paragraph]:
        return [
            self._build_paragraph(
                element.children,
                self._style_for(element, RunStyle()),
                indent=indent,
                heading=HEADING_TAGS[_tag_name(element)],
                alignment_source=element,
            )
        ]

    def _convert_quote(self, element: Any, indent: int) -> list[Paragraph]:
        nested_indent = indent + self.options.indent_unit
        if not any(_is_tag(child) for child in element.children):
            return [
                self._build_paragraph(
                    element.children,
                    self._style_for(element, RunStyle()),
                    indent=nested_indent,
                    alignment_source=element,
                )
            ]
        return self._convert_container(element, nested_indent)

    def _convert_list(self, element: Any, indent: int) -> list[Paragraph]:
        kind = ListKind.NUMBERED if _tag_name(element) == "ol" else ListKind.BULLETED
        paragraphs: list[Paragraph] = []

        for child in element.children:
            name = _tag_name(child)
            if name == "li":
                paragraphs.extend(self._convert_list_item(child, kind, indent))
            elif name in LIST_TAGS:
                # ul/ol directly inside a list, as produced by contenteditable indentation
                paragraphs.extend(self._convert_list(child, indent))

        return paragraphs

    def _convert_list_item(self, item: Any, kind: ListKind, indent: int) -> list[Paragraph]:
        own_content: list[Any] = []
        nested_blocks: list[Any] = []
        for child in item.children:
            if _tag_name(child) in LIST_TAGS or _tag_name(child) == "blockquote":
                nested_blocks.append(child)
            else:
                own_content.append(child)

        paragraphs: list[Paragraph] = []
        if not nested_blocks or any(_is_meaningful(node) for node in own_content):
            marker = _attribute_text(item.get(HEADING_MARKER_ATTRIBUTE))
            paragraphs.append(
                self._build_paragraph(
                    own_content,
                    self._style_for(item, RunStyle()),
                    indent=indent,
                    heading=int(marker) if marker in ALLOWED_HEADING_MARKERS else None,
                    alignment_source=item,
                    list_info=ListInfo(kind=kind, level=self._list_level(item)),
                )
            )

        for block in nested_blocks:
            paragraphs.extend(self._convert_block(block, indent))

        return paragraphs

    def _convert_stray_list_item(self, element: Any, indent: int) -> list[Paragraph]:
        parent = element.parent
        if parent is not None and _tag_name(parent) in LIST_TAGS:
            kind = ListKind.NUMBERED if _tag_name(parent) == "ol" else ListKind.BULLETED
            return self._convert_list_item(element, kind, indent)
        return self._convert_paragraph(element, indent)

    def _convert_paragraph(self, element: Any, indent: int) -> list[Paragraph]:
        return [
            self._build_paragraph(
                element.children,
                self._style_for(element, RunStyle()),
                indent=indent,
                alignment_source=element,
            )
        ]

    def _convert_generic(self, element: Any, indent: int) -> list[Paragraph]:
        if any(_is_block(child) for child in element.children):
            return self._convert_container(element, indent)
        return self._convert_paragraph(element, indent)

    @staticmethod
    def _list_level(item: Any) -> int:
        return max(0, len(item.find_parents(list(LIST_TAGS))) - 1)

    def _build_paragraph(
        self,
        nodes: Iterable[Any],
        style: RunStyle,
        *,
        indent: int,
        heading: int | None = None,
        alignment_source: Any = None,
        list_info: ListInfo | None = None,
    ) -> Paragraph:
        alignment = text_alignment(alignment_source.get("style")) if alignment_source is not None else None
        return Paragraph(
            children=self._flatten(nodes, style),
            heading=heading,
            alignment=alignment,
            indent=indent if indent > 0 else None,
            list_info=list_info,
        )

    # ------------------------------------------------------------------
    # Inline level
    # ------------------------------------------------------------------

    @staticmethod
    def _style_for(element: Any, style: RunStyle) -> RunStyle:
        return style.with_size(font_size_pt(element.get("style")))

    def _flatten(self, nodes: Iterable[Any], style: RunStyle) -> list[InlineNode]:
        runs: list[InlineNode] = []
        for node in list(nodes):
            kind = classify_inline(node)
            if kind is None:
                continue
            runs.extend(getattr(self, self._INLINE_HANDLERS[kind])(node, style))
        return runs

    def _inline_text(self, node: Any, style: RunStyle) -> list[InlineNode]:
        text = _SOURCE_WHITESPACE.sub(" ", str(node))
        return [Run.styled(text, style)] if text else []

    def _inline_anchor(self, node: Any, style: RunStyle) -> list[InlineNode]:
        style = self._style_for(node, style)
        href = _attribute_text(node.get("href"))
        text = "".join(run.text for run in self._flatten(node.children, style) if isinstance(run, Run)) or href

        if is_absolute_http_url(href):
            return [HyperlinkRun(text=text, url=href, size=style.size)]

        logger.debug("Anchor with non-http(s) href %r rendered as plain text", href)
        return [Run.styled(text, style)] if text else []

    def _inline_bold(self, node: Any, style: RunStyle) -> list[InlineNode]:
        return self._flatten(node.children, self._style_for(node, style.with_bold()))

    def _inline_italic(self, node: Any, style: RunStyle) -> list[InlineNode]:
        return self._flatten(node.children, self._style_for(node, style.with_italic()))

    def _inline_break(self, node: Any, style: RunStyle) -> list[InlineNode]:
        return self._flatten(node.children, style)

    def _inline_wrapper(self, node: Any, style: RunStyle) -> list[InlineNode]:
        return self._flatten(node.children, self._style_for(node, style))


def _check_handler_tables() -> None:
    missing_block = set(BlockKind) - set(HtmlToDocumentConverter._BLOCK_HANDLERS)
    missing_inline = set(InlineKind) - set(HtmlToDocumentConverter._INLINE_HANDLERS)
    if missing_block or missing_inline:
        raise RuntimeError(f"Unhandled node kinds: {sorted(k.value for k in missing_block | missing_inline)}")


_check_handler_tables()


def html_to_paragraphs(
    html_content: str, options: ConverterOptions | None = None, *, parser: FragmentParser | None = None
) -> list[Paragraph]:
    """Convert an HTML fragment into the paragraph sequence used for export.

    Examples
    --------
        >>> paragraphs = html_to_paragraphs('<span style="font-size:24px">Hi</span>')
        >>> paragraphs[0].children[0].size
        18

    """
    return HtmlToDocumentConverter(options, parser=parser).to_paragraphs(html_content)


__all__ = [
    "BlockKind",
    "InlineKind",
    "HtmlToDocumentConverter",
    "classify_block",
    "classify_inline",
    "html_to_paragraphs",
]
