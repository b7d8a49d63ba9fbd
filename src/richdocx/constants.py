#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for richdocx.

This module centralizes hardcoded values, magic numbers and default
configuration constants used across the library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Sanitizer Whitelist - Tags and attributes allowed through sanitization
3. Conversion Behavior - Units and limits used by the converter
4. DOCX Rendering - Styles, numbering and defaults for the serializer
5. Import Transport - Remote import service defaults
6. Dependencies - Third-party packages required per component
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Sanitizer Whitelist
# =============================================================================

ALLOWED_TAGS = frozenset({"p", "h1", "h2", "h3", "ul", "ol", "li", "b", "strong", "i", "em", "a", "br", "span"})

ALLOWED_HEADING_MARKERS = frozenset({"1", "2", "3"})
LI_TEXT_CLASS = "li-text"
HEADING_MARKER_ATTRIBUTE = "data-heading"

ANCHOR_REL = "noopener noreferrer"
ANCHOR_TARGET = "_blank"

ABSOLUTE_HTTP_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

EMPTY_DOCUMENT_HTML = "<p><br/></p>"

# =============================================================================
# Conversion Behavior
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParser = "html.parser"

# Left indent added per blockquote level, in twentieths of a point (~0.5")
QUOTE_INDENT_TWIPS = 720

CSS_PX_PER_INCH = 96
CSS_PT_PER_INCH = 72
MIN_FONT_SIZE_PT = 8
MAX_FONT_SIZE_PT = 96

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3}
LIST_TAGS = frozenset({"ul", "ol"})
BOLD_TAGS = frozenset({"b", "strong"})
ITALIC_TAGS = frozenset({"i", "em"})

BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "ul",
    }
)

# =============================================================================
# DOCX Rendering
# =============================================================================

DEFAULT_CREATOR = "richdocx"
DEFAULT_DESCRIPTION = "Generated by richdocx"
DEFAULT_DOCX_FONT = "Calibri"
DEFAULT_DOCX_FONT_SIZE = 11

HYPERLINK_STYLE_NAME = "Hyperlink"
DEFAULT_HYPERLINK_COLOR = "0000EE"
HYPERLINK_RELATIONSHIP = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink"

NUMBERED_LEVEL_TEXTS = ("%1.", "%2.", "%3.")
BULLET_LEVEL_TEXTS = ("•", "◦", "▪")
LIST_LEVEL_HANGING_TWIPS = 360

LIST_PARAGRAPH_STYLE = "List Paragraph"
HEADING_STYLE_TEMPLATE = "Heading {level}"

DEFAULT_DOCUMENT_TITLE = "Untitled"
DEFAULT_DOCUMENT_AUTHOR = "Anonymous"

# =============================================================================
# Import Transport
# =============================================================================

DEFAULT_API_BASE = "http://127.0.0.1:8000"
DOCX_IMPORT_PATH = "/docx/import"
DEFAULT_TRANSPORT_TIMEOUT = 30.0
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# =============================================================================
# Dependencies - (install_name, import_name, version_spec)
# =============================================================================

DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12.0")]
DEPS_DOCX = [("python-docx", "docx", ">=1.2.0")]
DEPS_NETWORK = [("httpx", "httpx", ">=0.28.1")]
