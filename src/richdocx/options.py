#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/options.py
"""Configuration options for sanitizing, converting and serializing.

All options are frozen dataclasses. Use ``create_updated`` to derive a
modified copy::

    >>> options = ExportOptions().create_updated(sanitize_input=False)

"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field, replace
from typing import Any, get_args

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from richdocx.constants import (
    DEFAULT_API_BASE,
    DEFAULT_CREATOR,
    DEFAULT_DESCRIPTION,
    DEFAULT_DOCX_FONT,
    DEFAULT_DOCX_FONT_SIZE,
    DEFAULT_HTML_PARSER,
    DEFAULT_HYPERLINK_COLOR,
    DEFAULT_TRANSPORT_TIMEOUT,
    QUOTE_INDENT_TWIPS,
    HtmlParser,
)

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")


def _validate_html_parser(value: str) -> None:
    if value not in get_args(HtmlParser):
        raise ValueError(f"html_parser must be one of {get_args(HtmlParser)}, got {value!r}")


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class SanitizerOptions(CloneFrozenMixin):
    """Options for the HTML sanitizer.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder used to read the input.

    """

    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup parser backend"},
    )

    def __post_init__(self) -> None:
        _validate_html_parser(self.html_parser)


@dataclass(frozen=True)
class ConverterOptions(CloneFrozenMixin):
    """Options for the HTML to document model converter.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder used to read the input.
    indent_unit : int, default 720
        Left indent added per blockquote level, in twentieths of a point.

    """

    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup parser backend"},
    )
    indent_unit: int = field(
        default=QUOTE_INDENT_TWIPS,
        metadata={"help": "Left indent per blockquote level in twips", "type": int},
    )

    def __post_init__(self) -> None:
        _validate_html_parser(self.html_parser)
        if self.indent_unit <= 0:
            raise ValueError(f"indent_unit must be positive, got {self.indent_unit}")


@dataclass(frozen=True)
class DocxRendererOptions(CloneFrozenMixin):
    """Options for serializing the document model to DOCX.

    Parameters
    ----------
    default_font : str, default "Calibri"
        Font name of the Normal style.
    default_font_size : int, default 11
        Font size of the Normal style in points.
    creator : str or None, default "richdocx"
        Application name written as the last-modified-by property. None
        leaves the property untouched.
    template_path : str or None, default None
        Optional .docx template whose styles and numbering are reused.

    """

    default_font: str = field(
        default=DEFAULT_DOCX_FONT, metadata={"help": "Default font for body text", "cli_name": "font"}
    )
    default_font_size: int = field(
        default=DEFAULT_DOCX_FONT_SIZE,
        metadata={"help": "Default font size in points", "type": int, "cli_name": "font-size"},
    )
    creator: str | None = field(
        default=DEFAULT_CREATOR,
        metadata={"help": "Application name for the last-modified-by property"},
    )
    template_path: str | None = field(
        default=None,
        metadata={"help": "Optional .docx template", "cli_name": "template"},
    )

    def __post_init__(self) -> None:
        if self.default_font_size <= 0:
            raise ValueError(f"default_font_size must be positive, got {self.default_font_size}")


@dataclass(frozen=True)
class ExportOptions(CloneFrozenMixin):
    """Options for the whole export pipeline.

    Parameters
    ----------
    sanitize_input : bool, default True
        Run the sanitizer before converting. Disable only for HTML that
        comes from the editor itself and should keep its inline
        ``font-size``/``text-align`` styles.
    sanitizer : SanitizerOptions
    converter : ConverterOptions
    renderer : DocxRendererOptions
    description : str, default "Generated by richdocx"
        Text written to the comments core property.
    hyperlink_color : str, default "0000EE"
        RGB hex colour of the hyperlink character style.

    """

    sanitize_input: bool = field(
        default=True,
        metadata={
            "help": "Skip sanitizing (keeps inline font-size/text-align styles)",
            "cli_name": "no-sanitize",
        },
    )
    description: str = field(
        default=DEFAULT_DESCRIPTION,
        metadata={"help": "Document comments property"},
    )
    hyperlink_color: str = field(
        default=DEFAULT_HYPERLINK_COLOR,
        metadata={"help": "Hyperlink colour as RGB hex"},
    )
    sanitizer: SanitizerOptions = field(default_factory=SanitizerOptions)
    converter: ConverterOptions = field(default_factory=ConverterOptions)
    renderer: DocxRendererOptions = field(default_factory=DocxRendererOptions)

    def __post_init__(self) -> None:
        if not _HEX_COLOR.match(self.hyperlink_color):
            raise ValueError(f"hyperlink_color must be a 6-digit hex colour, got {self.hyperlink_color!r}")


@dataclass(frozen=True)
class TransportOptions(CloneFrozenMixin):
    """Options for the remote DOCX import client.

    Parameters
    ----------
    base_url : str, default "http://127.0.0.1:8000"
        Base URL of the import service.
    timeout : float, default 30.0
        Request timeout in seconds.

    """

    base_url: str = field(default=DEFAULT_API_BASE, metadata={"help": "Import service base URL"})
    timeout: float = field(
        default=DEFAULT_TRANSPORT_TIMEOUT,
        metadata={"help": "Request timeout in seconds", "type": float},
    )

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
