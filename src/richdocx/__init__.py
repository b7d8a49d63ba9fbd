#  Copyright (c) 2025 Tom Villani, Ph.D.
"""richdocx - rich-text editor HTML to DOCX conversion.

The package turns the HTML produced by a browser rich-text editor into a
Word document in three steps:

1. ``sanitize_html`` restricts arbitrary markup to a small whitelist.
2. ``HtmlToDocumentConverter`` maps the HTML tree onto a flat paragraph
   model (headings, nested bulleted/numbered lists, quote indentation,
   bold/italic/size runs and hyperlinks).
3. ``DocxRenderer`` serializes that model with python-docx.

``export_docx`` runs the whole pipeline. The reverse direction reads a DOCX
back into editor HTML (``DocxToHtmlParser``) or asks a remote import
service (``ImportClient``); ``apply_import_response`` sanitizes the result
and merges the imported metadata.

Examples
--------
    >>> from richdocx import DocumentMeta, export_docx
    >>> data = export_docx("<h1>Notes</h1><ul><li>First</li></ul>", DocumentMeta(title="Notes", author="Ada"))

"""

from richdocx.api import (
    ImportResponse,
    apply_import_response,
    export_docx,
    export_docx_async,
    html_to_document,
    html_to_paragraphs,
)
from richdocx.converter import HtmlToDocumentConverter
from richdocx.exceptions import (
    DependencyError,
    InvalidOptionsError,
    OutputWriteError,
    ParsingError,
    RenderingError,
    RichDocxError,
    TransportError,
    ValidationError,
)
from richdocx.metadata import DocumentMeta, merge_partial_metadata, validate_metadata
from richdocx.model import Alignment, Document, HyperlinkRun, ListInfo, ListKind, Paragraph, Run
from richdocx.options import (
    ConverterOptions,
    DocxRendererOptions,
    ExportOptions,
    SanitizerOptions,
    TransportOptions,
)
from richdocx.renderers.docx import DocxRenderer
from richdocx.sanitizer import HtmlSanitizer, sanitize_html

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Pipeline
    "export_docx",
    "export_docx_async",
    "html_to_document",
    "html_to_paragraphs",
    "sanitize_html",
    "apply_import_response",
    "ImportResponse",
    # Components
    "HtmlSanitizer",
    "HtmlToDocumentConverter",
    "DocxRenderer",
    # Model
    "Alignment",
    "Document",
    "HyperlinkRun",
    "ListInfo",
    "ListKind",
    "Paragraph",
    "Run",
    # Metadata
    "DocumentMeta",
    "merge_partial_metadata",
    "validate_metadata",
    # Options
    "ConverterOptions",
    "DocxRendererOptions",
    "ExportOptions",
    "SanitizerOptions",
    "TransportOptions",
    # Exceptions
    "RichDocxError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "OutputWriteError",
    "TransportError",
    "DependencyError",
]
