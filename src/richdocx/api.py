#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/api.py
"""High-level entry points for exporting and importing editor documents.

Export pipeline::

    html --(sanitize)--> html --(convert)--> Document --(render)--> DOCX bytes

Import boundary::

    {html, metadata?, messages?} --> (sanitized html, merged DocumentMeta)

Each call is an independent unit of work; nothing is cached or shared
between exports.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import IO, Any, Mapping, Union

from richdocx.converter import HtmlToDocumentConverter
from richdocx.exceptions import OutputWriteError, ValidationError
from richdocx.metadata import DocumentMeta, merge_partial_metadata, validate_metadata
from richdocx.model import Document, HyperlinkStyle, Paragraph
from richdocx.options import ExportOptions, SanitizerOptions
from richdocx.renderers.docx import DocxRenderer
from richdocx.sanitizer import sanitize_html
from richdocx.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_EMPTY_IMPORT_HTML = "<p></p>"


def _prepare_html(html_content: str, options: ExportOptions) -> str:
    if not options.sanitize_input:
        return html_content
    return sanitize_html(html_content, options.sanitizer)


def html_to_document(
    html_content: str,
    meta: DocumentMeta | Mapping[str, Any],
    options: ExportOptions | None = None,
) -> Document:
    """Build the document model for an export without serializing it.

    Parameters
    ----------
    html_content : str
        Editor HTML
    meta : DocumentMeta or Mapping
        Title and author; validated before any conversion happens
    options : ExportOptions or None
        Pipeline configuration

    Returns
    -------
    Document
        Fresh document model

    Raises
    ------
    ValidationError
        If the metadata is incomplete

    """
    options = options or ExportOptions()
    meta = validate_metadata(meta)

    converter = HtmlToDocumentConverter(options.converter)
    return Document(
        creator=meta.author,
        title=meta.title,
        paragraphs=converter.to_paragraphs(_prepare_html(html_content, options)),
        description=options.description,
        hyperlink_style=HyperlinkStyle(color=options.hyperlink_color),
    )


def html_to_paragraphs(html_content: str, options: ExportOptions | None = None) -> list[Paragraph]:
    """Return the paragraph sequence an export of ``html_content`` would contain."""
    options = options or ExportOptions()
    return HtmlToDocumentConverter(options.converter).to_paragraphs(_prepare_html(html_content, options))


def export_docx(
    html_content: str,
    meta: DocumentMeta | Mapping[str, Any],
    options: ExportOptions | None = None,
    output: Union[str, Path, IO[bytes], None] = None,
) -> bytes:
    """Export editor HTML to a DOCX package.

    Parameters
    ----------
    html_content : str
        Editor HTML
    meta : DocumentMeta or Mapping
        Title and author
    options : ExportOptions or None
        Pipeline configuration
    output : str, Path, IO[bytes] or None
        Optional destination the package is also written to

    Returns
    -------
    bytes
        Complete DOCX package

    Raises
    ------
    ValidationError
        If the metadata is incomplete; nothing is serialized
    RenderingError
        If serialization fails; no partial output is produced

    Examples
    --------
        >>> data = export_docx("<h1>Report</h1><p>Body</p>", DocumentMeta(title="Report", author="Ada"))
        >>> data[:2]
        b'PK'

    """
    options = options or ExportOptions()
    document = html_to_document(html_content, meta, options)

    renderer = DocxRenderer(options.renderer)
    with debug_timer(logger, "DOCX export"):
        data = renderer.render_to_bytes(document)

    if output is not None:
        if isinstance(output, (str, Path)):
            try:
                Path(output).write_bytes(data)
            except OSError as e:
                raise OutputWriteError(str(output), original_error=e) from e
        else:
            output.write(data)

    logger.debug("Exported %d paragraphs (%d bytes)", len(document.paragraphs), len(data))
    return data


async def export_docx_async(
    html_content: str,
    meta: DocumentMeta | Mapping[str, Any],
    options: ExportOptions | None = None,
) -> bytes:
    """Export editor HTML to DOCX without blocking the event loop.

    Validation, sanitizing and conversion run synchronously; only the
    serialization step is handed to the default executor.
    """
    options = options or ExportOptions()
    document = html_to_document(html_content, meta, options)

    loop = asyncio.get_running_loop()
    renderer = DocxRenderer(options.renderer)
    return await loop.run_in_executor(None, partial(renderer.render_to_bytes, document))


@dataclass(frozen=True)
class ImportResponse:
    """Result of converting a DOCX file into editor HTML.

    Parameters
    ----------
    html : str
        Editor HTML, not yet sanitized
    metadata : dict or None
        Partial ``DocumentMeta`` fields; validated field by field on merge
    messages : tuple
        Conversion warnings reported by the importer

    """

    html: str = ""
    metadata: dict[str, Any] | None = None
    messages: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Any) -> ImportResponse:
        """Parse an import payload leniently.

        Wrongly typed members are treated as absent; only a payload that is
        not a mapping at all is rejected.

        Raises
        ------
        ValidationError
            If ``data`` is not a mapping

        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Import response must be an object, got {type(data).__name__}",
                parameter_name="response",
                parameter_value=data,
            )

        html = data.get("html")
        metadata = data.get("metadata")
        messages = data.get("messages")
        return cls(
            html=html if isinstance(html, str) else "",
            metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
            messages=tuple(messages) if isinstance(messages, (list, tuple)) else (),
        )


def apply_import_response(
    response: ImportResponse | Mapping[str, Any],
    current_meta: DocumentMeta,
    options: SanitizerOptions | None = None,
) -> tuple[str, DocumentMeta]:
    """Turn an import response into editor state.

    Parameters
    ----------
    response : ImportResponse or Mapping
        Payload returned by the importer
    current_meta : DocumentMeta
        Metadata currently held by the editor
    options : SanitizerOptions or None
        Sanitizer configuration

    Returns
    -------
    tuple of (str, DocumentMeta)
        Sanitized HTML and the merged metadata

    Examples
    --------
        >>> html, meta = apply_import_response({"html": "<p>Hi</p>", "metadata": {"title": "T"}}, DocumentMeta())
        >>> html, meta.title, meta.author
        ('<p>Hi</p>', 'T', 'Anonymous')

    """
    if not isinstance(response, ImportResponse):
        response = ImportResponse.from_mapping(response)

    for message in response.messages:
        logger.info("Import message: %s", message)

    html = sanitize_html((response.html or _EMPTY_IMPORT_HTML).strip(), options)
    return html, merge_partial_metadata(current_meta, response.metadata)


__all__ = [
    "ImportResponse",
    "apply_import_response",
    "export_docx",
    "export_docx_async",
    "html_to_document",
    "html_to_paragraphs",
]
