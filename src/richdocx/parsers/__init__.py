#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Readers turning external documents into editor HTML."""

from richdocx.parsers.docx import DocxToHtmlParser, docx_to_html

__all__ = ["DocxToHtmlParser", "docx_to_html"]
