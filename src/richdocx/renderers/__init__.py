#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Serializers for the richdocx document model."""

from richdocx.renderers.docx import DocxRenderer

__all__ = ["DocxRenderer"]
