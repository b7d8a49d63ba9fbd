#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/metadata.py
"""Document metadata validation and merging.

An export needs a complete ``DocumentMeta``; both fields are required,
non-empty strings and invalid values are rejected before anything reaches
the serializer. Imports are lenient: whatever valid fields a response
carries are merged into the editor's current metadata and the rest is
dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from richdocx.constants import DEFAULT_DOCUMENT_AUTHOR, DEFAULT_DOCUMENT_TITLE
from richdocx.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


@dataclass(frozen=True)
class DocumentMeta:
    """Title and author of an exported document.

    Parameters
    ----------
    title : str
        Document title, non-empty
    author : str
        Document author, non-empty; written as the DOCX creator

    Raises
    ------
    ValidationError
        If either field is not a non-empty string

    """

    title: str = DEFAULT_DOCUMENT_TITLE
    author: str = DEFAULT_DOCUMENT_AUTHOR

    def __post_init__(self) -> None:
        for meta_field in fields(self):
            value = getattr(self, meta_field.name)
            if not _is_non_empty_string(value):
                raise ValidationError(
                    f"Metadata field '{meta_field.name}' must be a non-empty string",
                    parameter_name=meta_field.name,
                    parameter_value=value,
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DocumentMeta:
        """Build metadata from a mapping, requiring every field."""
        return cls(**{meta_field.name: data.get(meta_field.name) for meta_field in fields(cls)})

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "author": self.author}


def validate_metadata(meta: DocumentMeta | Mapping[str, Any]) -> DocumentMeta:
    """Return ``meta`` as a validated ``DocumentMeta``.

    Raises
    ------
    ValidationError
        If a field is missing or empty

    """
    if isinstance(meta, DocumentMeta):
        return meta
    if not isinstance(meta, Mapping):
        raise ValidationError("Metadata must be a mapping", parameter_name="meta", parameter_value=meta)
    return DocumentMeta.from_mapping(meta)


def merge_partial_metadata(current: DocumentMeta, data: Mapping[str, Any] | None) -> DocumentMeta:
    """Merge the valid fields of an imported metadata record into ``current``.

    Each field is validated on its own: a non-empty string replaces the
    current value, anything else is dropped.

    Examples
    --------
        >>> merge_partial_metadata(DocumentMeta(), {"title": "Report", "author": ""})
        DocumentMeta(title='Report', author='Anonymous')

    """
    if not data or not isinstance(data, Mapping):
        return current

    updates: dict[str, str] = {}
    for meta_field in fields(DocumentMeta):
        if meta_field.name not in data:
            continue
        value = data[meta_field.name]
        if _is_non_empty_string(value):
            updates[meta_field.name] = value
        else:
            logger.debug("Dropping invalid imported metadata field %r: %r", meta_field.name, value)

    return replace(current, **updates) if updates else current
