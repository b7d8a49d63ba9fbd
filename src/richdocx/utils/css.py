#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/utils/css.py
"""Minimal inline-style helpers.

Only the two declarations the converter understands are interpreted:
``font-size`` in pixels and ``text-align``. Everything else in a ``style``
attribute is ignored.
"""

from __future__ import annotations

import re
from typing import Any

from richdocx.constants import CSS_PT_PER_INCH, CSS_PX_PER_INCH, MAX_FONT_SIZE_PT, MIN_FONT_SIZE_PT
from richdocx.model import Alignment

_PX_PATTERN = re.compile(r"(\d+(?:\.\d+)?)px")

_ALIGNMENT_KEYWORDS = {
    "left": Alignment.START,
    "start": Alignment.START,
    "center": Alignment.CENTER,
    "right": Alignment.END,
    "end": Alignment.END,
    "justify": Alignment.JUSTIFY,
}


def parse_inline_style(style: Any) -> dict[str, str]:
    """Split a ``style`` attribute into lower-cased property/value pairs.

    Examples
    --------
        >>> parse_inline_style("Font-Size: 24px; text-align:center")
        {'font-size': '24px', 'text-align': 'center'}

    """
    if not style:
        return {}
    if isinstance(style, list):
        style = " ".join(style)

    declarations: dict[str, str] = {}
    for declaration in str(style).split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip().lower()
        if name and value:
            declarations[name] = value
    return declarations


def px_to_pt(px: float) -> int:
    """Convert CSS pixels to whole points, clamped to the supported font range."""
    pt = round(px * CSS_PT_PER_INCH / CSS_PX_PER_INCH)
    return max(MIN_FONT_SIZE_PT, min(MAX_FONT_SIZE_PT, pt))


def font_size_pt(style: Any) -> int | None:
    """Return the point size of an inline pixel ``font-size``, or None when absent."""
    value = parse_inline_style(style).get("font-size")
    if not value:
        return None
    match = _PX_PATTERN.search(value)
    if not match:
        return None
    return px_to_pt(float(match.group(1)))


def text_alignment(style: Any) -> Alignment | None:
    """Return the paragraph alignment of an inline ``text-align``, or None."""
    value = parse_inline_style(style).get("text-align")
    if not value:
        return None
    return _ALIGNMENT_KEYWORDS.get(value.replace("!important", "").strip())
