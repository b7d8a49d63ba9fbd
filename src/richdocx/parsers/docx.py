#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/parsers/docx.py
"""DOCX to editor HTML reader.

This module reads Word documents with python-docx and produces the HTML
dialect the editor and the converter understand:

- ``Heading 1``..``Heading 3`` paragraphs become ``h1``..``h3``;
- numbered and bulleted paragraphs become nested ``ol``/``ul`` lists. The
  nesting comes from ``w:ilvl`` and the list kind from the ``numFmt`` of the
  numbering definition the paragraph points at;
- a list paragraph that also carries a heading style becomes
  ``<li data-heading="N"><span class="li-text">...</span></li>``;
- bold and italic runs become ``strong``/``em``, hyperlinks ``a href``;
- paragraph alignment is kept as an inline ``text-align``.

The output is a faithful reading of packages written by
``richdocx.renderers.docx`` and a best-effort reading of anything else.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    import docx.document
    from docx.text.paragraph import Paragraph

from richdocx.api import ImportResponse
from richdocx.constants import DEPS_DOCX, DEPS_HTML, HEADING_MARKER_ATTRIBUTE, LI_TEXT_CLASS
from richdocx.exceptions import ParsingError
from richdocx.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_HEADING_STYLE = re.compile(r"^Heading\s+([1-3])$", re.IGNORECASE)
_LIST_STYLE = re.compile(r"^List\s*(?P<kind>Bullet|Number)(?:\s*(?P<level>\d+))?$", re.IGNORECASE)

_BULLET_FORMATS = frozenset({"bullet", "none"})

_ALIGNMENT_CSS = {
    "LEFT": "left",
    "CENTER": "center",
    "RIGHT": "right",
    "JUSTIFY": "justify",
}


@dataclass
class _OpenList:
    """A list element on the nesting stack with its most recent item."""

    tag_name: str
    element: Any
    last_item: Any = None


def _numbering_formats(doc: "docx.document.Document") -> dict[str, dict[int, str]]:
    """Map every ``numId`` to ``{ilvl: numFmt}`` of its abstract definition."""
    from docx.opc.constants import RELATIONSHIP_TYPE as RT
    from docx.oxml.ns import qn

    try:
        numbering = doc.part.part_related_by(RT.NUMBERING).element
    except (KeyError, NotImplementedError):
        return {}

    abstract_formats: dict[str, dict[int, str]] = {}
    for abstract in numbering.findall(qn("w:abstractNum")):
        levels: dict[int, str] = {}
        for lvl in abstract.findall(qn("w:lvl")):
            num_fmt = lvl.find(qn("w:numFmt"))
            if num_fmt is not None:
                levels[int(lvl.get(qn("w:ilvl"), "0"))] = num_fmt.get(qn("w:val"), "")
        abstract_formats[abstract.get(qn("w:abstractNumId"))] = levels

    formats: dict[str, dict[int, str]] = {}
    for num in numbering.findall(qn("w:num")):
        abstract_ref = num.find(qn("w:abstractNumId"))
        if abstract_ref is not None:
            formats[num.get(qn("w:numId"))] = abstract_formats.get(abstract_ref.get(qn("w:val")), {})
    return formats


class DocxToHtmlParser:
    """Read a DOCX package into editor HTML and metadata.

    Examples
    --------
        >>> response = DocxToHtmlParser().parse("report.docx")
        >>> response.html
        '<h1>Report</h1><ul><li>First</li></ul>'

    """

    @requires_dependencies("docx", DEPS_DOCX + DEPS_HTML)
    def parse(self, input_data: Union[str, Path, IO[bytes], bytes]) -> ImportResponse:
        """Parse a DOCX document.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], or bytes
            DOCX file to parse

        Returns
        -------
        ImportResponse
            Unsanitized HTML, metadata from the core properties and any
            conversion messages

        Raises
        ------
        ParsingError
            If the package cannot be opened

        """
        doc = self._open(input_data)
        messages: list[str] = []

        html = self._convert_body(doc)
        if doc.tables:
            messages.append(f"Skipped {len(doc.tables)} table(s); tables are not supported by the editor")

        metadata = self.extract_metadata(doc)
        logger.debug("Read DOCX with %d paragraphs, metadata fields: %s", len(doc.paragraphs), sorted(metadata))
        return ImportResponse(html=html, metadata=metadata or None, messages=tuple(messages))

    @staticmethod
    def _open(input_data: Union[str, Path, IO[bytes], bytes]) -> "docx.document.Document":
        import docx

        try:
            if isinstance(input_data, (str, Path)):
                return docx.Document(str(input_data))
            if isinstance(input_data, (bytes, bytearray)):
                return docx.Document(BytesIO(input_data))
            return docx.Document(input_data)
        except Exception as e:
            raise ParsingError(
                f"Failed to open DOCX document: {e}", parsing_stage="document_opening", original_error=e
            ) from e

    @staticmethod
    def extract_metadata(doc: "docx.document.Document") -> dict[str, str]:
        """Return the non-empty title and author core properties."""
        props = doc.core_properties
        metadata: dict[str, str] = {}
        if props.title:
            metadata["title"] = props.title
        if props.author:
            metadata["author"] = props.author
        return metadata

    def _convert_body(self, doc: "docx.document.Document") -> str:
        from bs4 import BeautifulSoup

        soup = BeautifulSoup("", "html.parser")
        formats = _numbering_formats(doc)
        open_lists: list[_OpenList] = []

        for paragraph in doc.paragraphs:
            list_tag, level = self._list_position(paragraph, formats)
            heading = self._heading_level(paragraph)

            if list_tag is None:
                open_lists.clear()
                soup.append(self._block_element(soup, paragraph, heading))
                continue

            item = self._open_list_item(soup, open_lists, list_tag, level)
            self._apply_alignment(item, paragraph)
            if heading is not None:
                item[HEADING_MARKER_ATTRIBUTE] = str(heading)
                wrapper = soup.new_tag("span", attrs={"class": LI_TEXT_CLASS})
                self._append_inlines(soup, wrapper, paragraph)
                item.append(wrapper)
            else:
                self._append_inlines(soup, item, paragraph)

        return soup.decode()

    # ------------------------------------------------------------------
    # Paragraph classification
    # ------------------------------------------------------------------

    @staticmethod
    def _heading_level(paragraph: "Paragraph") -> int | None:
        style_name = paragraph.style.name if paragraph.style is not None else ""
        match = _HEADING_STYLE.match(style_name or "")
        return int(match.group(1)) if match else None

    @staticmethod
    def _list_position(paragraph: "Paragraph", formats: dict[str, dict[int, str]]) -> tuple[str | None, int]:
        """Return ``("ol"|"ul", level)`` for list paragraphs and ``(None, 0)`` otherwise."""
        p_pr = paragraph._p.pPr
        num_pr = p_pr.numPr if p_pr is not None else None

        if num_pr is not None and num_pr.numId is not None:
            num_id = str(num_pr.numId.val)
            if num_id != "0":
                level = num_pr.ilvl.val if num_pr.ilvl is not None else 0
                level_formats = formats.get(num_id, {})
                num_fmt = level_formats.get(level, level_formats.get(0, "bullet"))
                return ("ul" if num_fmt in _BULLET_FORMATS else "ol"), level

        style_name = paragraph.style.name if paragraph.style is not None else ""
        match = _LIST_STYLE.match(style_name or "")
        if match:
            level = max(int(match.group("level") or 1) - 1, 0)
            return ("ol" if match.group("kind").lower() == "number" else "ul"), level

        return None, 0

    # ------------------------------------------------------------------
    # Element construction
    # ------------------------------------------------------------------

    def _block_element(self, soup: Any, paragraph: "Paragraph", heading: int | None) -> Any:
        element = soup.new_tag(f"h{heading}" if heading is not None else "p")
        self._apply_alignment(element, paragraph)
        self._append_inlines(soup, element, paragraph)
        if not element.contents:
            element.append(soup.new_tag("br"))
        return element

    @staticmethod
    def _open_list_item(soup: Any, open_lists: list[_OpenList], list_tag: str, level: int) -> Any:
        """Position the list stack at ``level`` and append a new item there.

        Deeper lists hang off the most recent item of their parent level;
        switching list kind on a level starts a new list.
        """
        while len(open_lists) > level + 1:
            open_lists.pop()
        if len(open_lists) == level + 1 and open_lists[-1].tag_name != list_tag:
            open_lists.pop()

        while len(open_lists) < level + 1:
            new_list = soup.new_tag(list_tag)
            if not open_lists:
                soup.append(new_list)
            else:
                parent = open_lists[-1]
                if parent.last_item is None:
                    parent.last_item = soup.new_tag("li")
                    parent.element.append(parent.last_item)
                parent.last_item.append(new_list)
            open_lists.append(_OpenList(list_tag, new_list))

        current = open_lists[-1]
        current.last_item = soup.new_tag("li")
        current.element.append(current.last_item)
        return current.last_item

    @staticmethod
    def _apply_alignment(element: Any, paragraph: "Paragraph") -> None:
        alignment = paragraph.alignment
        if alignment is None:
            return
        css_value = _ALIGNMENT_CSS.get(alignment.name)
        if css_value:
            element["style"] = f"text-align:{css_value}"

    def _append_inlines(self, soup: Any, target: Any, paragraph: "Paragraph") -> None:
        """Append the runs and hyperlinks of ``paragraph``, grouping runs that share formatting."""
        from docx.text.hyperlink import Hyperlink

        group: list[str] = []
        group_key: tuple[bool, bool] | None = None

        def flush_group() -> None:
            if group and group_key is not None:
                self._append_formatted(soup, target, "".join(group), *group_key)
            group.clear()

        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                flush_group()
                group_key = None
                text = item.text
                if item.address:
                    anchor = soup.new_tag("a", attrs={"href": item.address})
                    self._append_text(soup, anchor, text or item.address)
                    target.append(anchor)
                elif text:
                    self._append_text(soup, target, text)
                continue

            if not item.text:
                continue
            key = (bool(item.bold), bool(item.italic))
            if key != group_key:
                flush_group()
                group_key = key
            group.append(item.text)

        flush_group()

    def _append_formatted(self, soup: Any, target: Any, text: str, bold: bool, italic: bool) -> None:
        if bold:
            strong = soup.new_tag("strong")
            target.append(strong)
            target = strong
        if italic:
            em = soup.new_tag("em")
            target.append(em)
            target = em
        self._append_text(soup, target, text)

    @staticmethod
    def _append_text(soup: Any, target: Any, text: str) -> None:
        """Append text, turning line breaks into ``br`` elements."""
        for index, line in enumerate(text.split("\n")):
            if index:
                target.append(soup.new_tag("br"))
            if line:
                target.append(soup.new_string(line))


def docx_to_html(input_data: Union[str, Path, IO[bytes], bytes]) -> ImportResponse:
    """Read a DOCX document into an ``ImportResponse``."""
    return DocxToHtmlParser().parse(input_data)


__all__ = ["DocxToHtmlParser", "docx_to_html"]
