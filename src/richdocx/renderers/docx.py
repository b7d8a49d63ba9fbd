#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/renderers/docx.py
"""DOCX rendering from the document model.

This module provides the DocxRenderer class which serializes a
``richdocx.model.Document`` to a Word (.docx) package using python-docx.

Every export registers two multi-level numbering definitions (decimal and
bullet) and a ``Hyperlink`` character style in the generated package.
Paragraphs map onto the document body one to one:

- a heading level selects the built-in ``Heading N`` style;
- a list classification attaches the paragraph to the numbering
  definition of its kind at its nesting level;
- an indent becomes the paragraph's left indent in twips;
- alignment maps onto the paragraph justification.

Rendering is all-or-nothing: the package is assembled in memory and only
written to the destination once it is complete.

"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from docx.text.paragraph import Paragraph as DocxParagraph

from richdocx.constants import (
    DEPS_DOCX,
    HEADING_STYLE_TEMPLATE,
    HYPERLINK_RELATIONSHIP,
    LIST_LEVEL_HANGING_TWIPS,
    LIST_PARAGRAPH_STYLE,
    QUOTE_INDENT_TWIPS,
)
from richdocx.exceptions import InvalidOptionsError, OutputWriteError, RenderingError, RichDocxError
from richdocx.model import (
    Alignment,
    Document,
    HyperlinkRun,
    ListInfo,
    ListKind,
    ModelVisitor,
    NumberingDefinition,
    Paragraph,
    Run,
)
from richdocx.options import DocxRendererOptions
from richdocx.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_NUMBER_FORMATS = {ListKind.NUMBERED: "decimal", ListKind.BULLETED: "bullet"}


class DocxRenderer(ModelVisitor):
    """Render the document model to DOCX format.

    Parameters
    ----------
    options : DocxRendererOptions or None, default = None
        DOCX formatting options

    Examples
    --------
        >>> from richdocx.model import Document, Paragraph, Run
        >>> doc = Document(creator="Ada", title="Notes", paragraphs=[Paragraph(children=[Run("Hello")])])
        >>> data = DocxRenderer().render_to_bytes(doc)
        >>> data[:2]
        b'PK'

    """

    def __init__(self, options: DocxRendererOptions | None = None):
        if options is not None and not isinstance(options, DocxRendererOptions):
            raise InvalidOptionsError("DocxRenderer", DocxRendererOptions, type(options))
        self.options = options or DocxRendererOptions()
        self.document: Any = None
        self._current_paragraph: DocxParagraph | None = None
        self._numbering: dict[ListKind, tuple[NumberingDefinition, int]] = {}
        self._hyperlink_style_id: str | None = None

    @requires_dependencies("docx", DEPS_DOCX)
    def render(self, doc: Document, output: Union[str, Path, IO[bytes]]) -> None:
        """Render the model to a DOCX file.

        Parameters
        ----------
        doc : Document
            Document to render
        output : str, Path, or IO[bytes]
            Output destination (file path or binary file-like object)

        Raises
        ------
        RenderingError
            If DOCX generation fails
        OutputWriteError
            If the finished package cannot be written to ``output``

        """
        data = self.render_to_bytes(doc)

        if isinstance(output, (str, Path)):
            try:
                Path(output).write_bytes(data)
            except OSError as e:
                raise OutputWriteError(str(output), original_error=e) from e
        else:
            output.write(data)

    @requires_dependencies("docx", DEPS_DOCX)
    def render_to_bytes(self, doc: Document) -> bytes:
        """Render the model to DOCX bytes.

        Returns
        -------
        bytes
            Complete DOCX package

        Raises
        ------
        RenderingError
            If DOCX generation fails

        """
        from docx import Document as DocxDocument

        try:
            self.document = DocxDocument(self.options.template_path) if self.options.template_path else DocxDocument()
            self._set_document_defaults()
            doc.accept(self)

            buffer = BytesIO()
            self.document.save(buffer)
            return buffer.getvalue()
        except RichDocxError:
            raise
        except Exception as e:
            raise RenderingError(f"Failed to render DOCX: {e!r}", rendering_stage="rendering", original_error=e) from e
        finally:
            self.document = None
            self._current_paragraph = None
            self._numbering = {}
            self._hyperlink_style_id = None

    def _set_document_defaults(self) -> None:
        from docx.shared import Pt

        font = self.document.styles["Normal"].font
        font.name = self.options.default_font
        font.size = Pt(self.options.default_font_size)

    def visit_document(self, node: Document) -> None:
        """Render a Document: properties, shared definitions, then every paragraph."""
        self._set_document_properties(node)
        self._hyperlink_style_id = self._ensure_hyperlink_style(node)
        self._install_numbering(node.numbering)

        for paragraph in node.paragraphs:
            paragraph.accept(self)

    def _set_document_properties(self, node: Document) -> None:
        core_props = self.document.core_properties
        core_props.title = node.title
        core_props.author = node.creator
        core_props.comments = node.description
        if self.options.creator:
            core_props.last_modified_by = self.options.creator

    def _ensure_hyperlink_style(self, node: Document) -> str:
        """Add (or update) the character style used by hyperlink runs and return its style id."""
        from docx.enum.style import WD_STYLE_TYPE
        from docx.shared import RGBColor

        style_spec = node.hyperlink_style
        styles = self.document.styles
        try:
            style = styles[style_spec.name]
        except KeyError:
            style = styles.add_style(style_spec.name, WD_STYLE_TYPE.CHARACTER)

        if style.type != WD_STYLE_TYPE.CHARACTER:
            logger.warning("Style %r exists but is not a character style", style_spec.name)

        style.font.color.rgb = RGBColor.from_string(style_spec.color.upper())
        style.font.underline = style_spec.underline
        return style.style_id

    # ------------------------------------------------------------------
    # Numbering
    # ------------------------------------------------------------------

    def _numbering_element(self) -> Any:
        from docx.opc.constants import RELATIONSHIP_TYPE as RT

        try:
            return self.document.part.part_related_by(RT.NUMBERING).element
        except (KeyError, NotImplementedError) as e:
            raise RenderingError(
                "Template has no numbering part; list paragraphs cannot be numbered",
                rendering_stage="numbering",
                original_error=e,
            ) from e

    def _install_numbering(self, definitions: tuple[NumberingDefinition, ...]) -> None:
        """Register one abstract numbering and one numbering instance per list kind.

        Every list of a kind shares the same instance, so numbered items
        continue counting across separate lists.
        """
        from docx.oxml.ns import qn

        numbering = self._numbering_element()
        existing_ids = [int(el.get(qn("w:abstractNumId"))) for el in numbering.findall(qn("w:abstractNum"))]
        next_abstract_id = max(existing_ids, default=-1) + 1

        for definition in definitions:
            abstract = self._build_abstract_numbering(next_abstract_id, definition)
            first_num = numbering.find(qn("w:num"))
            if first_num is not None:
                first_num.addprevious(abstract)
            else:
                numbering.append(abstract)

            num = numbering.add_num(next_abstract_id)
            self._numbering[definition.kind] = (definition, num.numId)
            logger.debug(
                "Registered %s numbering (abstractNumId=%d, numId=%d)",
                definition.kind.value,
                next_abstract_id,
                num.numId,
            )
            next_abstract_id += 1

    @staticmethod
    def _build_abstract_numbering(abstract_id: int, definition: NumberingDefinition) -> Any:
        from docx.oxml import OxmlElement
        from docx.oxml.ns import qn

        def element(tag: str, **attrs: str) -> Any:
            el = OxmlElement(tag)
            for name, value in attrs.items():
                el.set(qn(f"w:{name}"), value)
            return el

        abstract = element("w:abstractNum", abstractNumId=str(abstract_id))
        abstract.append(element("w:multiLevelType", val="hybridMultilevel"))

        for level, level_text in enumerate(definition.level_texts):
            lvl = element("w:lvl", ilvl=str(level))
            lvl.append(element("w:start", val="1"))
            lvl.append(element("w:numFmt", val=_NUMBER_FORMATS[definition.kind]))
            lvl.append(element("w:lvlText", val=level_text))
            lvl.append(element("w:lvlJc", val="left"))

            p_pr = element("w:pPr")
            p_pr.append(
                element(
                    "w:ind",
                    left=str(QUOTE_INDENT_TWIPS * (level + 1)),
                    hanging=str(LIST_LEVEL_HANGING_TWIPS),
                )
            )
            lvl.append(p_pr)
            abstract.append(lvl)

        return abstract

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph with its style, layout and inline children."""
        from docx.shared import Twips

        paragraph = self.document.add_paragraph()

        if node.heading is not None:
            self._apply_style(paragraph, HEADING_STYLE_TEMPLATE.format(level=node.heading))
        elif node.list_info is not None:
            self._apply_style(paragraph, LIST_PARAGRAPH_STYLE)

        if node.alignment is not None:
            paragraph.alignment = self._alignment(node.alignment)
        if node.indent:
            paragraph.paragraph_format.left_indent = Twips(node.indent)
        if node.list_info is not None:
            self._apply_numbering(paragraph, node.list_info)

        self._current_paragraph = paragraph
        for child in node.children:
            child.accept(self)
        self._current_paragraph = None

    def _apply_style(self, paragraph: DocxParagraph, style_name: str) -> None:
        try:
            paragraph.style = self.document.styles[style_name]
        except KeyError:
            logger.debug("Style %r not available in template, keeping paragraph default", style_name)

    @staticmethod
    def _alignment(alignment: Alignment) -> Any:
        from docx.enum.text import WD_ALIGN_PARAGRAPH

        return {
            Alignment.START: WD_ALIGN_PARAGRAPH.LEFT,
            Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
            Alignment.END: WD_ALIGN_PARAGRAPH.RIGHT,
            Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
        }[alignment]

    def _apply_numbering(self, paragraph: DocxParagraph, list_info: ListInfo) -> None:
        definition, num_id = self._numbering[list_info.kind]

        num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
        # Levels beyond the defined ones reuse the deepest level
        num_pr.get_or_add_ilvl().val = definition.level_for(list_info.level)
        num_pr.get_or_add_numId().val = num_id

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def visit_run(self, node: Run) -> None:
        """Render a styled text Run into the current paragraph."""
        from docx.shared import Pt

        if self._current_paragraph is None or not node.text:
            return

        run = self._current_paragraph.add_run(node.text)
        if node.bold:
            run.bold = True
        if node.italic:
            run.italic = True
        if node.size is not None:
            run.font.size = Pt(node.size)

    def visit_hyperlink_run(self, node: HyperlinkRun) -> None:
        """Render a HyperlinkRun as an external hyperlink in the current paragraph."""
        if self._current_paragraph is None:
            return
        self._add_hyperlink(self._current_paragraph, node.url, node.text, node.size)

    def _add_hyperlink(self, paragraph: DocxParagraph, url: str, text: str, size: int | None) -> None:
        """Append a ``w:hyperlink`` element referencing an external relationship.

        python-docx has no public API for creating hyperlinks, so the OOXML
        is assembled directly.
        """
        from docx.oxml import OxmlElement
        from docx.oxml.ns import qn

        r_id = paragraph.part.relate_to(url, HYPERLINK_RELATIONSHIP, is_external=True)

        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("r:id"), r_id)

        new_run = OxmlElement("w:r")
        r_pr = OxmlElement("w:rPr")

        r_style = OxmlElement("w:rStyle")
        r_style.set(qn("w:val"), self._hyperlink_style_id or "Hyperlink")
        r_pr.append(r_style)

        if size is not None:
            half_points = str(size * 2)
            sz = OxmlElement("w:sz")
            sz.set(qn("w:val"), half_points)
            r_pr.append(sz)
            sz_cs = OxmlElement("w:szCs")
            sz_cs.set(qn("w:val"), half_points)
            r_pr.append(sz_cs)

        new_run.append(r_pr)

        t = OxmlElement("w:t")
        t.set(qn("xml:space"), "preserve")
        t.text = text
        new_run.append(t)

        hyperlink.append(new_run)
        paragraph._p.append(hyperlink)
