#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_docx_reader.py
"""Unit tests for the DOCX to editor HTML reader."""

from io import BytesIO

import docx
import pytest
from docx.enum.text import WD_ALIGN_PARAGRAPH

from richdocx.exceptions import ParsingError
from richdocx.metadata import DocumentMeta
from richdocx.model import Document, HyperlinkRun, ListInfo, ListKind, Paragraph, Run
from richdocx.parsers.docx import DocxToHtmlParser, docx_to_html
from richdocx.renderers.docx import DocxRenderer


def _save(document) -> bytes:
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _exported(*paragraphs) -> bytes:
    return DocxRenderer().render_to_bytes(Document(creator="Ada", title="Report", paragraphs=list(paragraphs)))


@pytest.mark.unit
class TestBlocks:
    """Tests for headings and paragraphs."""

    def test_headings_and_paragraphs(self):
        """Test heading styles and body paragraphs."""
        document = docx.Document()
        document.add_heading("Title", level=1)
        document.add_heading("Sub", level=3)
        document.add_paragraph("Body")
        assert docx_to_html(_save(document)).html == "<h1>Title</h1><h3>Sub</h3><p>Body</p>"

    def test_deeper_headings_are_paragraphs(self):
        """Test that heading levels beyond 3 become paragraphs."""
        document = docx.Document()
        document.add_heading("Deep", level=4)
        assert docx_to_html(_save(document)).html == "<p>Deep</p>"

    def test_empty_paragraph(self):
        """Test that empty paragraphs keep a line break."""
        document = docx.Document()
        document.add_paragraph("")
        assert docx_to_html(_save(document)).html == "<p><br/></p>"

    def test_alignment(self):
        """Test that paragraph alignment becomes text-align."""
        document = docx.Document()
        document.add_paragraph("c").alignment = WD_ALIGN_PARAGRAPH.CENTER
        assert docx_to_html(_save(document)).html == '<p style="text-align:center">c</p>'


@pytest.mark.unit
class TestInlines:
    """Tests for run formatting, hyperlinks and breaks."""

    def test_bold_and_italic(self):
        """Test strong/em output."""
        document = docx.Document()
        paragraph = document.add_paragraph("a ")
        paragraph.add_run("b").bold = True
        paragraph.add_run("c").italic = True
        both = paragraph.add_run("d")
        both.bold = True
        both.italic = True
        html = docx_to_html(_save(document)).html
        assert html == "<p>a <strong>b</strong><em>c</em><strong><em>d</em></strong></p>"

    def test_adjacent_runs_merged(self):
        """Test that neighbouring runs with equal formatting share one element."""
        document = docx.Document()
        paragraph = document.add_paragraph()
        paragraph.add_run("one ").bold = True
        paragraph.add_run("two").bold = True
        assert docx_to_html(_save(document)).html == "<p><strong>one two</strong></p>"

    def test_line_break(self):
        """Test that run line breaks become br elements."""
        document = docx.Document()
        document.add_paragraph("a\nb")
        assert docx_to_html(_save(document)).html == "<p>a<br/>b</p>"

    def test_hyperlink(self):
        """Test that exported hyperlinks are read back as anchors."""
        data = _exported(Paragraph(children=[Run("See "), HyperlinkRun("docs", "https://example.com")]))
        assert docx_to_html(data).html == '<p>See <a href="https://example.com">docs</a></p>'

    def test_text_is_escaped(self):
        """Test that markup characters in text are escaped."""
        document = docx.Document()
        document.add_paragraph("a < b & c")
        assert docx_to_html(_save(document)).html == "<p>a &lt; b &amp; c</p>"


@pytest.mark.unit
class TestLists:
    """Tests for list reconstruction."""

    def test_exported_nested_list(self):
        """Test that exported list levels nest under the previous item."""
        data = _exported(
            Paragraph(children=[Run("T")], heading=1),
            Paragraph(children=[Run("A")], list_info=ListInfo(ListKind.BULLETED, 0)),
            Paragraph(children=[Run("B")], list_info=ListInfo(ListKind.BULLETED, 1)),
        )
        assert docx_to_html(data).html == "<h1>T</h1><ul><li>A<ul><li>B</li></ul></li></ul>"

    def test_exported_numbered_list(self):
        """Test that decimal numbering becomes an ordered list."""
        data = _exported(
            Paragraph(children=[Run("1")], list_info=ListInfo(ListKind.NUMBERED, 0)),
            Paragraph(children=[Run("2")], list_info=ListInfo(ListKind.NUMBERED, 0)),
        )
        assert docx_to_html(data).html == "<ol><li>1</li><li>2</li></ol>"

    def test_mixed_kinds_in_one_list(self):
        """Test that a nested list can change kind."""
        data = _exported(
            Paragraph(children=[Run("n")], list_info=ListInfo(ListKind.NUMBERED, 0)),
            Paragraph(children=[Run("b")], list_info=ListInfo(ListKind.BULLETED, 1)),
            Paragraph(children=[Run("m")], list_info=ListInfo(ListKind.NUMBERED, 0)),
        )
        assert docx_to_html(data).html == "<ol><li>n<ul><li>b</li></ul></li><li>m</li></ol>"

    def test_kind_change_on_same_level_starts_new_list(self):
        """Test that switching kind at one level closes the previous list."""
        data = _exported(
            Paragraph(children=[Run("b")], list_info=ListInfo(ListKind.BULLETED, 0)),
            Paragraph(children=[Run("n")], list_info=ListInfo(ListKind.NUMBERED, 0)),
        )
        assert docx_to_html(data).html == "<ul><li>b</li></ul><ol><li>n</li></ol>"

    def test_paragraph_closes_lists(self):
        """Test that a non-list paragraph ends the open lists."""
        data = _exported(
            Paragraph(children=[Run("a")], list_info=ListInfo(ListKind.BULLETED, 0)),
            Paragraph(children=[Run("p")]),
            Paragraph(children=[Run("b")], list_info=ListInfo(ListKind.BULLETED, 0)),
        )
        assert docx_to_html(data).html == "<ul><li>a</li></ul><p>p</p><ul><li>b</li></ul>"

    def test_level_jump_creates_empty_items(self):
        """Test that skipping levels creates intermediate items."""
        data = _exported(Paragraph(children=[Run("deep")], list_info=ListInfo(ListKind.BULLETED, 1)))
        assert docx_to_html(data).html == "<ul><li><ul><li>deep</li></ul></li></ul>"

    def test_heading_list_item(self):
        """Test the heading-in-list markup."""
        data = _exported(Paragraph(children=[Run("H")], heading=2, list_info=ListInfo(ListKind.NUMBERED, 0)))
        assert docx_to_html(data).html == '<ol><li data-heading="2"><span class="li-text">H</span></li></ol>'

    def test_list_styles_without_numbering(self):
        """Test the style-name fallback used by documents from other tools."""
        document = docx.Document()
        document.add_paragraph("a", style="List Bullet")
        document.add_paragraph("b", style="List Number 2")
        assert docx_to_html(_save(document)).html == "<ul><li>a<ol><li>b</li></ol></li></ul>"


@pytest.mark.unit
class TestResponse:
    """Tests for metadata, messages and input handling."""

    def test_metadata_from_core_properties(self):
        """Test that title and author are reported."""
        document = docx.Document()
        document.core_properties.title = "Report"
        document.core_properties.author = "Ada"
        response = DocxToHtmlParser().parse(_save(document))
        assert response.metadata == {"title": "Report", "author": "Ada"}

    def test_empty_title_omitted(self):
        """Test that empty properties are not reported."""
        document = docx.Document()
        document.core_properties.title = ""
        document.core_properties.author = "Ada"
        assert DocxToHtmlParser().parse(_save(document)).metadata == {"author": "Ada"}

    def test_exported_metadata_round_trip(self):
        """Test that exported metadata is read back."""
        data = DocxRenderer().render_to_bytes(Document(creator="Ada Lovelace", title="Notes", paragraphs=[Paragraph()]))
        meta = DocumentMeta(**DocxToHtmlParser().parse(data).metadata)
        assert meta == DocumentMeta(title="Notes", author="Ada Lovelace")

    def test_tables_reported(self):
        """Test that skipped tables produce a message."""
        document = docx.Document()
        document.add_paragraph("before")
        document.add_table(rows=1, cols=1)
        response = DocxToHtmlParser().parse(_save(document))
        assert response.html == "<p>before</p>"
        assert len(response.messages) == 1
        assert "table" in response.messages[0]

    def test_no_messages_without_tables(self):
        """Test the message list for a plain document."""
        document = docx.Document()
        document.add_paragraph("x")
        assert DocxToHtmlParser().parse(_save(document)).messages == ()

    def test_path_and_stream_input(self, tmp_path):
        """Test reading from a path and from a stream."""
        document = docx.Document()
        document.add_paragraph("x")
        data = _save(document)
        path = tmp_path / "in.docx"
        path.write_bytes(data)

        assert docx_to_html(path).html == "<p>x</p>"
        assert docx_to_html(str(path)).html == "<p>x</p>"
        assert docx_to_html(BytesIO(data)).html == "<p>x</p>"

    def test_invalid_package(self):
        """Test that unreadable input raises ParsingError."""
        with pytest.raises(ParsingError) as exc_info:
            DocxToHtmlParser().parse(b"not a zip")
        assert exc_info.value.parsing_stage == "document_opening"
