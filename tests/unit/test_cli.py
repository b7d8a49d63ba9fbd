#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Unit tests for the command-line interface."""

import argparse
import json
from io import StringIO
from unittest.mock import patch

import docx
import pytest

from richdocx.cli import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    add_option_argument,
    get_exit_code_for_exception,
    main,
)
from richdocx.exceptions import (
    DependencyError,
    OutputWriteError,
    ParsingError,
    RenderingError,
    TransportError,
    ValidationError,
)
from richdocx.options import DocxRendererOptions, ExportOptions, TransportOptions


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("richdocx.logging_utils.configure_logging"):
        yield


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text('<h1>Title</h1><ul><li>One</li></ul><p>See <a href="https://example.com">docs</a></p>')
    return path


@pytest.mark.cli
@pytest.mark.unit
class TestExitCodes:
    """Tests for exception to exit code mapping."""

    @pytest.mark.parametrize(
        ("exception", "expected"),
        [
            (DependencyError("docx", [("python-docx", ">=1.2.0")]), EXIT_DEPENDENCY_ERROR),
            (ImportError("x"), EXIT_DEPENDENCY_ERROR),
            (ValidationError("bad"), EXIT_VALIDATION_ERROR),
            (OutputWriteError("out.docx"), EXIT_FILE_ERROR),
            (FileNotFoundError("in.html"), EXIT_FILE_ERROR),
            (ParsingError("bad docx"), EXIT_PARSING_ERROR),
            (RenderingError("broken"), EXIT_RENDERING_ERROR),
            (TransportError("HTTP 500"), EXIT_ERROR),
            (RuntimeError("other"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, exception, expected):
        """Test the exit code for each error category."""
        assert get_exit_code_for_exception(exception) == expected


@pytest.mark.cli
@pytest.mark.unit
class TestExportCommand:
    """Tests for the export command."""

    def test_export_default_output(self, html_file):
        """Test that the output defaults to the input name with .docx."""
        assert main(["export", str(html_file), "--title", "T", "--author", "A"]) == EXIT_SUCCESS
        result = docx.Document(str(html_file.with_suffix(".docx")))
        assert [p.text for p in result.paragraphs] == ["Title", "One", "See docs"]
        assert result.core_properties.title == "T"

    def test_export_explicit_output(self, html_file, tmp_path):
        """Test the -o option."""
        target = tmp_path / "custom.docx"
        assert main(["export", str(html_file), "-o", str(target)]) == EXIT_SUCCESS
        assert target.read_bytes()[:2] == b"PK"

    def test_export_empty_title(self, html_file, capsys):
        """Test that invalid metadata exits with the validation code."""
        assert main(["export", str(html_file), "--title", ""]) == EXIT_VALIDATION_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_export_missing_input(self, tmp_path):
        """Test that a missing input file exits with the file code."""
        assert main(["export", str(tmp_path / "missing.html")]) == EXIT_FILE_ERROR

    def test_export_unwritable_output(self, html_file, tmp_path):
        """Test that an unwritable destination exits with the file code."""
        target = tmp_path / "missing" / "out.docx"
        assert main(["export", str(html_file), "-o", str(target)]) == EXIT_FILE_ERROR

    def test_export_missing_template(self, html_file, tmp_path):
        """Test that a broken template exits with the rendering code."""
        code = main(["export", str(html_file), "--template", str(tmp_path / "none.docx")])
        assert code == EXIT_RENDERING_ERROR


@pytest.mark.cli
@pytest.mark.unit
class TestOtherCommands:
    """Tests for the sanitize, inspect and import commands."""

    def test_sanitize_stdin(self, capsys):
        """Test sanitizing HTML read from stdin."""
        with patch("sys.stdin", StringIO('<div onclick="x()">Hi <b>there</b></div>')):
            assert main(["sanitize", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "Hi <b>there</b>\n"

    def test_sanitize_to_file(self, html_file, tmp_path):
        """Test writing sanitized HTML to a file."""
        target = tmp_path / "clean.html"
        assert main(["sanitize", str(html_file), "-o", str(target)]) == EXIT_SUCCESS
        assert target.read_text().startswith("<h1>Title</h1><ul><li>One</li></ul>")

    def test_inspect(self, html_file, capsys):
        """Test that inspect prints the paragraph model."""
        assert main(["inspect", str(html_file)]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "H1" in out
        assert "bulleted:0" in out
        assert "https://example.com" in out

    @pytest.mark.parametrize(("flags", "expected_size"), [([], False), (["--no-sanitize"], True)])
    def test_inspect_sanitize_switch(self, tmp_path, capsys, flags, expected_size):
        """Test that --no-sanitize keeps inline font sizes in the inspected model."""
        path = tmp_path / "sized.html"
        path.write_text('<p><span style="font-size:24px">Big</span></p>')
        assert main(["inspect", str(path), *flags]) == EXIT_SUCCESS
        assert ("18pt" in capsys.readouterr().out) is expected_size

    def test_import_local(self, tmp_path, capsys):
        """Test importing a DOCX file without the remote service."""
        document = docx.Document()
        document.core_properties.title = "Imported"
        document.core_properties.author = ""
        document.add_heading("Head", level=1)
        document.add_paragraph("Body")
        source = tmp_path / "in.docx"
        document.save(str(source))

        assert main(["import", str(source), "--author", "Ada"]) == EXIT_SUCCESS
        payload = json.loads(capsys.readouterr().out)
        assert payload == {
            "html": "<h1>Head</h1><p>Body</p>",
            "metadata": {"title": "Imported", "author": "Ada"},
            "messages": [],
        }

    def test_import_invalid_docx(self, tmp_path):
        """Test that an unreadable package exits with the parsing code."""
        source = tmp_path / "broken.docx"
        source.write_bytes(b"not a zip")
        assert main(["import", str(source)]) == EXIT_PARSING_ERROR

    def test_import_remote_failure(self, tmp_path, capsys):
        """Test that import service failures are reported."""
        source = tmp_path / "in.docx"
        source.write_bytes(b"data")

        async def failing_import(self, source, filename=None):
            raise TransportError("HTTP 500 - boom", status_code=500, body="boom")

        with patch("richdocx.transport.ImportClient.import_docx", failing_import):
            code = main(["import", str(source), "--remote", "http://import.test"])

        assert code == EXIT_ERROR
        assert "HTTP 500 - boom" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test the --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "richdocx" in capsys.readouterr().out


@pytest.mark.cli
@pytest.mark.unit
class TestOptionArguments:
    """Tests for arguments derived from options dataclass fields."""

    def test_flag_help_and_type_from_metadata(self):
        """Test that cli_name, help and type come from the field metadata."""
        parser = argparse.ArgumentParser()
        action = add_option_argument(parser, DocxRendererOptions, "default_font_size")

        assert action.option_strings == ["--font-size"]
        assert action.help == "Default font size in points"
        assert parser.parse_args(["--font-size", "14"]).default_font_size == 14
        assert parser.parse_args([]).default_font_size == 11

    def test_true_default_becomes_negating_switch(self):
        """Test that a field defaulting to True is turned off by its flag."""
        parser = argparse.ArgumentParser()
        add_option_argument(parser, ExportOptions, "sanitize_input")

        assert parser.parse_args([]).sanitize_input is True
        assert parser.parse_args(["--no-sanitize"]).sanitize_input is False

    def test_flag_name_defaults_to_field_name(self):
        """Test kebab-case flags for fields without a cli_name."""
        parser = argparse.ArgumentParser()
        action = add_option_argument(parser, ExportOptions, "hyperlink_color", help="Override")

        assert action.option_strings == ["--hyperlink-color"]
        assert action.help == "Override"
        assert action.default == "0000EE"

    def test_timeout_default_from_options(self):
        """Test that the import timeout default matches TransportOptions."""
        parser = argparse.ArgumentParser()
        add_option_argument(parser, TransportOptions, "timeout")
        assert parser.parse_args([]).timeout == TransportOptions().timeout
        assert parser.parse_args(["--timeout", "2.5"]).timeout == 2.5

    def test_export_help_lists_option_fields(self, capsys):
        """Test that export --help shows the option field descriptions."""
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--help"])
        assert exc_info.value.code == 0

        help_text = capsys.readouterr().out
        for expected in ("--template", "--font", "--font-size", "--no-sanitize", "Hyperlink colour as RGB hex"):
            assert expected in help_text

    def test_export_font_options(self, html_file, tmp_path):
        """Test that renderer options given on the command line reach the document."""
        target = tmp_path / "fonts.docx"
        args = ["export", str(html_file), "-o", str(target), "--font", "Arial", "--font-size", "14"]
        assert main(args) == EXIT_SUCCESS

        font = docx.Document(str(target)).styles["Normal"].font
        assert font.name == "Arial"
        assert font.size.pt == 14

    def test_export_description_option(self, html_file, tmp_path):
        """Test the --description flag."""
        target = tmp_path / "described.docx"
        assert main(["export", str(html_file), "-o", str(target), "--description", "Meeting notes"]) == EXIT_SUCCESS
        assert docx.Document(str(target)).core_properties.comments == "Meeting notes"
