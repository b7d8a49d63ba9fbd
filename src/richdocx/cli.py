#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/cli.py
"""Command-line interface for richdocx.

The commands mirror the editor's actions and are meant for checking what an
export or import would produce.

Examples
--------
Export editor HTML::

    $ richdocx export page.html --title "Report" --author "Ada" -o report.docx

Sanitize HTML from stdin::

    $ echo '<div onclick="x()">Hi</div>' | richdocx sanitize -

Show the paragraph model::

    $ richdocx inspect page.html

Import a DOCX locally or through the import service::

    $ richdocx import report.docx
    $ richdocx import report.docx --remote http://127.0.0.1:8000

"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any

from richdocx.exceptions import (
    DependencyError,
    OutputWriteError,
    ParsingError,
    RenderingError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code."""
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, (OutputWriteError, OSError)):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_text(text: str, destination: str | None) -> None:
    if destination:
        Path(destination).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")


def _export_options(parsed_args: argparse.Namespace) -> Any:
    from richdocx.options import DocxRendererOptions, ExportOptions

    values = vars(parsed_args)
    export_names = ("sanitize_input", "description", "hyperlink_color")
    renderer_names = ("default_font", "default_font_size", "template_path")
    renderer = DocxRendererOptions(**{name: values[name] for name in renderer_names if name in values})
    return ExportOptions(renderer=renderer, **{name: values[name] for name in export_names if name in values})


def _default_output(source: str) -> str:
    if source == "-":
        return "document.docx"
    return str(Path(source).with_suffix(".docx"))


def cmd_export(parsed_args: argparse.Namespace) -> int:
    """Export an HTML file to DOCX."""
    from richdocx.api import export_docx
    from richdocx.metadata import DocumentMeta

    meta = DocumentMeta(title=parsed_args.title, author=parsed_args.author)
    html_content = _read_text(parsed_args.input)
    output = parsed_args.output or _default_output(parsed_args.input)

    data = export_docx(html_content, meta, _export_options(parsed_args), output=output)
    logger.info("Wrote %s (%d bytes)", output, len(data))
    return EXIT_SUCCESS


def cmd_sanitize(parsed_args: argparse.Namespace) -> int:
    """Print the sanitized form of an HTML file."""
    from richdocx.sanitizer import sanitize_html

    _write_text(sanitize_html(_read_text(parsed_args.input)), parsed_args.output)
    return EXIT_SUCCESS


def _describe_inline(node: Any) -> str:
    from richdocx.model import HyperlinkRun

    details = []
    if getattr(node, "bold", False):
        details.append("bold")
    if getattr(node, "italic", False):
        details.append("italic")
    if node.size is not None:
        details.append(f"{node.size}pt")

    description = repr(node.text)
    if details:
        description += f" [{', '.join(details)}]"
    if isinstance(node, HyperlinkRun):
        description += f" -> {node.url}"
    return description


def cmd_inspect(parsed_args: argparse.Namespace) -> int:
    """Print the paragraph model an export would contain."""
    from rich.console import Console
    from rich.table import Table

    from richdocx.api import html_to_paragraphs

    paragraphs = html_to_paragraphs(_read_text(parsed_args.input), _export_options(parsed_args))

    table = Table(title="Paragraphs")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Heading", style="magenta")
    table.add_column("List", style="yellow")
    table.add_column("Indent", justify="right")
    table.add_column("Align")
    table.add_column("Runs", style="cyan", no_wrap=False)

    for index, paragraph in enumerate(paragraphs, start=1):
        list_info = paragraph.list_info
        runs = [_describe_inline(child) for child in paragraph.children]
        table.add_row(
            str(index),
            f"H{paragraph.heading}" if paragraph.heading else "",
            f"{list_info.kind.value}:{list_info.level}" if list_info else "",
            str(paragraph.indent or ""),
            paragraph.alignment.value if paragraph.alignment else "",
            "\n".join(runs),
        )

    Console().print(table)
    return EXIT_SUCCESS


def cmd_import(parsed_args: argparse.Namespace) -> int:
    """Convert a DOCX file into sanitized editor HTML and metadata."""
    from richdocx.api import apply_import_response
    from richdocx.metadata import DocumentMeta

    if parsed_args.remote:
        from richdocx.options import TransportOptions
        from richdocx.transport import ImportClient

        client = ImportClient(TransportOptions(base_url=parsed_args.remote, timeout=parsed_args.timeout))
        response = asyncio.run(client.import_docx(parsed_args.input))
    else:
        from richdocx.parsers.docx import DocxToHtmlParser

        response = DocxToHtmlParser().parse(parsed_args.input)

    html, meta = apply_import_response(response, DocumentMeta(title=parsed_args.title, author=parsed_args.author))
    payload = {"html": html, "metadata": meta.to_dict(), "messages": [str(m) for m in response.messages]}
    _write_text(json.dumps(payload, indent=2, ensure_ascii=False), parsed_args.output)
    return EXIT_SUCCESS


def add_option_argument(
    parser: argparse.ArgumentParser, options_class: type, field_name: str, **overrides: Any
) -> argparse.Action:
    """Add a ``--flag`` described by a field of an options dataclass.

    The flag name comes from the field's ``cli_name`` metadata (or the field
    name in kebab case), the help text from ``help`` and the argument type
    from ``type``. The field default becomes the argument default; a boolean
    field that defaults to True becomes a ``store_false`` switch.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parser or sub-parser receiving the argument
    options_class : type
        Options dataclass declaring the field
    field_name : str
        Name of the field, also used as the argument's ``dest``
    **overrides
        Keyword arguments passed to ``add_argument`` as-is

    Returns
    -------
    argparse.Action
        The added action

    """
    option = {f.name: f for f in fields(options_class)}[field_name]
    metadata = option.metadata

    kwargs: dict[str, Any] = {"dest": field_name, "help": metadata.get("help", f"Configure {field_name}")}
    if option.default is True:
        kwargs["action"] = "store_false"
    else:
        if metadata.get("type") in (int, float):
            kwargs["type"] = metadata["type"]
        if option.default is not MISSING:
            kwargs["default"] = option.default
    kwargs.update(overrides)

    cli_name = metadata.get("cli_name", field_name.replace("_", "-"))
    return parser.add_argument(f"--{cli_name}", **kwargs)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per editor action."""
    from richdocx import __version__
    from richdocx.constants import DEFAULT_API_BASE, DEFAULT_DOCUMENT_AUTHOR, DEFAULT_DOCUMENT_TITLE
    from richdocx.options import DocxRendererOptions, ExportOptions, TransportOptions

    parser = argparse.ArgumentParser(
        prog="richdocx",
        description="Convert rich-text editor HTML to DOCX and back.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--trace", action="store_true", help="Include timestamps and logger names in log output")
    parser.add_argument("--rich", action="store_true", help="Render log output with rich")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export an HTML file to DOCX")
    export_parser.add_argument("input", help="HTML file ('-' for stdin)")
    export_parser.add_argument("-o", "--output", help="Output .docx path (default: input name with .docx)")
    export_parser.add_argument("--title", default=DEFAULT_DOCUMENT_TITLE, help="Document title")
    export_parser.add_argument("--author", default=DEFAULT_DOCUMENT_AUTHOR, help="Document author")
    for name in ("template_path", "default_font", "default_font_size"):
        add_option_argument(export_parser, DocxRendererOptions, name)
    for name in ("sanitize_input", "description", "hyperlink_color"):
        add_option_argument(export_parser, ExportOptions, name)
    export_parser.set_defaults(handler=cmd_export)

    sanitize_parser = subparsers.add_parser("sanitize", help="Print sanitized HTML")
    sanitize_parser.add_argument("input", help="HTML file ('-' for stdin)")
    sanitize_parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    sanitize_parser.set_defaults(handler=cmd_sanitize)

    inspect_parser = subparsers.add_parser("inspect", help="Show the paragraph model of an HTML file")
    inspect_parser.add_argument("input", help="HTML file ('-' for stdin)")
    add_option_argument(inspect_parser, ExportOptions, "sanitize_input", help="Inspect the HTML as-is")
    inspect_parser.set_defaults(handler=cmd_inspect)

    import_parser = subparsers.add_parser("import", help="Convert a DOCX file to editor HTML and metadata (JSON)")
    import_parser.add_argument("input", help="DOCX file")
    import_parser.add_argument("-o", "--output", help="Write JSON to this file instead of stdout")
    import_parser.add_argument(
        "--remote",
        nargs="?",
        const=DEFAULT_API_BASE,
        help=f"Use the import service at this base URL (default when given without value: {DEFAULT_API_BASE})",
    )
    add_option_argument(import_parser, TransportOptions, "timeout")
    import_parser.add_argument("--title", default=DEFAULT_DOCUMENT_TITLE, help="Current title kept if none is imported")
    import_parser.add_argument(
        "--author", default=DEFAULT_DOCUMENT_AUTHOR, help="Current author kept if none is imported"
    )
    import_parser.set_defaults(handler=cmd_import)

    return parser


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return its exit code."""
    from richdocx.logging_utils import configure_logging

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(
        parsed_args.log_level, parsed_args.log_file, trace_mode=parsed_args.trace, use_rich=parsed_args.rich
    )

    try:
        return parsed_args.handler(parsed_args)
    except Exception as e:
        exit_code = get_exit_code_for_exception(e)
        if parsed_args.trace:
            logger.exception("Command %r failed", parsed_args.command)
        print(f"Error: {e}", file=sys.stderr)
        return exit_code


if __name__ == "__main__":
    sys.exit(main())
