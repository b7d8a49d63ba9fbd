#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_transport.py
"""Unit tests for the remote DOCX import client.

All requests go through ``httpx.MockTransport``; nothing touches the network.
"""

import asyncio
import json
import threading
from io import BytesIO

import httpx
import pytest

from richdocx.api import ImportResponse
from richdocx.constants import DOCX_MIME_TYPE
from richdocx.exceptions import TransportError
from richdocx.options import TransportOptions
from richdocx.transport import ImportClient


def _client(handler, base_url="http://import.test"):
    return ImportClient(TransportOptions(base_url=base_url), transport=httpx.MockTransport(handler))


def _import(client, source=b"PK\x03\x04fake", **kwargs):
    return asyncio.run(client.import_docx(source, **kwargs))


@pytest.mark.unit
class TestImportClient:
    """Tests for successful uploads."""

    def test_posts_multipart_upload(self):
        """Test the request method, URL and multipart file field."""
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(200, json={"html": "<p>Hi</p>"})

        _import(_client(handler), b"DOCXBYTES", filename="report.docx")

        assert seen["method"] == "POST"
        assert seen["url"] == "http://import.test/docx/import"
        assert seen["content_type"].startswith("multipart/form-data")
        assert b'name="file"; filename="report.docx"' in seen["body"]
        assert DOCX_MIME_TYPE.encode() in seen["body"]
        assert b"DOCXBYTES" in seen["body"]

    def test_trailing_slash_in_base_url(self):
        """Test that the import path is joined without doubling slashes."""
        client = ImportClient(TransportOptions(base_url="http://import.test/"))
        assert client.import_url == "http://import.test/docx/import"

    def test_parses_response(self):
        """Test that the JSON body becomes an ImportResponse."""
        payload = {"html": "<h1>T</h1>", "metadata": {"title": "T"}, "messages": ["note"]}
        response = _import(_client(lambda request: httpx.Response(200, json=payload)))
        assert response == ImportResponse(html="<h1>T</h1>", metadata={"title": "T"}, messages=("note",))

    def test_lenient_response_members(self):
        """Test that wrongly typed members are treated as absent."""
        payload = {"html": 5, "metadata": "nope", "messages": "x"}
        response = _import(_client(lambda request: httpx.Response(200, json=payload)))
        assert response == ImportResponse()

    def test_upload_from_path_uses_file_name(self, tmp_path):
        """Test that a path source sends its own file name."""
        source = tmp_path / "notes.docx"
        source.write_bytes(b"data")
        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={"html": ""})

        _import(_client(handler), source)
        assert b'filename="notes.docx"' in bodies[0]

    def test_upload_from_stream(self):
        """Test uploading from a binary stream."""
        bodies = []

        def handler(request):
            bodies.append(request.content)
            return httpx.Response(200, json={})

        _import(_client(handler), BytesIO(b"streamed"))
        assert b"streamed" in bodies[0]
        assert b'filename="document.docx"' in bodies[0]

    def test_upload_read_off_event_loop(self, monkeypatch):
        """Test that the upload is read in a worker thread, not on the event loop."""
        from richdocx import transport

        read_threads = []
        original_read = transport._read_upload

        def recording_read(source, filename):
            read_threads.append(threading.current_thread())
            return original_read(source, filename)

        monkeypatch.setattr(transport, "_read_upload", recording_read)
        _import(_client(lambda request: httpx.Response(200, json={})))

        assert len(read_threads) == 1
        assert read_threads[0] is not threading.main_thread()


@pytest.mark.unit
class TestImportErrors:
    """Tests for failure reporting."""

    def test_error_status_with_body(self):
        """Test the message for an error response with a body."""
        client = _client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(TransportError) as exc_info:
            _import(client)
        assert str(exc_info.value) == "HTTP 500 - boom"
        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "boom"

    def test_error_status_without_body(self):
        """Test the message for an error response with an empty body."""
        client = _client(lambda request: httpx.Response(404))
        with pytest.raises(TransportError) as exc_info:
            _import(client)
        assert str(exc_info.value) == "HTTP 404"
        assert exc_info.value.status_code == 404

    def test_network_failure(self):
        """Test that connection errors carry no status."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            _import(_client(handler))
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    def test_invalid_json(self):
        """Test that a non-JSON success body is rejected."""
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(TransportError, match="invalid JSON"):
            _import(client)

    def test_non_object_json(self):
        """Test that a JSON body that is not an object is rejected."""
        client = _client(lambda request: httpx.Response(200, content=json.dumps(["x"]).encode()))
        with pytest.raises(TransportError) as exc_info:
            _import(client)
        assert exc_info.value.status_code == 200

    def test_missing_upload_file(self, tmp_path):
        """Test that an unreadable source fails before any request."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(TransportError):
            _import(_client(handler), tmp_path / "missing.docx")
        assert requests == []

    def test_read_failure_keeps_original_error(self, tmp_path):
        """Test that the OS error is attached to the transport error."""
        with pytest.raises(TransportError) as exc_info:
            _import(_client(lambda request: httpx.Response(200, json={})), tmp_path / "missing.docx")
        assert isinstance(exc_info.value.original_error, FileNotFoundError)
