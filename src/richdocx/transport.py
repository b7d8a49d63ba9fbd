#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/transport.py
"""Client for the remote DOCX import service.

The service accepts a multipart upload with a single ``file`` field at
``POST /docx/import`` and answers with ``{html, metadata?, messages?}``.
Requests are made once; there are no retries.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from io import BytesIO
from pathlib import Path
from typing import IO, Any, Union

from richdocx.api import ImportResponse
from richdocx.constants import DEPS_NETWORK, DOCX_IMPORT_PATH, DOCX_MIME_TYPE
from richdocx.exceptions import TransportError, ValidationError
from richdocx.options import TransportOptions
from richdocx.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_DEFAULT_FILENAME = "document.docx"


def _read_upload(source: Union[str, Path, IO[bytes], bytes], filename: str | None) -> tuple[str, bytes]:
    if isinstance(source, (str, Path)):
        path = Path(source)
        return filename or path.name, path.read_bytes()
    if isinstance(source, (bytes, bytearray)):
        return filename or _DEFAULT_FILENAME, bytes(source)
    return filename or Path(getattr(source, "name", _DEFAULT_FILENAME)).name, source.read()


def _error_message(status_code: int, body: str) -> str:
    return f"HTTP {status_code} - {body}" if body else f"HTTP {status_code}"


class ImportClient:
    """Upload DOCX files to the import service.

    Parameters
    ----------
    options : TransportOptions or None
        Base URL and timeout
    transport : httpx.AsyncBaseTransport or None
        Custom transport, e.g. ``httpx.MockTransport`` in tests

    Examples
    --------
        >>> client = ImportClient(TransportOptions(base_url="http://localhost:8000"))
        >>> response = asyncio.run(client.import_docx("report.docx"))
        >>> response.metadata
        {'title': 'Report'}

    """

    def __init__(self, options: TransportOptions | None = None, *, transport: Any = None):
        self.options = options or TransportOptions()
        self._transport = transport

    @property
    def import_url(self) -> str:
        return self.options.base_url.rstrip("/") + DOCX_IMPORT_PATH

    @requires_dependencies("network", DEPS_NETWORK)
    async def import_docx(
        self, source: Union[str, Path, IO[bytes], bytes], filename: str | None = None
    ) -> ImportResponse:
        """Upload ``source`` and return the parsed import response.

        Parameters
        ----------
        source : str, Path, IO[bytes] or bytes
            DOCX file to upload
        filename : str or None
            File name sent with the upload; defaults to the source's name

        Raises
        ------
        TransportError
            If the request fails, the service answers with a non-success
            status or the body is not a JSON object

        """
        import httpx

        try:
            loop = asyncio.get_running_loop()
            upload_name, content = await loop.run_in_executor(None, partial(_read_upload, source, filename))
        except OSError as e:
            raise TransportError(f"Failed to read upload {source!s}: {e}", original_error=e) from e

        files = {"file": (upload_name, BytesIO(content), DOCX_MIME_TYPE)}
        logger.debug("Uploading %s (%d bytes) to %s", upload_name, len(content), self.import_url)

        try:
            async with httpx.AsyncClient(timeout=self.options.timeout, transport=self._transport) as client:
                response = await client.post(self.import_url, files=files)
        except httpx.HTTPError as e:
            raise TransportError(f"Import request to {self.import_url} failed: {e}", original_error=e) from e

        if not response.is_success:
            body = response.text
            raise TransportError(_error_message(response.status_code, body), status_code=response.status_code, body=body)

        try:
            return ImportResponse.from_mapping(response.json())
        except ValueError as e:
            raise TransportError(
                f"Import service returned invalid JSON: {e}", status_code=response.status_code, original_error=e
            ) from e
        except ValidationError as e:
            raise TransportError(e.message, status_code=response.status_code, original_error=e) from e


__all__ = ["ImportClient"]
