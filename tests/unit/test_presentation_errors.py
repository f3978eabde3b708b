"""Unit tests for fallback handlers called directly."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from routebinder.infrastructure.uploads import UploadError
from routebinder.presentation.errors import (
    global_error_handler,
    http_exception_handler,
    not_found,
)


def _request(logger=None):
    request = MagicMock()
    request.app.state = SimpleNamespace(logger=logger)
    request.url.path = "/somewhere"
    request.method = "POST"
    return request


@pytest.mark.unit
class TestFallbackHandlers:
    """Test response shapes of fallback handlers."""

    async def test_not_found_is_empty(self):
        response = await not_found(_request())

        assert response.status_code == 404
        assert response.body == b""

    async def test_global_handler_uses_message(self):
        response = await global_error_handler(_request(), RuntimeError("boom"))

        assert response.status_code == 400
        assert response.body == b'{"error":"boom","ok":false}'

    async def test_global_handler_prefers_code(self):
        error = UploadError("LIMIT_FILE_COUNT", "Too many files for field: file", field="file")

        response = await global_error_handler(_request(), error)

        assert response.body == b'{"error":"LIMIT_FILE_COUNT","ok":false}'

    async def test_global_handler_logs_warning(self):
        logger = MagicMock()

        await global_error_handler(_request(logger), RuntimeError("boom"))

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["error_type"] == "RuntimeError"

    async def test_http_exception_handler(self):
        response = await http_exception_handler(
            _request(), HTTPException(status_code=405, detail="Nope", headers={"Allow": "GET"})
        )

        assert response.status_code == 405
        assert response.body == b'{"error":"Nope","ok":false}'
        assert response.headers["Allow"] == "GET"
