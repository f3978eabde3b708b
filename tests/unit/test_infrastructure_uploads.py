"""Unit tests for the upload parsing dependency."""

from types import SimpleNamespace

import pytest
from starlette.datastructures import FormData, UploadFile

from routebinder.infrastructure.uploads import UploadError, UploadField, files_middleware


def _upload(name: str) -> UploadFile:
    return UploadFile(file=None, filename=name)


def _request(items, content_type="multipart/form-data; boundary=x"):
    async def form():
        return FormData(items)

    async def close():
        request.closed = True

    request = SimpleNamespace(
        headers={"content-type": content_type},
        form=form,
        close=close,
        closed=False,
        state=SimpleNamespace(),
    )
    return request


async def _run(uploads, request):
    """Drive the dependency the way FastAPI does: enter, then exit."""
    stage = files_middleware(uploads)(request)
    try:
        return await anext(stage)
    finally:
        await stage.aclose()


@pytest.mark.unit
class TestFilesMiddleware:
    """Test field policy enforcement."""

    async def test_collects_declared_files(self):
        request = _request([("file", _upload("a.bin")), ("name", "kitchen")])

        files = await _run([UploadField("file")], request)

        assert [upload.filename for upload in files["file"]] == ["a.bin"]
        assert request.state.files is files

    async def test_unexpected_field(self):
        request = _request([("other", _upload("a.bin"))])

        with pytest.raises(UploadError) as exc_info:
            await _run([UploadField("file")], request)

        assert exc_info.value.code == "LIMIT_UNEXPECTED_FILE"
        assert exc_info.value.field == "other"

    async def test_file_count(self):
        request = _request([("file", _upload("a.bin")), ("file", _upload("b.bin"))])

        with pytest.raises(UploadError) as exc_info:
            await _run([UploadField("file", max_count=1)], request)

        assert exc_info.value.code == "LIMIT_FILE_COUNT"

    async def test_empty_spec_accepts_anything(self):
        request = _request([("x", _upload("a.bin")), ("y", _upload("b.bin"))])

        files = await _run([], request)

        assert set(files) == {"x", "y"}

    async def test_non_multipart_sets_empty_files(self):
        request = _request([], content_type="application/json")

        assert await _run([UploadField("file")], request) == {}
        assert request.state.files == {}


@pytest.mark.unit
class TestFormCleanup:
    """The parsed form is closed when the dependency exits."""

    async def test_form_open_until_exit(self):
        request = _request([("file", _upload("a.bin"))])
        stage = files_middleware([UploadField("file")])(request)

        await anext(stage)
        assert request.closed is False

        await stage.aclose()
        assert request.closed is True

    async def test_form_closed_after_rejection(self):
        request = _request([("other", _upload("a.bin"))])

        with pytest.raises(UploadError):
            await _run([UploadField("file")], request)

        assert request.closed is True
