"""Multipart upload capability.

files_middleware(allowed_uploads) returns a FastAPI dependency that parses a
multipart/form-data body (Starlette's form parser over python-multipart)
and stores the uploaded files on ``request.state.files`` as
``{field_name: [UploadFile, ...]}``.

Field policy:
    - empty spec: any file field is accepted
    - otherwise: only declared fields, each with at most max_count files

Violations raise UploadError carrying a machine-readable code. Non-file
form fields are left for the dispatcher to pass to the controller as body.
The form is closed when the dependency exits, after the response.
"""

from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass
from http import HTTPStatus

from starlette.datastructures import UploadFile
from starlette.requests import Request

MULTIPART_FORM_DATA = "multipart/form-data"

UploadedFiles = dict[str, list[UploadFile]]


@dataclass(frozen=True, slots=True)
class UploadField:
    """One accepted upload field.

    Attributes:
        name: Form field name.
        max_count: Maximum number of files for the field.
    """

    name: str
    max_count: int = 1


class UploadError(Exception):
    """Uploaded files do not match the route's upload spec.

    Attributes:
        code: LIMIT_UNEXPECTED_FILE or LIMIT_FILE_COUNT.
        field: Offending form field name.
        status: Always 400.
    """

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, code: str, message: str, *, field: str) -> None:
        super().__init__(message)
        self.code = code
        self.field = field


def files_middleware(
    allowed_uploads: Sequence[UploadField],
) -> Callable[[Request], AsyncIterator[UploadedFiles]]:
    """Build the upload parsing dependency for one route.

    The dependency yields, so the parsed form (and the spooled files behind
    each UploadFile) is closed once the request has been answered.

    Args:
        allowed_uploads: Accepted fields; empty accepts any file field.

    Returns:
        Async generator dependency yielding (and storing) the parsed files.
    """
    limits = {field.name: field.max_count for field in allowed_uploads}

    async def parse_files(request: Request) -> AsyncIterator[UploadedFiles]:
        try:
            files = await _collect_files(request, limits)
            request.state.files = files
            yield files
        finally:
            # FastAPI only closes forms it parsed itself
            await request.close()

    return parse_files


async def _collect_files(request: Request, limits: dict[str, int]) -> UploadedFiles:
    files: UploadedFiles = {}
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != MULTIPART_FORM_DATA:
        return files

    form = await request.form()
    for name, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if limits and name not in limits:
            raise UploadError(
                "LIMIT_UNEXPECTED_FILE", f"Unexpected field: {name}", field=name
            )
        files.setdefault(name, []).append(value)
        if limits and len(files[name]) > limits[name]:
            raise UploadError(
                "LIMIT_FILE_COUNT",
                f"Too many files for field: {name}",
                field=name,
            )
    return files
