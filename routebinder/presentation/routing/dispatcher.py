"""Dispatcher: invoke a controller method for one request.

dispatch() is the endpoint body of every bound route. It runs after the
middleware chain and:

1. Collects path parameter values in pattern order.
2. Reads the body (JSON object, non-file form fields, or {}) and removes
   the access_token field.
3. Builds a fresh RequestContext and calls handler(ctx, *values, body).
4. Races the result against settings.api_timeout (server-sent event
   routes are never timed out) and renders {status, data} as JSON.

Every exception is normalized by to_http_error() and answered with
``{"error": message, "ok": false}``; nothing propagates to the framework.
"""

import asyncio
import inspect
import json
from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse

from routebinder.core.config import Settings
from routebinder.core.constants import (
    ACCESS_TOKEN_FIELD,
    FORM_MEDIA_TYPES,
    JSON_MEDIA_TYPE,
    SSE_ERROR_EVENT,
    SSE_MEDIA_TYPE,
)
from routebinder.core.container import Container
from routebinder.core.errors import HttpError, to_http_error
from routebinder.domain.protocols import LoggerProtocol
from routebinder.presentation.routing.context import EventStream, RequestContext
from routebinder.presentation.routing.metadata import RouteBinding
from routebinder.presentation.routing.results import ControllerResult, coerce_result

# Headers of the temporal response that belong to the rendered body
_BODY_HEADERS = (b"content-length", b"content-type")

_BODYLESS_STATUSES = (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED)


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


async def read_body(request: Request) -> dict[str, Any]:
    """Read the request body as a dict for the controller.

    Args:
        request: Inbound request.

    Returns:
        JSON object, non-file form fields, or {} for any other content
        type. The access_token field is always removed.

    Raises:
        HttpError: If a JSON body is invalid or not an object (400).
    """
    media_type = _media_type(request)
    body: dict[str, Any]

    if media_type == JSON_MEDIA_TYPE or media_type.endswith("+json"):
        raw = await request.body()
        if not raw.strip():
            body = {}
        else:
            try:
                parsed = json.loads(raw)
            except ValueError as e:
                raise HttpError("Invalid JSON body") from e
            if not isinstance(parsed, dict):
                raise HttpError("JSON body must be a JSON object")
            body = parsed
    elif media_type in FORM_MEDIA_TYPES:
        form = await request.form()
        body = {key: value for key, value in form.multi_items() if isinstance(value, str)}
    else:
        body = {}

    body.pop(ACCESS_TOKEN_FIELD, None)
    return body


class Dispatcher:
    """Invoke controller methods and render their results.

    Args:
        container: Resolves controllers by name on every request.
        settings: Provides api_timeout and expose_error_details.
        logger: Base logger; bound per request with route details.
    """

    def __init__(
        self, container: Container, settings: Settings, logger: LoggerProtocol
    ) -> None:
        self._container = container
        self._settings = settings
        self._logger = logger
        self._streams: set[asyncio.Task[None]] = set()

    async def dispatch(
        self, binding: RouteBinding, request: Request, response: Response
    ) -> Response:
        """Run the bound handler for one request.

        Args:
            binding: Route binding being served.
            request: Inbound request (chain stages already ran).
            response: Temporal response; headers and cookies set on it are
                copied onto the rendered response.

        Returns:
            JSON response, bodyless response, or event stream.
        """
        log = self._logger.bind(
            route=binding.route,
            method=binding.method.value,
            controller=binding.controller_name,
            handler=binding.handler_name,
        )

        try:
            values = [request.path_params[name] for name in binding.parameter_names]
            body = await read_body(request)

            controller = self._container.constitute(binding.controller_name)
            handler = getattr(controller, binding.handler_name)

            if binding.server_sent_events:
                stream: EventStream = request.state.event_stream
                context = self._context(request, stream)
                return self._stream(handler(context, *values, body), stream, log)

            context = self._context(request, response)
            result = await self._settle(handler(context, *values, body))
            return self._respond(coerce_result(result), response)
        except Exception as e:
            return self._error_response(e, log)
        finally:
            # The upload stage owns (and closes) the form on upload routes
            if binding.allowed_uploads is None:
                await request.close()

    def _context(self, request: Request, response: Response | EventStream) -> RequestContext:
        return RequestContext(
            request=request,
            response=response,
            user=getattr(request.state, "user", None),
            files=getattr(request.state, "files", None) or {},
        )

    async def _settle(self, result: Any) -> Any:
        if not inspect.isawaitable(result):
            return result
        return await asyncio.wait_for(result, timeout=self._settings.api_timeout)

    def _respond(self, result: ControllerResult, response: Response) -> Response:
        if result.status in _BODYLESS_STATUSES:
            rendered = Response(status_code=result.status)
        else:
            rendered = JSONResponse(
                status_code=result.status, content=jsonable_encoder(result.data)
            )

        rendered.raw_headers.extend(
            (key, value)
            for key, value in response.raw_headers
            if key.lower() not in _BODY_HEADERS
        )
        return rendered

    def _error_response(self, error: Exception, log: LoggerProtocol) -> JSONResponse:
        http_error = self._normalize(error, log)
        return JSONResponse(
            status_code=http_error.status,
            content={"error": http_error.message, "ok": False},
        )

    def _normalize(self, error: Exception, log: LoggerProtocol) -> HttpError:
        http_error = to_http_error(
            error, expose_details=self._settings.expose_error_details
        )
        if http_error.status >= 500:
            log.error("Request failed", status=http_error.status, error=error)
        else:
            log.warning(
                "Request rejected", status=http_error.status, reason=http_error.message
            )
        return http_error

    # =========================================================================
    # Server-sent events
    # =========================================================================

    def _stream(
        self, result: Any, stream: EventStream, log: LoggerProtocol
    ) -> StreamingResponse:
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            stream.attach(task)
            supervisor = asyncio.create_task(self._supervise(task, stream, log))
            self._streams.add(supervisor)
            supervisor.add_done_callback(self._streams.discard)
        else:
            stream.close()

        return StreamingResponse(
            stream.frames(),
            status_code=stream.status_code,
            headers=stream.headers,
            media_type=SSE_MEDIA_TYPE,
        )

    async def _supervise(
        self, task: "asyncio.Future[Any]", stream: EventStream, log: LoggerProtocol
    ) -> None:
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            log.debug("Event stream closed by client")
        except Exception as e:
            http_error = self._normalize(e, log)
            await stream.send(
                {"error": http_error.message, "ok": False}, event=SSE_ERROR_EVENT
            )
        finally:
            stream.close()
