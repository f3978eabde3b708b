"""Controller exercising dispatcher behaviour in API tests.

Handlers record what they observed into ``calls`` so tests can assert on
whether (and how) the controller was reached.
"""

import asyncio
from typing import Any

from routebinder.core.errors import HttpError
from routebinder.core.result import Failure, Success
from routebinder.presentation.controllers import Controller
from routebinder.presentation.routing import (
    HTTPMethod,
    RequestContext,
    RouteMetadata,
    UploadField,
)


class ProbeController(Controller):
    routes = [
        RouteMetadata(method=HTTPMethod.POST, path="/probe/echo", handler="echo", anonymous=True),
        RouteMetadata(method=HTTPMethod.POST, path="/probe/private-echo", handler="echo"),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/whoami", handler="whoami"),
        RouteMetadata(
            method=HTTPMethod.GET, path="/probe/order/:second/:first", handler="order", anonymous=True
        ),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/slow", handler="slow", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/mapping", handler="mapping", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/success", handler="success", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/failure", handler="failure", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/malformed", handler="malformed", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/crash", handler="crash", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/teapot", handler="teapot", anonymous=True),
        RouteMetadata(method=HTTPMethod.GET, path="/probe/cookie", handler="cookie", anonymous=True),
        RouteMetadata(method=HTTPMethod.DELETE, path="/probe/empty", handler="empty", anonymous=True),
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/probe/stream",
            handler="stream",
            anonymous=True,
            server_sent_events=True,
        ),
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/probe/stream-fail",
            handler="stream_fail",
            anonymous=True,
            server_sent_events=True,
        ),
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/probe/stream-refuse",
            handler="stream_refuse",
            anonymous=True,
            server_sent_events=True,
        ),
        RouteMetadata(
            method=HTTPMethod.POST,
            path="/probe/upload",
            handler="upload",
            anonymous=True,
            allowed_uploads=(UploadField("doc", max_count=2),),
        ),
        RouteMetadata(
            method=HTTPMethod.POST,
            path="/probe/upload-any",
            handler="upload",
            anonymous=True,
            allowed_uploads=(),
        ),
    ]

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.cancelled = asyncio.Event()

    async def echo(self, ctx: RequestContext, body: dict[str, Any]):
        self.calls.append(("echo", body))
        return self.created(body)

    async def whoami(self, ctx: RequestContext, body: dict[str, Any]):
        self.calls.append(("whoami", ctx.user.username if ctx.user else None))
        # Yield so concurrent requests interleave
        await asyncio.sleep(0.01)
        return self.ok({"username": ctx.user.username})

    async def order(self, ctx: RequestContext, second: str, first: str, body: dict[str, Any]):
        return self.ok({"second": second, "first": first})

    async def slow(self, ctx: RequestContext, body: dict[str, Any]):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            self.cancelled.set()
            raise
        return self.ok("too late")

    async def mapping(self, ctx: RequestContext, body: dict[str, Any]):
        return {"status": 202, "data": {"accepted": True}}

    async def success(self, ctx: RequestContext, body: dict[str, Any]):
        return Success(value=self.ok({"wrapped": True}))

    async def failure(self, ctx: RequestContext, body: dict[str, Any]):
        return Failure(error="Nope")

    async def malformed(self, ctx: RequestContext, body: dict[str, Any]):
        return {"data": "missing status"}

    async def crash(self, ctx: RequestContext, body: dict[str, Any]):
        raise RuntimeError("database password is hunter2")

    async def teapot(self, ctx: RequestContext, body: dict[str, Any]):
        raise HttpError("I'm a teapot", status=418)

    async def cookie(self, ctx: RequestContext, body: dict[str, Any]):
        ctx.response.set_cookie("session", "abc")
        ctx.response.headers["X-Probe"] = "yes"
        return self.ok({"cookie": True})

    async def empty(self, ctx: RequestContext, body: dict[str, Any]):
        return self.no_content()

    async def stream(self, ctx: RequestContext, body: dict[str, Any]):
        # Outlives the API timeout; streams are never timed out
        await asyncio.sleep(1.0)
        await ctx.events.send({"n": 1}, event="tick")
        await ctx.events.send({"n": 2}, event="tick")

    async def stream_fail(self, ctx: RequestContext, body: dict[str, Any]):
        await ctx.events.send({"n": 1})
        raise HttpError("stream broke", status=409)

    def stream_refuse(self, ctx: RequestContext, body: dict[str, Any]):
        raise HttpError("not streaming today", status=409)

    async def upload(self, ctx: RequestContext, body: dict[str, Any]):
        self.calls.append(("upload", ctx.files))
        files = {
            name: [upload.filename for upload in uploads] for name, uploads in ctx.files.items()
        }
        return self.ok({"files": files, "body": body})
