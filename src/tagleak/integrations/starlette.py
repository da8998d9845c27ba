"""Starlette middleware that checks every HTML response for tag leaks."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from starlette.datastructures import Headers, MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response, StreamingResponse
from starlette.types import ASGIApp

from tagleak.policy import ReconciliationPolicy, create_policy
from tagleak.scope import request_scope
from tagleak.settings import OperationMode
from tagleak.types import RequestContext, Tag

logger = logging.getLogger(__name__)

CACHE_TAG_HEADER = "Cache-Tag"

_TAG_SEPARATORS = re.compile(r"[,\s]+")
_UNCACHEABLE_DIRECTIVES = frozenset({"no-store", "private"})


def is_cacheable(headers: Headers) -> bool:
    """Whether shared caches may store a response with these headers."""
    directives = {
        directive.strip().split("=", 1)[0].lower()
        for directive in headers.get("cache-control", "").split(",")
    }
    return not directives & _UNCACHEABLE_DIRECTIVES


def default_admin_classifier(request: Request) -> bool:
    path = request.url.path
    return path == "/admin" or path.startswith("/admin/")


def route_name(request: Request) -> str | None:
    """Name of the route that handled the request, if any."""
    route = request.scope.get("route")
    name = getattr(route, "name", None)
    if name:
        return name
    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        return None
    for candidate in getattr(request.scope.get("app"), "routes", ()):
        if getattr(candidate, "endpoint", None) is endpoint:
            return candidate.name
    return getattr(endpoint, "__name__", None)


class HttpCacheableResponse:
    """Drained HTTP response whose cache tags live in a header.

    The body chunks are only joined when a reporter reads the content.
    """

    def __init__(
        self,
        chunks: list[bytes],
        headers: Headers,
        tag_header: str = CACHE_TAG_HEADER,
    ) -> None:
        self._chunks = chunks
        self._headers = headers
        self._tag_header = tag_header
        self.rewritten = False

    @property
    def chunks(self) -> list[bytes]:
        return self._chunks

    def get_cache_tags(self) -> frozenset[Tag]:
        value = self._headers.get(self._tag_header, "")
        return frozenset(Tag(tag) for tag in _TAG_SEPARATORS.split(value) if tag)

    def get_content(self) -> bytes:
        if len(self._chunks) != 1:
            self._chunks = [b"".join(self._chunks)]
        return self._chunks[0]

    def set_content(self, content: str | bytes) -> None:
        body = content.encode("utf-8") if isinstance(content, str) else content
        self._chunks = [body]
        self.rewritten = True


class TagLeakMiddleware(BaseHTTPMiddleware):
    """Collects record tags per request and reconciles the response.

    The collector for the request is available to the app as
    ``request.state.tag_collector`` and through ``tagleak.current_collector()``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        policy: ReconciliationPolicy | None = None,
        tag_header: str = CACHE_TAG_HEADER,
        admin_classifier: Callable[[Request], bool] = default_admin_classifier,
    ) -> None:
        super().__init__(app)
        self.policy = policy if policy is not None else create_policy()
        self.tag_header = tag_header
        self.admin_classifier = admin_classifier

    def build_context(self, request: Request) -> RequestContext:
        return RequestContext(
            path=request.url.path,
            route_name=route_name(request),
            is_admin_route=self.admin_classifier(request),
            is_xhr=request.headers.get("x-requested-with", "").lower()
            == "xmlhttprequest",
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        with request_scope() as collector:
            request.state.tag_collector = collector
            response = await call_next(request)

            if self.policy.settings.operation_mode is OperationMode.DISABLED:
                return response

            context = self.build_context(request)
            if not is_cacheable(response.headers):
                self.policy.reconcile(collector.snapshot(), response, context)
                return response

            # Records may still be loaded while the body renders, so drain it
            # before reconciling.
            chunks = [chunk async for chunk in response.body_iterator]
            checked = HttpCacheableResponse(chunks, response.headers, self.tag_header)
            self.policy.reconcile(collector.snapshot(), checked, context)
            return self.replay(response, checked)

    def replay(self, original: Response, checked: HttpCacheableResponse) -> Response:
        """Send the drained body, with a fresh Content-Length if it was rewritten."""
        headers = MutableHeaders(raw=list(original.raw_headers))
        background = getattr(original, "background", None)
        if not checked.rewritten:
            return StreamingResponse(
                iter(checked.chunks),
                status_code=original.status_code,
                headers=headers,
                background=background,
            )
        del headers["content-length"]
        return Response(
            content=checked.get_content(),
            status_code=original.status_code,
            headers=headers,
            background=background,
        )
