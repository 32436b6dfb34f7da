"""
HTTP middlewares: JSON-only request bodies, hardened response headers and
request correlation ids.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware

# The API only ever returns JSON, so nothing may be framed or loaded from it
RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}
HSTS_HEADER = "max-age=31536000; includeSubDomains"


class ResponseHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(RESPONSE_HEADERS)
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        if "server" in response.headers:
            del response.headers["server"]
        return response


class JsonBodyMiddleware(BaseHTTPMiddleware):
    """
    Answer 415 when a write request declares a non-JSON body.

    Requests without a Content-Type (DELETE /hard/delete/all, for example)
    pass through.
    """

    WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        content_type = request.headers.get("content-type")
        if (
            request.method in self.WRITE_METHODS
            and content_type
            and not content_type.lower().startswith("application/json")
        ):
            return JSONResponse(
                status_code=415,
                content={"detail": f"Unsupported media type {content_type}, send application/json"},
            )
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    """
    Install the middlewares. The last one added runs first, so the request
    id is bound before anything else can log.
    """
    app.add_middleware(ResponseHeadersMiddleware)
    app.add_middleware(JsonBodyMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
