"""
MapIt Backend: CORS Envelope Middleware
=========================================

What:  Puts the same fixed CORS headers on every response and answers every
       OPTIONS request with an empty 200 before routing.
How:   OPTIONS never reaches a route, a dependency, or the database.

Starlette's CORSMiddleware only decorates requests that carry an Origin
header and validates preflights; browser and non-browser clients of this API
expect the headers unconditionally, so the envelope is applied here instead.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOWED_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"

ALLOWED_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version, Authorization"
)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": ALLOWED_HEADERS,
}


def apply_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


class CORSEnvelopeMiddleware(BaseHTTPMiddleware):
    """Short-circuits preflight requests and decorates all other responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return apply_cors_headers(Response(status_code=200))

        response = await call_next(request)
        return apply_cors_headers(response)
