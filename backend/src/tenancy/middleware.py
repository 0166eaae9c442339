"""Middleware for tenant context extraction.

Copies the org_id claim of the bearer token into request.state and the
logging context so every log line of a request carries the tenant.

The token is decoded but the result is never used for authorization:
that happens in dependencies, which reload the user from the database.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import jwt

from auth.jwt import decode_token
from observability.request_id import set_org_id


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Attach the caller's org_id (or None) to request.state.

    Missing, malformed or invalid tokens are ignored here; the request
    continues and authentication dependencies reject it where required.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.org_id = None
        set_org_id(None)

        auth_header = request.headers.get("Authorization")
        if auth_header:
            parts = auth_header.split()
            if len(parts) == 2 and parts[0].lower() == "bearer":
                try:
                    payload = decode_token(parts[1])
                except (jwt.InvalidTokenError, ValueError):
                    payload = {}

                org_id = payload.get("org_id")
                if org_id:
                    request.state.org_id = str(org_id)
                    set_org_id(str(org_id))

        return await call_next(request)
