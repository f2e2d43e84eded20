"""
Middleware that tags every request with an id.

The id comes from the client's X-Request-ID header when it is usable,
otherwise a new UUID is generated. It is bound into the structlog context
and echoed on the response.
"""

import uuid

from core.logging import bind_context

REQUEST_ID_HEADER = b"x-request-id"
MAX_REQUEST_ID_LENGTH = 64


def _incoming_request_id(scope) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == REQUEST_ID_HEADER:
            request_id = value.decode("latin-1").strip()
            if request_id and len(request_id) <= MAX_REQUEST_ID_LENGTH:
                return request_id
    return None


class RequestIDMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        bind_context(request_id=request_id)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        await self.app(scope, receive, send_wrapper)
