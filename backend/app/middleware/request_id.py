"""
Request ID middleware.

Outermost layer of the stack: every log entry written while a request is
handled carries its request_id, and the same id is returned to the client
in X-Request-ID.
"""

import re
import uuid

from starlette.datastructures import Headers, MutableHeaders

from issue_tracker.logging import bind_context, clear_context

REQUEST_ID_HEADER = "X-Request-ID"

# Inbound ids end up in log lines and response headers
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(inbound: str | None) -> str:
    """Keep a well-formed client id, otherwise mint a new one."""
    if inbound and _VALID_REQUEST_ID.fullmatch(inbound):
        return inbound
    return uuid.uuid4().hex


class RequestIDMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        # Start from a clean context; values stay bound for the error handlers
        clear_context()
        bind_context(request_id=request_id)
        await self.app(scope, receive, send_with_request_id)
