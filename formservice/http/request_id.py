"""ASGI middleware tagging every HTTP response with X-Request-Id.

A non-empty inbound header value is echoed back; otherwise a uuid4 is
generated. Any X-Request-Id already set by the app is replaced.
"""

from __future__ import annotations

import uuid

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIdMiddleware:
    def __init__(self, app, header_name: str = REQUEST_ID_HEADER) -> None:  # type: ignore[no-untyped-def]
        self.app = app
        self.raw_name = header_name.encode("latin-1")
        self.match_name = self.raw_name.lower()

    def resolve(self, scope) -> bytes:  # type: ignore[no-untyped-def]
        supplied = next(
            (value for name, value in scope.get("headers") or [] if name.lower() == self.match_name and value),
            None,
        )
        return supplied or uuid.uuid4().hex.encode("latin-1")

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        request_id = self.resolve(scope)

        async def tagged_send(message):  # type: ignore[no-untyped-def]
            if message.get("type") == "http.response.start":
                kept = [(n, v) for n, v in message.get("headers") or [] if n.lower() != self.match_name]
                message = {**message, "headers": kept + [(self.raw_name, request_id)]}
            await send(message)

        await self.app(scope, receive, tagged_send)


__all__ = ["REQUEST_ID_HEADER", "RequestIdMiddleware"]
