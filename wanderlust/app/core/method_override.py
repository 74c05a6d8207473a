"""
HTTP method override for HTML forms.

Browsers can only submit forms with GET or POST.  Edit and delete
forms therefore post to e.g. ``/listings/3?_method=DELETE``; this ASGI
middleware rewrites the request method before routing happens.
"""

from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send


ALLOWED_OVERRIDES = {"PUT", "PATCH", "DELETE"}


class MethodOverrideMiddleware:
    """Dispatch ``POST ...?_method=X`` as method ``X``."""

    def __init__(self, app: ASGIApp, param: str = "_method") -> None:
        self.app = app
        self.param = param

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            values = query.get(self.param)
            if values:
                method = values[-1].upper()
                if method in ALLOWED_OVERRIDES:
                    scope = dict(scope, method=method)
        await self.app(scope, receive, send)
