from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    Headers added:
    - X-Frame-Options: DENY (Prevents clickjacking)
    - X-Content-Type-Options: nosniff (Prevents MIME sniffing)
    - X-XSS-Protection: 1; mode=block (Legacy XSS protection)
    - Referrer-Policy: strict-origin-when-cross-origin
    - Strict-Transport-Security: (In production only)
    - Content-Security-Policy: API responses only; the docs pages load
      their assets from a CDN and are left alone
    """

    def __init__(self, app, is_production: bool = False, docs_paths: tuple[str, ...] = ()):
        super().__init__(app)
        self.is_production = is_production
        self.docs_paths = docs_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if request.url.path not in self.docs_paths:
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        if self.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
