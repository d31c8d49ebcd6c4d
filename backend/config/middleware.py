import secrets


class SecurityHeadersMiddleware:
    """
    Adds a per-request CSP nonce and the browser hardening headers.

    The nonce is exposed as ``request.csp_nonce`` so templates can tag inline
    scripts with it.
    """

    PERMISSIONS_POLICY = 'camera=(self), microphone=(), geolocation=()'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        nonce = secrets.token_urlsafe(16)
        request.csp_nonce = nonce
        response = self.get_response(request)

        response.setdefault('Content-Security-Policy', self.build_policy(nonce))
        response.setdefault('X-XSS-Protection', '1; mode=block')
        response.setdefault('Permissions-Policy', self.PERMISSIONS_POLICY)
        return response

    @staticmethod
    def build_policy(nonce):
        directives = [
            "default-src 'self'",
            f"script-src 'self' 'nonce-{nonce}' 'strict-dynamic'",
            "style-src 'self' 'unsafe-inline'",
            "img-src 'self' data: https:",
            "frame-src https://www.youtube.com https://player.vimeo.com",
            "connect-src 'self'",
            "object-src 'none'",
            "base-uri 'self'",
            "frame-ancestors 'none'",
        ]
        return '; '.join(directives)
