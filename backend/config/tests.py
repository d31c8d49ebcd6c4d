from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase
from config.middleware import SecurityHeadersMiddleware


class SecurityHeadersMiddlewareTests(SimpleTestCase):
    def test_nonce_changes_per_request(self):
        seen = []

        def view(request):
            seen.append(request.csp_nonce)
            return HttpResponse('ok')

        middleware = SecurityHeadersMiddleware(view)
        first = middleware(RequestFactory().get('/'))
        second = middleware(RequestFactory().get('/'))

        self.assertNotEqual(seen[0], seen[1])
        self.assertIn(f"'nonce-{seen[0]}'", first['Content-Security-Policy'])
        self.assertIn(f"'nonce-{seen[1]}'", second['Content-Security-Policy'])
        self.assertIn("frame-ancestors 'none'", first['Content-Security-Policy'])
        self.assertEqual(first['Permissions-Policy'], SecurityHeadersMiddleware.PERMISSIONS_POLICY)

    def test_view_headers_are_kept(self):
        def view(request):
            response = HttpResponse('ok')
            response['Content-Security-Policy'] = "default-src 'none'"
            return response

        response = SecurityHeadersMiddleware(view)(RequestFactory().get('/'))
        self.assertEqual(response['Content-Security-Policy'], "default-src 'none'")


class SecurityHeadersIntegrationTests(TestCase):
    def test_api_responses_carry_headers(self):
        response = self.client.get('/api/accounts/theme/')
        self.assertEqual(response.status_code, 200)
        self.assertIn('Content-Security-Policy', response)
        self.assertEqual(response['X-Frame-Options'], 'DENY')
        self.assertEqual(response['X-Content-Type-Options'], 'nosniff')
