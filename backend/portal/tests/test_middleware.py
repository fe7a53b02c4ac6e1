from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from reviews.tests.factories import make_user


class SlowRequestLoggingTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user('fac01', employee_id='EMP01')

    @override_settings(SLOW_REQUEST_LOG_MS=0)
    def test_slow_request_is_logged_with_actor(self):
        self.client.force_authenticate(self.user)
        with self.assertLogs('portal.middleware', level='WARNING') as logs:
            self.client.get('/api/accounts/me/')
        self.assertIn('/api/accounts/me/', logs.output[0])

    @override_settings(SLOW_REQUEST_LOG_MS=0)
    def test_health_probe_is_skipped(self):
        with self.assertNoLogs('portal.middleware', level='WARNING'):
            self.client.get('/health/')


class ErrorShapeTests(TestCase):
    def test_drf_errors_carry_status_code(self):
        resp = APIClient().get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data['status_code'], 401)
        self.assertIn('detail', resp.data)
