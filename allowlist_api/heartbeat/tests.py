from django.core.cache import cache
from django.test import override_settings
from django.urls import reverse
from django.utils.dateparse import parse_datetime
from rest_framework import status
from rest_framework.test import APITestCase


class HealthTests(APITestCase):
    def setUp(self):
        super().setUp()
        cache.clear()
        self.url = reverse('health')

    @override_settings(ENVIRONMENT='staging')
    def test_health(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)

        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['message'], 'Wallet checker API is running')
        self.assertEqual(data['environment'], 'staging')
        self.assertIsNotNone(parse_datetime(data['timestamp']))

    def test_only_get_is_allowed(self):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'Method not allowed. Use GET.',
            'code': 'method_not_allowed',
        })
