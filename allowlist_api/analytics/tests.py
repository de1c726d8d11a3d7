from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from allowlist_api.simulation.allowlist import populate_allowlist


class AllowlistStatsTests(APITestCase):
    def setUp(self):
        super().setUp()
        cache.clear()
        self.url = reverse('allowlist-stats')

    def test_empty_allowlist(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {
            'success': True,
            'data': {
                'total': 0,
                'byRole': {},
            }
        })

    def test_counts_per_role(self):
        populate_allowlist(3, 'whitelist')
        populate_allowlist(2, 'fcfs')
        populate_allowlist(1, 'Loyal_Crown')

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data'], {
            'total': 6,
            'byRole': {
                'whitelist': 3,
                'fcfs': 2,
                'Loyal_Crown': 1,
            }
        })

    def test_only_get_is_allowed(self):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.json()['error'], 'Method not allowed. Use GET.')
