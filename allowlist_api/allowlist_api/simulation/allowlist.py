import random

from django.urls import reverse
from rest_framework import status

from allowlist.models import AllowlistRecord


def random_address(mixed_case=False):
    body = ''.join(random.choice('0123456789abcdef') for _ in range(40))
    if mixed_case:
        body = ''.join(c.upper() if random.random() < 0.5 else c for c in body)
    return '0x' + body


def populate_allowlist(number_of_wallets, role):
    records = [
        AllowlistRecord.objects.create(address=random_address(), role=role)
        for _ in range(number_of_wallets)
    ]
    return records


def check_wallet(test_case, address, expected_status=status.HTTP_200_OK):
    url = reverse('wallet-check')
    response = test_case.client.post(url, {'address': address}, format='json')

    test_case.assertEqual(response.status_code, expected_status)

    return response.json()
