import json

from django.core.cache import cache
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APITestCase

from allowlist_api import address

VALID_ADDRESS = '0x1234567890123456789012345678901234567890'
MIXED_CASE_ADDRESS = '0xAbCdEf0123456789aBcDeF0123456789ABCDEF12'


class AddressValidationTests(SimpleTestCase):
    def test_valid_address(self):
        self.assertTrue(address.validate(VALID_ADDRESS))
        self.assertTrue(address.validate(MIXED_CASE_ADDRESS))

    def test_surrounding_whitespace_is_ignored(self):
        self.assertTrue(address.validate('  {}\n'.format(VALID_ADDRESS)))

    def test_too_short(self):
        self.assertFalse(address.validate('0x123'))

    def test_too_long(self):
        self.assertFalse(address.validate(VALID_ADDRESS + '0'))

    def test_missing_prefix(self):
        self.assertFalse(address.validate('1234567890123456789012345678901234567890'))
        self.assertFalse(address.validate('001234567890123456789012345678901234567890'))

    def test_uppercase_prefix_is_rejected(self):
        self.assertFalse(address.validate('0X1234567890123456789012345678901234567890'))

    def test_non_hex_digit(self):
        self.assertFalse(address.validate('0xgg34567890123456789012345678901234567890'))
        self.assertFalse(address.validate('0x0x34567890123456789012345678901234567890'))
        self.assertFalse(address.validate('0x12345678901234567890 12345678901234567890'[:42]))

    def test_non_string_input(self):
        for value in (None, 42, b'0x1234567890123456789012345678901234567890', ['0x'], {}):
            self.assertFalse(address.validate(value))

    def test_empty_and_garbage(self):
        self.assertFalse(address.validate(''))
        self.assertFalse(address.validate('   '))
        self.assertFalse(address.validate('not-an-address'))


class AddressCanonicalizationTests(SimpleTestCase):
    def test_case_and_whitespace_insensitive(self):
        self.assertEqual(
            address.canonicalize(' {} '.format(MIXED_CASE_ADDRESS)),
            address.canonicalize(MIXED_CASE_ADDRESS.lower()))

    def test_canonical_form(self):
        key = address.canonicalize('\t' + MIXED_CASE_ADDRESS.upper().replace('0X', '0x') + ' ')
        self.assertEqual(key, MIXED_CASE_ADDRESS.lower())
        self.assertEqual(len(key), 42)
        self.assertTrue(address.is_canonical(key))

    def test_idempotent(self):
        once = address.canonicalize(MIXED_CASE_ADDRESS)
        self.assertEqual(address.canonicalize(once), once)

    def test_invalid_address_raises(self):
        with self.assertRaises(address.InvalidAddress):
            address.canonicalize('0x123')
        with self.assertRaises(ValueError):
            address.canonicalize(None)

    def test_is_canonical(self):
        self.assertTrue(address.is_canonical(VALID_ADDRESS))
        self.assertFalse(address.is_canonical(MIXED_CASE_ADDRESS))
        self.assertFalse(address.is_canonical(' ' + VALID_ADDRESS))
        self.assertFalse(address.is_canonical(None))


class AddressDisplayTests(SimpleTestCase):
    def test_format_for_display(self):
        self.assertEqual(address.format_for_display(VALID_ADDRESS), '0x1234...7890')
        self.assertEqual(
            address.format_for_display(VALID_ADDRESS, start_chars=10, end_chars=6),
            '0x12345678...567890')

    def test_invalid_address_is_returned_unchanged(self):
        self.assertEqual(address.format_for_display('0x123'), '0x123')
        self.assertIsNone(address.format_for_display(None))

    def test_checksum(self):
        self.assertEqual(
            address.to_checksum('0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed'),
            '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed')


class ApiDocumentationTests(APITestCase):
    def setUp(self):
        super().setUp()
        cache.clear()

    def test_openapi_schema_lists_endpoints(self):
        response = self.client.get('/swagger/', {'format': 'openapi'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)

        schema = json.loads(response.content)
        base_path = schema.get('basePath', '').rstrip('/')
        paths = {
            (base_path + path).rstrip('/'): operations
            for path, operations in schema['paths'].items()
        }
        self.assertIn('/api/wallet/check', paths)
        self.assertIn('400', paths['/api/wallet/check']['post']['responses'])
        self.assertIn('/api/stats', paths)
        self.assertIn('/api/health', paths)
