import os
import tempfile
from io import StringIO
from unittest.mock import patch

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import OperationalError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from allowlist_api.simulation.allowlist import check_wallet, populate_allowlist, random_address
from allowlist.loader import add_records, upsert_records, delete_records, clear_records, read_address_file
from allowlist.models import AllowlistRecord
from allowlist.roles import ROLE_PRESETS, UnknownRole
from allowlist.store import DjangoRecordStore, MemoryRecordStore, StoreUnavailable, get_record_store

ADDRESS = '0x1234567890123456789012345678901234567890'
MIXED_CASE_ADDRESS = '0xAbCdEf0123456789aBcDeF0123456789ABCDEF12'
PRESALE = ROLE_PRESETS['presale']


@override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='presale')
class WalletCheckTests(APITestCase):
    def setUp(self):
        super().setUp()
        cache.clear()
        self.url = reverse('wallet-check')

    def test_address_not_in_allowlist(self):
        response = check_wallet(self, ADDRESS)

        self.assertEqual(response, {
            'success': True,
            'data': {
                'whitelisted': False,
                'message': 'Address not found in allowlist',
            }
        })

    def test_whitelisted_address(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='whitelist')

        response = check_wallet(self, ADDRESS)

        self.assertEqual(response, {
            'success': True,
            'data': {
                'whitelisted': True,
                'roles': 'whitelist',
                'label': 'Whitelist',
                'message': PRESALE['whitelist']['message'],
            }
        })

    def test_mixed_case_and_whitespace_match_record(self):
        AllowlistRecord.objects.create(
            address=MIXED_CASE_ADDRESS.lower(), role='guaranteed')

        response = check_wallet(self, '  {} '.format(MIXED_CASE_ADDRESS))

        self.assertTrue(response['data']['whitelisted'])
        self.assertEqual(response['data']['roles'], 'guaranteed')

    def test_legacy_role_gets_fallback_message(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='Graduated_Crown')

        response = check_wallet(self, ADDRESS)

        self.assertTrue(response['data']['whitelisted'])
        self.assertEqual(response['data']['message'], 'Access granted')

    def test_empty_address(self):
        with patch('allowlist.views.get_record_store') as get_store:
            response = check_wallet(self, '', status.HTTP_400_BAD_REQUEST)
            get_store.assert_not_called()

        self.assertEqual(response, {
            'success': False,
            'error': 'Wallet address is required',
            'code': 'address_required',
        })

    def test_missing_address(self):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error'], 'Wallet address is required')

    def test_malformed_address(self):
        for raw in ('not-an-address', '0x123', '0X1234567890123456789012345678901234567890', 12345):
            with patch('allowlist.views.get_record_store') as get_store:
                response = check_wallet(self, raw, status.HTTP_400_BAD_REQUEST)
                get_store.assert_not_called()

            self.assertEqual(response, {
                'success': False,
                'error': 'Invalid wallet address format',
                'code': 'invalid_address_format',
            })

    def test_request_body_must_be_an_object(self):
        response = self.client.post(self.url, [ADDRESS], format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.json()['success'])

    def test_store_failure(self):
        with patch('allowlist.views.get_record_store', return_value=MemoryRecordStore(fail=True)):
            with self.assertLogs('allowlist.resolver', level='ERROR'):
                response = check_wallet(self, ADDRESS, status.HTTP_500_INTERNAL_SERVER_ERROR)

        self.assertEqual(response, {
            'success': False,
            'error': 'Internal server error',
            'code': 'lookup_failed',
        })

    def test_unexpected_store_error(self):
        store = MemoryRecordStore()
        with patch.object(store, 'find_by_key', side_effect=ConnectionError('connection reset')):
            with patch('allowlist.views.get_record_store', return_value=store):
                with self.assertLogs('allowlist.resolver', level='ERROR'):
                    response = check_wallet(self, ADDRESS, status.HTTP_500_INTERNAL_SERVER_ERROR)

        self.assertEqual(response['code'], 'lookup_failed')
        self.assertEqual(response['error'], 'Internal server error')

    def test_only_post_is_allowed(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.json(), {
            'success': False,
            'error': 'Method not allowed. Use POST.',
            'code': 'method_not_allowed',
        })

    def test_unknown_endpoint(self):
        response = self.client.get('/api/wallet/unknown')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['error'], 'Endpoint not found')

    @override_settings(ALLOWLIST_THROTTLE_RATE='2/min')
    def test_rate_limit(self):
        check_wallet(self, ADDRESS)
        check_wallet(self, ADDRESS)
        response = check_wallet(self, ADDRESS, status.HTTP_429_TOO_MANY_REQUESTS)

        self.assertEqual(response['error'], 'Too many requests, please try again later.')

    @override_settings(ALLOWLIST_THROTTLE_RATE=None)
    def test_rate_limit_disabled(self):
        for _ in range(15):
            check_wallet(self, ADDRESS)


class AllowlistRecordTests(TestCase):
    def test_address_is_stored_canonical(self):
        record = AllowlistRecord.objects.create(address=MIXED_CASE_ADDRESS, role='fcfs')

        self.assertEqual(record.address, MIXED_CASE_ADDRESS.lower())
        self.assertTrue(AllowlistRecord.objects.filter(address=MIXED_CASE_ADDRESS.lower()).exists())

    def test_checksummed_address_is_accepted(self):
        record = AllowlistRecord(address='0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed', role='fcfs')
        record.full_clean()

        self.assertEqual(record.address, '0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed')

    def test_invalid_address_is_rejected(self):
        for raw in ('0x123', '0X1234567890123456789012345678901234567890', 'not-an-address'):
            with self.assertRaises(ValidationError):
                AllowlistRecord.objects.create(address=raw, role='fcfs')
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_case_variants_are_one_address(self):
        AllowlistRecord.objects.create(address=MIXED_CASE_ADDRESS.lower(), role='fcfs')
        with self.assertRaises(ValidationError):
            AllowlistRecord.objects.create(address=MIXED_CASE_ADDRESS, role='whitelist')

    def test_address_is_unique(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')
        with self.assertRaises(ValidationError):
            AllowlistRecord.objects.create(address=ADDRESS, role='whitelist')

    def test_bookkeeping_defaults(self):
        record = AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        self.assertTrue(record.active)
        self.assertIsNotNone(record.created_at)
        self.assertIsNotNone(record.updated_at)

    def test_text_representation_is_checksummed(self):
        record = AllowlistRecord(
            address='0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed', role='fcfs')

        self.assertEqual(str(record), '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed')


class DjangoRecordStoreTests(TestCase):
    def setUp(self):
        self.store = DjangoRecordStore()

    def test_find_by_key(self):
        record = AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        self.assertEqual(self.store.find_by_key(ADDRESS), record)
        self.assertIsNone(self.store.find_by_key(random_address()))

    def test_database_error_is_store_unavailable(self):
        with patch.object(AllowlistRecord.objects, 'filter', side_effect=OperationalError('database is locked')):
            with self.assertRaises(StoreUnavailable):
                self.store.find_by_key(ADDRESS)

    def test_default_store_follows_settings(self):
        self.assertIsInstance(get_record_store(), DjangoRecordStore)
        self.assertIs(get_record_store(), get_record_store())

        with override_settings(ALLOWLIST_RECORD_STORE='allowlist.store.MemoryRecordStore'):
            self.assertIsInstance(get_record_store(), MemoryRecordStore)

        self.assertIsInstance(get_record_store(), DjangoRecordStore)


@override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='presale')
class LoaderTests(TestCase):
    def write_address_file(self, lines):
        address_file = tempfile.NamedTemporaryFile(
            mode='w', suffix='.txt', delete=False, encoding='utf-8')
        address_file.write('\n'.join(lines))
        address_file.close()
        self.addCleanup(os.remove, address_file.name)
        return address_file.name

    def test_read_address_file(self):
        path = self.write_address_file([
            '# presale wallets',
            ADDRESS,
            '',
            '   {}   '.format(MIXED_CASE_ADDRESS),
            'not-an-address',
        ])

        self.assertEqual(read_address_file(path), [ADDRESS, MIXED_CASE_ADDRESS, 'not-an-address'])

    def test_undecodable_line_is_skipped_as_invalid(self):
        address_file = tempfile.NamedTemporaryFile(suffix='.txt', delete=False)
        address_file.write('{}\n'.format(ADDRESS).encode('ascii') + b'\xff\xfebad\n')
        address_file.close()
        self.addCleanup(os.remove, address_file.name)

        lines = read_address_file(address_file.name)
        report = add_records(lines, 'whitelist')

        self.assertEqual(len(lines), 2)
        self.assertEqual(report['added'], 1)
        self.assertEqual(report['skipped_invalid'], 1)
        self.assertTrue(AllowlistRecord.objects.filter(address=ADDRESS).exists())

    def test_add_records(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        report = add_records(
            [ADDRESS, MIXED_CASE_ADDRESS, 'not-an-address', MIXED_CASE_ADDRESS.lower()], 'whitelist')

        self.assertEqual(report['added'], 1)
        self.assertEqual(report['skipped_duplicate'], 2)
        self.assertEqual(report['skipped_invalid'], 1)
        self.assertEqual(report.total, 4)
        self.assertEqual(AllowlistRecord.objects.get(address=ADDRESS).role, 'fcfs')
        self.assertEqual(
            AllowlistRecord.objects.get(address=MIXED_CASE_ADDRESS.lower()).role, 'whitelist')

    def test_add_rejects_unknown_role(self):
        with self.assertRaises(UnknownRole):
            add_records([ADDRESS], 'Crown')
        self.assertFalse(AllowlistRecord.objects.exists())

        report = add_records([ADDRESS], 'Crown', allow_unknown_role=True)
        self.assertEqual(report['added'], 1)

    def test_add_keeps_going_after_a_failed_item(self):
        original_create = AllowlistRecord.objects.create
        calls = []

        def flaky_create(**kwargs):
            calls.append(kwargs['address'])
            if len(calls) == 1:
                raise OperationalError('connection reset')
            return original_create(**kwargs)

        with patch.object(AllowlistRecord.objects, 'create', side_effect=flaky_create):
            report = add_records([ADDRESS, MIXED_CASE_ADDRESS], 'fcfs')

        self.assertEqual(report['failed'], 1)
        self.assertEqual(report['added'], 1)
        self.assertTrue(AllowlistRecord.objects.filter(address=MIXED_CASE_ADDRESS.lower()).exists())

    def test_upsert_records(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        report = upsert_records([ADDRESS.upper().replace('0X', '0x'), MIXED_CASE_ADDRESS, '0x123'], 'guaranteed')

        self.assertEqual(report['updated'], 1)
        self.assertEqual(report['added'], 1)
        self.assertEqual(report['skipped_invalid'], 1)
        self.assertEqual(
            set(AllowlistRecord.objects.values_list('role', flat=True)), {'guaranteed'})

    def test_delete_records(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        report = delete_records([' {} '.format(ADDRESS), MIXED_CASE_ADDRESS, 'nope'])

        self.assertEqual(report['deleted'], 1)
        self.assertEqual(report['not_found'], 1)
        self.assertEqual(report['skipped_invalid'], 1)
        self.assertEqual(report.summary(),
                         'Finished delete of 3 wallets. Deleted: 1, Not found: 1, Skipped invalid: 1, Failed: 0')
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_clear_records(self):
        populate_allowlist(5, 'fcfs')

        self.assertEqual(clear_records(), 5)
        self.assertFalse(AllowlistRecord.objects.exists())


@override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='presale')
class AllowlistCommandTests(TestCase):
    def call(self, *args):
        out = StringIO()
        call_command('allowlist', *args, stdout=out)
        return out.getvalue()

    def write_address_file(self, lines):
        address_file = tempfile.NamedTemporaryFile(
            mode='w', suffix='.txt', delete=False, encoding='utf-8')
        address_file.write('\n'.join(lines))
        address_file.close()
        self.addCleanup(os.remove, address_file.name)
        return address_file.name

    def test_add_single_wallet(self):
        output = self.call('add', ADDRESS, '--role', 'whitelist')

        self.assertIn('Added: 1', output)
        self.assertEqual(AllowlistRecord.objects.get(address=ADDRESS).role, 'whitelist')

    def test_add_from_file(self):
        path = self.write_address_file([ADDRESS, 'garbage', MIXED_CASE_ADDRESS])

        output = self.call('add', '--file', path, '--role', 'fcfs')

        self.assertIn('Read 3 addresses from', output)
        self.assertIn('Added: 2', output)
        self.assertIn('Skipped invalid: 1', output)
        self.assertEqual(AllowlistRecord.objects.filter(role='fcfs').count(), 2)

    def test_add_from_file_and_arguments(self):
        path = self.write_address_file([MIXED_CASE_ADDRESS])

        output = self.call('add', ADDRESS, '--file', path, '--role', 'fcfs')

        self.assertIn('Read 1 addresses from', output)
        self.assertIn('Finished add of 2 wallets', output)
        self.assertEqual(AllowlistRecord.objects.count(), 2)

    def test_add_from_file_with_undecodable_line(self):
        address_file = tempfile.NamedTemporaryFile(suffix='.txt', delete=False)
        address_file.write('{}\n'.format(ADDRESS).encode('ascii') + b'\xff\xfebad\n')
        address_file.close()
        self.addCleanup(os.remove, address_file.name)

        output = self.call('add', '--file', address_file.name, '--role', 'whitelist')

        self.assertIn('Added: 1', output)
        self.assertIn('Skipped invalid: 1', output)
        self.assertEqual(AllowlistRecord.objects.get(address=ADDRESS).role, 'whitelist')

    def test_add_unknown_role(self):
        with self.assertRaises(CommandError):
            self.call('add', ADDRESS, '--role', 'Crown')
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_add_without_addresses(self):
        with self.assertRaises(CommandError):
            self.call('add', '--role', 'fcfs')

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            self.call('add', '--file', '/nonexistent/wallets.txt', '--role', 'fcfs')

    def test_replace_from_file(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')
        path = self.write_address_file([ADDRESS, MIXED_CASE_ADDRESS])

        output = self.call('replace', '--file', path, '--role', 'guaranteed')

        self.assertIn('Updated: 1', output)
        self.assertIn('Added: 1', output)
        self.assertEqual(AllowlistRecord.objects.get(address=ADDRESS).role, 'guaranteed')

    def test_delete(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        output = self.call('delete', ADDRESS, MIXED_CASE_ADDRESS)

        self.assertIn('Deleted: 1', output)
        self.assertIn('Not found: 1', output)
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_clear(self):
        populate_allowlist(3, 'whitelist')

        output = self.call('clear', '--noinput')

        self.assertIn('Cleared 3 wallets.', output)
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_clear_cancelled(self):
        populate_allowlist(2, 'whitelist')

        with patch('builtins.input', return_value='n'):
            output = self.call('clear')

        self.assertIn('Operation cancelled.', output)
        self.assertEqual(AllowlistRecord.objects.count(), 2)

    def test_seed_every_role(self):
        output = self.call('seed', '--count', '2')

        self.assertIn('Inserted 6 sample wallets.', output)
        for role in ('whitelist', 'fcfs', 'guaranteed'):
            self.assertEqual(AllowlistRecord.objects.filter(role=role).count(), 2)

    def test_seed_replaces_existing_wallets(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        output = self.call('seed', '--role', 'guaranteed', '--noinput')

        self.assertIn('Found 1 existing wallets.', output)
        self.assertIn('Cleared 1 wallets.', output)
        self.assertFalse(AllowlistRecord.objects.filter(address=ADDRESS).exists())
        self.assertEqual(AllowlistRecord.objects.filter(role='guaranteed').count(), 3)

    def test_seed_cancelled(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        with patch('builtins.input', return_value='n'):
            output = self.call('seed')

        self.assertIn('Operation cancelled.', output)
        self.assertEqual(list(AllowlistRecord.objects.values_list('address', flat=True)), [ADDRESS])

    def test_seed_unknown_role(self):
        with self.assertRaises(CommandError):
            self.call('seed', '--role', 'Crown')
        self.assertFalse(AllowlistRecord.objects.exists())

    def test_check(self):
        AllowlistRecord.objects.create(address=ADDRESS, role='fcfs')

        self.assertIn(PRESALE['fcfs']['message'], self.call('check', ADDRESS))
        self.assertIn('Address not found in allowlist', self.call('check', MIXED_CASE_ADDRESS))

        with self.assertRaises(CommandError):
            self.call('check', 'not-an-address')

    def test_roles(self):
        output = self.call('roles')

        for role in ('whitelist', 'fcfs', 'guaranteed'):
            self.assertIn(role, output)
