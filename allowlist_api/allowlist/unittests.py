from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from allowlist_api import address
from allowlist.resolver import (
    resolve, check_address, Eligible, NotEligible, LookupFailed, NOT_FOUND_MESSAGE, LOOKUP_FAILED_MESSAGE)
from allowlist.roles import RoleCatalog, ROLE_PRESETS, FALLBACK_ROLE_MESSAGE, UnknownRole
from allowlist.store import MemoryRecordStore, RecordStore

ADDRESS = '0x1234567890123456789012345678901234567890'


class RoleCatalogTests(SimpleTestCase):
    def setUp(self):
        self.catalog = RoleCatalog(ROLE_PRESETS['presale'])

    def test_configured_role_message(self):
        self.assertEqual(
            self.catalog.role_message('whitelist'),
            'You have whitelist access! You can participate in the whitelist round.')
        self.assertEqual(self.catalog.label('fcfs'), 'FCFS')

    def test_unknown_role_falls_back(self):
        self.assertEqual(self.catalog.role_message('Crown'), FALLBACK_ROLE_MESSAGE)
        self.assertEqual(self.catalog.role_message(''), 'Access granted')
        self.assertEqual(self.catalog.label('Crown'), 'Crown')

    def test_roles_keep_configuration_order(self):
        self.assertEqual(self.catalog.roles(), ['whitelist', 'fcfs', 'guaranteed'])
        self.assertIn('guaranteed', self.catalog)
        self.assertNotIn('Guaranteed', self.catalog)

    def test_require(self):
        self.assertEqual(self.catalog.require('fcfs'), 'fcfs')
        with self.assertRaises(UnknownRole):
            self.catalog.require('vip')

    def test_plain_message_mapping(self):
        catalog = RoleCatalog({'vip': 'Welcome aboard.'})
        self.assertEqual(catalog.role_message('vip'), 'Welcome aboard.')
        self.assertEqual(catalog.label('vip'), 'vip')

    @override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='crown')
    def test_preset_from_settings(self):
        catalog = RoleCatalog.from_settings()
        self.assertEqual(catalog.roles(), ['Crown', 'Loyal_Crown', 'Graduated_Crown'])

    @override_settings(ALLOWLIST_ROLES={'gold': {'label': 'Gold', 'message': 'Gold tier.'}})
    def test_explicit_roles_override_preset(self):
        catalog = RoleCatalog.from_settings()
        self.assertEqual(catalog.roles(), ['gold'])
        self.assertEqual(catalog.role_message('gold'), 'Gold tier.')

    @override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='missing')
    def test_unknown_preset(self):
        with self.assertRaises(ImproperlyConfigured):
            RoleCatalog.from_settings()


class ResolverTests(SimpleTestCase):
    def setUp(self):
        self.catalog = RoleCatalog(ROLE_PRESETS['presale'])
        self.store = MemoryRecordStore()

    def test_absent_record(self):
        outcome = resolve(ADDRESS, self.store, catalog=self.catalog)

        self.assertEqual(outcome, NotEligible(NOT_FOUND_MESSAGE))
        self.assertFalse(outcome.whitelisted)
        self.assertIsNone(outcome.role)
        self.assertEqual(self.store.lookups, [ADDRESS])

    def test_every_configured_role(self):
        for role in self.catalog.roles():
            self.store.add(ADDRESS, role)
            outcome = resolve(ADDRESS, self.store, catalog=self.catalog)

            self.assertIsInstance(outcome, Eligible)
            self.assertTrue(outcome.whitelisted)
            self.assertEqual(outcome.role, role)
            self.assertEqual(outcome.message, self.catalog.role_message(role))

    def test_legacy_role(self):
        self.store.add(ADDRESS, 'Loyal_Crown')
        outcome = resolve(ADDRESS, self.store, catalog=self.catalog)

        self.assertEqual(outcome.role, 'Loyal_Crown')
        self.assertEqual(outcome.message, FALLBACK_ROLE_MESSAGE)
        self.assertEqual(outcome.label, 'Loyal_Crown')

    def test_store_failure(self):
        store = MemoryRecordStore(fail=True)

        with self.assertLogs('allowlist.resolver', level='ERROR'):
            outcome = resolve(ADDRESS, store, catalog=self.catalog)

        self.assertIsInstance(outcome, LookupFailed)
        self.assertTrue(outcome.failed)
        self.assertEqual(outcome.message, LOOKUP_FAILED_MESSAGE)
        self.assertEqual(store.lookups, [ADDRESS])

    def test_unexpected_store_error(self):
        class TimingOutStore(RecordStore):
            def find_by_key(self, key):
                raise TimeoutError('store timed out')

        with self.assertLogs('allowlist.resolver', level='ERROR') as logs:
            outcome = resolve(ADDRESS, TimingOutStore(), catalog=self.catalog)

        self.assertEqual(outcome, LookupFailed(LOOKUP_FAILED_MESSAGE))
        self.assertIn('TimeoutError', '\n'.join(logs.output))

    @override_settings(ALLOWLIST_ROLES=None, ALLOWLIST_ROLE_PRESET='presale')
    def test_default_catalog(self):
        self.store.add(ADDRESS, 'guaranteed')
        outcome = resolve(ADDRESS, self.store)

        self.assertEqual(outcome.message, ROLE_PRESETS['presale']['guaranteed']['message'])


class CheckAddressTests(SimpleTestCase):
    def setUp(self):
        self.catalog = RoleCatalog(ROLE_PRESETS['presale'])
        self.store = MemoryRecordStore()

    def test_not_eligible(self):
        outcome = check_address(ADDRESS, self.store, catalog=self.catalog)

        self.assertFalse(outcome.whitelisted)
        self.assertEqual(outcome.message, 'Address not found in allowlist')

    def test_eligible(self):
        self.store.add(ADDRESS, 'whitelist')
        outcome = check_address(ADDRESS, self.store, catalog=self.catalog)

        self.assertTrue(outcome.whitelisted)
        self.assertEqual(outcome.message, self.catalog.role_message('whitelist'))

    def test_lookup_uses_canonical_key(self):
        key = '0xabcdef0123456789abcdef0123456789abcdef12'
        self.store.add(key, 'fcfs')
        outcome = check_address('  0xAbCdEf0123456789aBcDeF0123456789ABCDEF12  ',
                                self.store, catalog=self.catalog)

        self.assertTrue(outcome.whitelisted)
        self.assertEqual(self.store.lookups, [key])

    def test_missing_address_never_reaches_store(self):
        for raw in (None, ''):
            with self.assertRaises(address.MissingAddress):
                check_address(raw, self.store, catalog=self.catalog)
        self.assertEqual(self.store.lookups, [])

    def test_malformed_address_never_reaches_store(self):
        for raw in ('not-an-address', '0x123', '0X1234567890123456789012345678901234567890'):
            with self.assertRaises(address.InvalidAddress):
                check_address(raw, self.store, catalog=self.catalog)
        self.assertEqual(self.store.lookups, [])
