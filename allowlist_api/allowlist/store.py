import logging
import threading

from django.apps import apps
from django.conf import settings
from django.core.signals import setting_changed
from django.db import DatabaseError
from django.dispatch import receiver
from django.utils.module_loading import import_string

from allowlist_api.address import canonicalize

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    pass


class RecordStore(object):
    """
    Read capability over allowlist records, keyed by canonical address.

    `find_by_key` returns the record or None. Backend errors should be raised
    as `StoreUnavailable`, any other exception is still reported as a failed
    lookup.
    """

    def find_by_key(self, key):
        raise NotImplementedError


class DjangoRecordStore(RecordStore):
    def find_by_key(self, key):
        AllowlistRecord = apps.get_model('allowlist', 'AllowlistRecord')
        try:
            return AllowlistRecord.objects.filter(address=key).first()
        except DatabaseError as e:
            raise StoreUnavailable('Allowlist lookup failed.') from e


class MemoryRecordStore(RecordStore):
    def __init__(self, records=None, fail=False):
        self.records = dict(records or {})
        self.fail = fail
        self.lookups = []

    def add(self, address, role):
        AllowlistRecord = apps.get_model('allowlist', 'AllowlistRecord')
        key = canonicalize(address)
        self.records[key] = AllowlistRecord(address=key, role=role)
        return self.records[key]

    def find_by_key(self, key):
        self.lookups.append(key)
        if self.fail:
            raise StoreUnavailable('Allowlist store is offline.')
        return self.records.get(key)


_default_store = None
_default_store_lock = threading.Lock()


def get_record_store():
    global _default_store

    if _default_store is None:
        with _default_store_lock:
            if _default_store is None:
                store_class = import_string(settings.ALLOWLIST_RECORD_STORE)
                _default_store = store_class()
                logger.info('Using {} allowlist store'.format(
                    settings.ALLOWLIST_RECORD_STORE))

    return _default_store


def reset_record_store():
    global _default_store

    with _default_store_lock:
        _default_store = None


@receiver(setting_changed)
def reset_record_store_on_change(setting, **kwargs):
    if setting == 'ALLOWLIST_RECORD_STORE':
        reset_record_store()
