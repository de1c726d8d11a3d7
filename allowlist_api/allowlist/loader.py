import logging
from collections import Counter

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from allowlist_api import address
from .models import AllowlistRecord
from .roles import RoleCatalog

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class BatchReport(object):
    """
    Per-item tally of one administrative batch. Items never abort the batch,
    each one lands in exactly one bucket.
    """
    BUCKETS = {
        'add': ('added', 'skipped_duplicate', 'skipped_invalid', 'failed'),
        'replace': ('added', 'updated', 'skipped_invalid', 'failed'),
        'delete': ('deleted', 'not_found', 'skipped_invalid', 'failed'),
    }

    def __init__(self, action):
        self.action = action
        self.counts = Counter()

    def record(self, bucket):
        self.counts[bucket] += 1

    def __getitem__(self, bucket):
        return self.counts[bucket]

    @property
    def total(self):
        return sum(self.counts.values())

    def summary(self):
        return 'Finished {} of {} wallets. {}'.format(
            self.action,
            self.total,
            ', '.join('{}: {}'.format(bucket.replace('_', ' ').capitalize(), self.counts[bucket])
                      for bucket in self.BUCKETS[self.action]))


def read_address_file(path):
    # one address per line, blank lines and `#` comments are ignored;
    # undecodable bytes are replaced so the line fails address validation
    with open(path, encoding='utf-8', errors='replace') as address_file:
        lines = [line.strip() for line in address_file]
    return [line for line in lines if line and not line.startswith('#')]


def _check_role(role, catalog, allow_unknown_role):
    if allow_unknown_role:
        return role
    catalog = catalog or RoleCatalog.from_settings()
    return catalog.require(role)


def _valid_addresses(addresses, report):
    for raw in addresses:
        if not address.validate(raw):
            logger.warning('Skipping invalid address format: {}'.format(raw))
            report.record('skipped_invalid')
            continue
        yield raw, address.canonicalize(raw)


def add_records(addresses, role, catalog=None, allow_unknown_role=False):
    role = _check_role(role, catalog, allow_unknown_role)
    report = BatchReport('add')

    for raw, key in _valid_addresses(addresses, report):
        try:
            with transaction.atomic():
                if AllowlistRecord.objects.filter(address=key).exists():
                    logger.warning('Skipping duplicate wallet address: {}'.format(raw))
                    report.record('skipped_duplicate')
                    continue

                AllowlistRecord.objects.create(address=key, role=role)
        except (DatabaseError, ValidationError) as e:
            logger.error('Could not add wallet {}: {}'.format(raw, e))
            report.record('failed')
            continue

        logger.info('Added wallet: {} with role: {}'.format(key, role))
        report.record('added')

    return report


def upsert_records(addresses, role, catalog=None, allow_unknown_role=False):
    role = _check_role(role, catalog, allow_unknown_role)
    report = BatchReport('replace')

    for raw, key in _valid_addresses(addresses, report):
        try:
            with transaction.atomic():
                record, created = AllowlistRecord.objects.update_or_create(
                    address=key,
                    defaults={'role': role})
        except (DatabaseError, ValidationError) as e:
            logger.error('Could not replace wallet {}: {}'.format(raw, e))
            report.record('failed')
            continue

        if created:
            logger.info('Added wallet: {} with role: {}'.format(key, role))
            report.record('added')
        else:
            logger.info('Updated wallet: {} with new role: {}'.format(key, role))
            report.record('updated')

    return report


def delete_records(addresses):
    report = BatchReport('delete')

    for raw, key in _valid_addresses(addresses, report):
        try:
            with transaction.atomic():
                deleted, _ = AllowlistRecord.objects.filter(address=key).delete()
        except DatabaseError as e:
            logger.error('Could not delete wallet {}: {}'.format(raw, e))
            report.record('failed')
            continue

        if deleted:
            logger.info('Deleted wallet: {}'.format(key))
            report.record('deleted')
        else:
            logger.warning('Wallet not found (nothing deleted): {}'.format(raw))
            report.record('not_found')

    return report


def clear_records():
    deleted, _ = AllowlistRecord.objects.all().delete()
    logger.info('Cleared {} wallets.'.format(deleted))
    return deleted
