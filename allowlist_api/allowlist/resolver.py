import logging

from allowlist_api import address
from .roles import RoleCatalog

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

NOT_FOUND_MESSAGE = 'Address not found in allowlist'
LOOKUP_FAILED_MESSAGE = 'Internal server error'


class EligibilityOutcome(object):
    whitelisted = False
    failed = False

    def __init__(self, message, role=None, label=None):
        self.message = message
        self.role = role
        self.label = label

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        return '{}(role={!r}, message={!r})'.format(
            self.__class__.__name__, self.role, self.message)


class Eligible(EligibilityOutcome):
    whitelisted = True


class NotEligible(EligibilityOutcome):
    pass


class LookupFailed(EligibilityOutcome):
    failed = True


def resolve(key, lookup, catalog=None):
    """
    Classify a canonical address against the allowlist.

    Performs exactly one `lookup.find_by_key(key)`. A store failure becomes
    a `LookupFailed` outcome with a generic message, whatever the store
    raised. The cause is logged here and never handed to the caller.
    """
    try:
        record = lookup.find_by_key(key)
    except Exception:
        logger.error('Allowlist lookup failed for {}'.format(key), exc_info=True)
        return LookupFailed(LOOKUP_FAILED_MESSAGE)

    if record is None:
        return NotEligible(NOT_FOUND_MESSAGE)

    catalog = catalog or RoleCatalog.from_settings()

    return Eligible(
        message=catalog.role_message(record.role),
        role=record.role,
        label=catalog.label(record.role))


def check_address(raw, lookup, catalog=None):
    # the store is only consulted once the input is fully validated
    if raw is None or raw == '':
        raise address.MissingAddress('Wallet address is required')

    if not address.validate(raw):
        raise address.InvalidAddress('Invalid wallet address format')

    return resolve(address.canonicalize(raw), lookup, catalog=catalog)
