import re

from eth_utils import to_checksum_address

ADDRESS_PREFIX = '0x'
ADDRESS_LENGTH = 42

# the prefix is matched literally, only the body is case-insensitive
HEX_BODY = re.compile(r'[0-9a-fA-F]{40}')


class InvalidAddress(ValueError):
    pass


class MissingAddress(InvalidAddress):
    pass


def validate(raw):
    """
    Syntactic check of an EVM-style address: surrounding whitespace is
    ignored, the value must start with a lowercase `0x`, be exactly 42
    characters long and carry 40 hexadecimal digits after the prefix.
    Never raises, any non-string input is simply invalid.
    """
    if not isinstance(raw, str):
        return False

    value = raw.strip()

    if not value.startswith(ADDRESS_PREFIX):
        return False

    if len(value) != ADDRESS_LENGTH:
        return False

    return HEX_BODY.fullmatch(value[len(ADDRESS_PREFIX):]) is not None


def canonicalize(raw):
    """
    Lookup key of a valid address: trimmed and lower-cased.
    """
    if not validate(raw):
        raise InvalidAddress('Invalid wallet address format: {!r}'.format(raw))
    return raw.strip().lower()


def is_canonical(value):
    return validate(value) and value == value.strip().lower()


def to_checksum(raw):
    return to_checksum_address(canonicalize(raw))


def format_for_display(address, start_chars=6, end_chars=4):
    if not validate(address):
        return address

    value = address.strip()

    if len(value) <= start_chars + end_chars:
        return value

    return '{}...{}'.format(value[:start_chars], value[-end_chars:])
