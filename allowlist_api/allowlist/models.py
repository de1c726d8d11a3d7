from django.core.exceptions import ValidationError
from django.db import models

from allowlist_api.address import canonicalize, validate, to_checksum
from allowlist_api.models import TimestampedCleanModel


# One allowlisted wallet. Written only by the administrative tooling,
# lookups read it by the canonical (lowercase, 0x-prefixed) address.
class AllowlistRecord(TimestampedCleanModel):
    address = models.CharField(
        max_length=42,
        unique=True)
    role = models.CharField(
        max_length=64,
        db_index=True)
    active = models.BooleanField(
        default=True)

    # checksummed or mixed-case input is stored in canonical form
    def clean(self):
        if not validate(self.address):
            raise ValidationError(
                {'address': 'Address must be 0x followed by 40 hex digits.'})
        self.address = canonicalize(self.address)

    # Text representation of a record is its checksummed address
    def __str__(self):
        return to_checksum(self.address)
