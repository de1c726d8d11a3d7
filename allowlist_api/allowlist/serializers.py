from rest_framework import serializers
from rest_framework.fields import empty

from allowlist_api import address
from allowlist_api.models import ErrorCode


class WalletAddressField(serializers.Field):
    default_error_messages = {
        ErrorCode.ADDRESS_REQUIRED: 'Wallet address is required',
        ErrorCode.INVALID_ADDRESS_FORMAT: 'Invalid wallet address format',
    }

    def validate_empty_values(self, data):
        if data is empty or data is None or data == '':
            self.fail(ErrorCode.ADDRESS_REQUIRED)
        return (False, data)

    def to_internal_value(self, data):
        if not address.validate(data):
            self.fail(ErrorCode.INVALID_ADDRESS_FORMAT)
        return address.canonicalize(data)

    def to_representation(self, value):
        return value


class WalletCheckSerializer(serializers.Serializer):
    address = WalletAddressField(
        help_text='Wallet address, 0x followed by 40 hex digits.')

    class Meta:
        ref_name = None
        error_codes = [
            ErrorCode.ADDRESS_REQUIRED,
            ErrorCode.INVALID_ADDRESS_FORMAT,
        ]


class EligibilitySerializer(serializers.Serializer):
    whitelisted = serializers.BooleanField(read_only=True)
    roles = serializers.CharField(source='role', read_only=True, required=False)
    label = serializers.CharField(read_only=True, required=False)
    message = serializers.CharField(read_only=True)

    def to_representation(self, outcome):
        data = {
            'whitelisted': outcome.whitelisted,
            'message': outcome.message,
        }
        if outcome.whitelisted:
            data['roles'] = outcome.role
            data['label'] = outcome.label
        return data


class WalletCheckResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(read_only=True)
    data = EligibilitySerializer(read_only=True)
