class ErrorCode:
    ADDRESS_REQUIRED = 'address_required'
    INVALID_ADDRESS_FORMAT = 'invalid_address_format'
    INVALID_REQUEST = 'invalid'
    LOOKUP_FAILED = 'lookup_failed'
    METHOD_NOT_ALLOWED = 'method_not_allowed'
    ENDPOINT_NOT_FOUND = 'not_found'
    TOO_MANY_REQUESTS = 'throttled'
    INTERNAL_ERROR = 'internal_error'


ALL_ERROR_CODES = [
    value for key, value in vars(ErrorCode).items() if not key.startswith('_')
]
