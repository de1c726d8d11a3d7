import logging

from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import ErrorDetail, Throttled, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from allowlist_api.models import ErrorCode

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = 'Internal server error'
THROTTLED_MESSAGE = 'Too many requests, please try again later.'
NOT_FOUND_MESSAGE = 'Endpoint not found'


def error_envelope(message, code):
    return {
        'success': False,
        'error': message,
        'code': code,
    }


def first_error(detail):
    # validation details nest as {field: [ErrorDetail, ...]} or lists thereof
    if isinstance(detail, dict):
        for value in detail.values():
            return first_error(value)
    elif isinstance(detail, list):
        if detail:
            return first_error(detail[0])
    elif isinstance(detail, ErrorDetail):
        return str(detail), detail.code
    elif detail is not None:
        return str(detail), ErrorCode.INVALID_REQUEST

    return 'Invalid request', ErrorCode.INVALID_REQUEST


def custom_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error('Unhandled error in {}'.format(view.__class__.__name__),
                     exc_info=(type(exc), exc, exc.__traceback__))
        return Response(
            error_envelope(GENERIC_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, Throttled):
        response.data = error_envelope(
            THROTTLED_MESSAGE, ErrorCode.TOO_MANY_REQUESTS)
    elif isinstance(exc, ValidationError):
        response.data = error_envelope(*first_error(exc.detail))
    else:
        response.data = error_envelope(*first_error(getattr(exc, 'detail', None)))

    return response


def endpoint_not_found(request, exception=None):
    return JsonResponse(
        error_envelope(NOT_FOUND_MESSAGE, ErrorCode.ENDPOINT_NOT_FOUND),
        status=status.HTTP_404_NOT_FOUND)


def server_error(request):
    return JsonResponse(
        error_envelope(GENERIC_ERROR_MESSAGE, ErrorCode.INTERNAL_ERROR),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
