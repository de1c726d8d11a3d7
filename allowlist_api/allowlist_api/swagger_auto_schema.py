from drf_yasg import openapi
from drf_yasg.inspectors.view import SwaggerAutoSchema
from rest_framework import status
from allowlist_api.exception_handler import GENERIC_ERROR_MESSAGE, THROTTLED_MESSAGE
from allowlist_api.models import ErrorCode, ALL_ERROR_CODES


class ErrorResponseAutoSchema(SwaggerAutoSchema):

    def get_error_schema(self, error_codes=None):
        error_codes = error_codes or ALL_ERROR_CODES
        return openapi.Schema(
            'Error',
            type=openapi.TYPE_OBJECT,
            properties={
                'success': openapi.Schema(type=openapi.TYPE_BOOLEAN, default=False),
                'error': openapi.Schema(type=openapi.TYPE_STRING, description='Error details'),
                'code': openapi.Schema(type=openapi.TYPE_STRING, description='Error code', enum=error_codes),
            },
            required=['success', 'error']
        )

    def get_response_serializers(self):
        responses = super().get_response_serializers()
        definitions = self.components.with_scope(
            openapi.SCHEMA_DEFINITIONS)  # type: openapi.ReferenceResolver

        definitions.setdefault('Error', self.get_error_schema)

        responses.setdefault(status.HTTP_429_TOO_MANY_REQUESTS, openapi.Response(
            description=THROTTLED_MESSAGE,
            schema=openapi.SchemaRef(definitions, 'Error')
        ))
        responses.setdefault(status.HTTP_500_INTERNAL_SERVER_ERROR, openapi.Response(
            description=GENERIC_ERROR_MESSAGE,
            schema=openapi.SchemaRef(definitions, 'Error')
        ))

        serializer = self.get_request_serializer() or self.get_query_serializer()

        if serializer:
            meta = getattr(serializer.__class__, 'Meta', None)
            if meta and 'error_codes' in meta.__dict__:
                responses.setdefault(status.HTTP_400_BAD_REQUEST, openapi.Response(
                    description='Invalid request.',
                    schema=self.get_error_schema(
                        error_codes=meta.error_codes + [ErrorCode.INVALID_REQUEST])
                ))
            else:
                responses.setdefault(status.HTTP_400_BAD_REQUEST, openapi.Response(
                    description='Invalid request.',
                    schema=openapi.SchemaRef(definitions, 'Error')
                ))

        return responses
