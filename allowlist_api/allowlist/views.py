from rest_framework import generics, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from django.utils.decorators import method_decorator

from allowlist_api.mixins import SingleMethodMixin
from allowlist_api.models import ErrorCode
from .resolver import resolve, LOOKUP_FAILED_MESSAGE
from .serializers import WalletCheckSerializer, EligibilitySerializer, WalletCheckResponseSerializer
from .store import get_record_store


class LookupUnavailable(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = LOOKUP_FAILED_MESSAGE
    default_code = ErrorCode.LOOKUP_FAILED


@method_decorator(name='post', decorator=swagger_auto_schema(
    operation_description="Check whether a wallet address is on the allowlist and which role it holds.",
    responses={status.HTTP_200_OK: WalletCheckResponseSerializer},
))
class WalletCheckView(SingleMethodMixin, generics.GenericAPIView):
    serializer_class = WalletCheckSerializer

    def post(self, request, format=None):
        serializer = WalletCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = resolve(
            serializer.validated_data.get('address'),
            get_record_store())

        if outcome.failed:
            raise LookupUnavailable()

        return Response(
            status=status.HTTP_200_OK,
            data={
                'success': True,
                'data': EligibilitySerializer(outcome).data
            })
