from django.conf import settings
from django.utils import timezone
from rest_framework import generics
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from django.utils.decorators import method_decorator

from allowlist_api.mixins import SingleMethodMixin
from allowlist_api.models import MockModel
from .serializers import HealthSerializer


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="Liveness probe of the allowlist API.",
))
class HealthView(SingleMethodMixin, generics.GenericAPIView):
    serializer_class = HealthSerializer
    queryset = ''

    def get(self, request, *args, **kwargs):
        data_model = MockModel(
            success=True,
            message='Wallet checker API is running',
            timestamp=timezone.now(),
            environment=settings.ENVIRONMENT)

        return Response(
            status=200,
            data=HealthSerializer(data_model).data
        )
