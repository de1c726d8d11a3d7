from rest_framework import generics
from rest_framework.response import Response
from django.db.models import Count

from allowlist.models import AllowlistRecord
from allowlist_api.mixins import SingleMethodMixin
from allowlist_api.models import MockModel
from .serializers import AllowlistStatsSerializer, AllowlistStatsResponseSerializer
from drf_yasg.utils import swagger_auto_schema
from django.utils.decorators import method_decorator


def count_per_role(query):
    return query.values('role').annotate(count=Count('id')).order_by('role')


@method_decorator(name='get', decorator=swagger_auto_schema(
    operation_description="Retrieve the number of allowlisted wallets, in total and per role.",
    responses={200: AllowlistStatsResponseSerializer},
))
class AllowlistStatsView(SingleMethodMixin, generics.GenericAPIView):
    serializer_class = AllowlistStatsSerializer
    queryset = ''

    def get(self, request, *args, **kwargs):
        records_total = AllowlistRecord.objects.all().count()
        records_per_role = {
            row['role']: row['count']
            for row in count_per_role(AllowlistRecord.objects.all())
        }

        data_model = MockModel(
            total=records_total, by_role=records_per_role)

        return Response(
            status=200,
            data={
                'success': True,
                'data': AllowlistStatsSerializer(data_model).data
            }
        )
