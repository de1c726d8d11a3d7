from django.contrib import admin
from django.urls import include, re_path
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="WALLET ALLOWLIST API",
    description="Look up whether a wallet address is on the allowlist and which role it holds.",
    default_version='v1',
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)


urlpatterns = [
    re_path(r'^admin/', admin.site.urls),
    re_path(r'^api/', include('allowlist.urls')),
    re_path(r'^api/', include('analytics.urls')),
    re_path(r'^api/', include('heartbeat.urls')),
    re_path(r'^swagger/$', schema_view.with_ui('swagger',
                                               cache_timeout=0), name='schema-swagger-ui'),
    re_path(r'^redoc/$', schema_view.with_ui('redoc',
                                             cache_timeout=0), name='schema-redoc'),
]

handler404 = 'allowlist_api.exception_handler.endpoint_not_found'
handler500 = 'allowlist_api.exception_handler.server_error'
