from django.urls import re_path
from . import views

urlpatterns = [
    re_path(r'^stats/?$', views.AllowlistStatsView.as_view(),
            name='allowlist-stats'),
]
