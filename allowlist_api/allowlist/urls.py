from django.urls import re_path
from . import views

urlpatterns = [
    re_path(r'^wallet/check/?$', views.WalletCheckView.as_view(),
            name='wallet-check'),
]
