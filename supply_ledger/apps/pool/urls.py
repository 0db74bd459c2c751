from django.urls import path
from .views import pool_total, account_detail

urlpatterns = [
    path("total", pool_total, name="pool-total"),
    path("accounts/<str:account>", account_detail, name="pool-account"),
]
