from django.urls import path
from .views import OrdersPingView, CreateOrderView
app_name = "orders"

urlpatterns = [
    path("ping/", OrdersPingView.as_view(), name="ping"),
    path("create", CreateOrderView.as_view(), name="orders-create"),
]
