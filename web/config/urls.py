from django.urls import include, path

urlpatterns = [
    path("api/v0/orders/", include("apps.orders.urls")),
]
