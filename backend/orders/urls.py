from django.urls import path

from orders.views import CheckoutView, OrderViewSet

app_name = "orders"

urlpatterns = [
    path("", OrderViewSet.as_view({"get": "list"}), name="order-list"),
    path("<int:pk>/", OrderViewSet.as_view({"get": "retrieve"}), name="order-detail"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
]
