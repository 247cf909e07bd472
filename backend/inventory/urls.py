from django.urls import path, include
from rest_framework.routers import DefaultRouter

from inventory.views import (
    IngredientViewSet,
    PurchaseLogView,
    RestockView,
    StockHistoryListView,
)

router = DefaultRouter()
router.register(r"ingredients", IngredientViewSet, basename="ingredient")

app_name = "inventory"

urlpatterns = [
    path("", include(router.urls)),
    path("stock-history/", StockHistoryListView.as_view(), name="stock-history"),
    path("restock/", RestockView.as_view(), name="restock"),
    path("purchases/", PurchaseLogView.as_view(), name="purchases"),
]
