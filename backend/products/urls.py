from django.urls import path

from products.views import ProductViewSet

app_name = "products"

# Explicit mapping so the list route is not shadowed by a router's API root
urlpatterns = [
    path("", ProductViewSet.as_view({"get": "list"}), name="product-list"),
    path("<int:pk>/", ProductViewSet.as_view({"get": "retrieve"}), name="product-detail"),
    path("<int:pk>/bom/", ProductViewSet.as_view({"get": "bom"}), name="product-bom"),
    path("<int:pk>/recipe/", ProductViewSet.as_view({"put": "recipe"}), name="product-recipe"),
]
