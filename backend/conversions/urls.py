from django.urls import path, include
from rest_framework.routers import DefaultRouter

from conversions.views import ConversionRuleViewSet, ResolveConversionView

app_name = "conversions"

router = DefaultRouter()
router.register(r'rules', ConversionRuleViewSet, basename='conversion-rule')

urlpatterns = [
    path('', include(router.urls)),
    path('resolve/', ResolveConversionView.as_view(), name='resolve'),
]
