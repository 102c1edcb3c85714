# services/usage-service/src/apps/api/urls.py
"""
Usage Service API URL Configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.api.views import UsageViewSet

app_name = 'api'

router = DefaultRouter()
router.register(r'usage', UsageViewSet, basename='usage')

urlpatterns = [
    path('', include(router.urls)),
]

# =============================================================================
# API Endpoint Summary
# =============================================================================
#
# Usage:
#   GET    /api/v1/usage/                        - Client overview (managers)
#   GET    /api/v1/usage/{user_id}/              - Hour-package usage
#   GET    /api/v1/usage/{user_id}/ledger/       - Settlement ledger
#   POST   /api/v1/usage/order/                  - Order an hour package
#
# =============================================================================
