# services/usage-service/src/apps/api/views/__init__.py
"""
Usage Service API Views
"""

from .usage_views import UsageViewSet

__all__ = [
    'UsageViewSet',
]
