"""
Automations app URL configuration.
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import (
    ActionDefinitionsView,
    AutomationViewSet,
    RunViewSet,
    TemplateLibraryViewSet,
    TriggerDefinitionsView,
    TriggerDispatchView,
)

router = SimpleRouter()
router.register(r'templates', TemplateLibraryViewSet, basename='template')
router.register(r'runs', RunViewSet, basename='run')
# Registered last: the empty prefix would otherwise capture templates/ and runs/
router.register(r'', AutomationViewSet, basename='automation')

app_name = 'automations'

urlpatterns = [
    path('triggers/', TriggerDefinitionsView.as_view(), name='trigger-definitions'),
    path('actions/', ActionDefinitionsView.as_view(), name='action-definitions'),
    path('trigger/', TriggerDispatchView.as_view(), name='trigger-dispatch'),
    path('', include(router.urls)),
]
