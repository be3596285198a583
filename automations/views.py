"""
API views for automations app.

Endpoints (all under /api/v1/automations/):
- Automation CRUD and activation toggle
- Template library: list, detail, instantiate
- Trigger and action definitions for the automation builder
- Trigger dispatch for platform events
- Run history and manual runs
"""

from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Count, Q, Sum
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema_view, OpenApiParameter
import structlog

from core.api_tags import automation_schema, run_schema, template_schema

from .catalog import TemplateNotFound, default_catalog
from .definitions import actions_by_category, triggers_by_category
from .filters import AutomationFilter, AutomationRunFilter
from .models import Automation, AutomationRun
from .serializers import (
    AutomationRunSerializer,
    AutomationSerializer,
    InstantiateTemplateSerializer,
    ManualRunSerializer,
    RunListParamsSerializer,
    TriggerEventSerializer,
)
from .services import dispatch_trigger, start_run
from .throttling import AutomationTriggerThrottle, ManualRunThrottle

logger = structlog.get_logger(__name__)


# =============================================================================
# AUTOMATIONS
# =============================================================================

@extend_schema_view(
    list=automation_schema(
        summary="List automations",
        description="List automations, newest first. Filter by status (active/inactive) and trigger type.",
    ),
    create=automation_schema(
        summary="Create automation",
        description="Create an automation from a trigger and an ordered list of steps.",
    ),
    retrieve=automation_schema(summary="Get automation"),
    update=automation_schema(summary="Replace automation"),
    partial_update=automation_schema(summary="Update automation"),
    destroy=automation_schema(summary="Delete automation"),
)
class AutomationViewSet(viewsets.ModelViewSet):
    """
    ViewSet for automation CRUD operations.

    Endpoints:
    - GET / - List automations
    - POST / - Create automation
    - GET /{id}/ - Get automation
    - PUT/PATCH /{id}/ - Update automation
    - DELETE /{id}/ - Delete automation
    - POST /{id}/toggle/ - Activate or deactivate
    """

    queryset = Automation.objects.all()
    serializer_class = AutomationSerializer
    permission_classes = [IsAdminUser]
    filterset_class = AutomationFilter
    pagination_class = None
    validation_message = 'Invalid automation data'

    failure_messages = {
        'list': 'Failed to fetch automations',
        'retrieve': 'Failed to fetch automation',
        'create': 'Failed to create automation',
        'update': 'Failed to update automation',
        'partial_update': 'Failed to update automation',
        'destroy': 'Failed to delete automation',
        'toggle': 'Failed to update automation',
    }

    @property
    def failure_message(self):
        return self.failure_messages.get(getattr(self, 'action', None), 'Internal server error')

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({
            'success': True,
            'automations': serializer.data,
            'count': len(serializer.data),
        })

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        automation = serializer.save()

        logger.info(
            "Automation created",
            automation_id=automation.id,
            trigger_type=automation.trigger_type,
            user_id=request.user.id,
        )

        return Response({
            'success': True,
            'automation': serializer.data,
            'message': 'Automation created successfully',
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({'success': True, 'automation': serializer.data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        automation = serializer.save()

        logger.info("Automation updated", automation_id=automation.id, user_id=request.user.id)

        return Response({
            'success': True,
            'automation': serializer.data,
            'message': 'Automation updated successfully',
        })

    def destroy(self, request, *args, **kwargs):
        automation = self.get_object()
        automation_id = automation.id
        automation.delete()

        logger.info("Automation deleted", automation_id=automation_id, user_id=request.user.id)

        return Response({
            'success': True,
            'message': 'Automation deleted successfully',
        })

    @automation_schema(
        summary="Toggle automation",
        description="Flip an automation between active and inactive.",
        request=None,
    )
    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        automation = self.get_object()
        automation.is_active = not automation.is_active
        automation.save(update_fields=['is_active', 'updated_at'])

        state = 'activated' if automation.is_active else 'deactivated'
        logger.info("Automation toggled", automation_id=automation.id, is_active=automation.is_active)

        return Response({
            'success': True,
            'automation': self.get_serializer(automation).data,
            'message': f'Automation {state}',
        })


# =============================================================================
# TEMPLATE LIBRARY
# =============================================================================

class TemplateLibraryViewSet(viewsets.ViewSet):
    """
    Read-only access to the automation template library.

    Templates are grouped by category in first-appearance order and sorted
    by popularity within each category.
    """

    permission_classes = [IsAdminUser]
    lookup_value_regex = '[^/]+'
    validation_message = 'Invalid automation data'

    @property
    def failure_message(self):
        if getattr(self, 'action', None) == 'instantiate':
            return 'Failed to create automation'
        return 'Failed to fetch templates'

    def get_template(self, pk):
        try:
            return default_catalog.get(pk)
        except TemplateNotFound:
            raise NotFound('Template not found')

    @template_schema(
        summary="List automation templates",
        description="Templates grouped by category, most popular first within each category.",
    )
    def list(self, request):
        catalog = default_catalog.list_templates()
        return Response({
            'success': True,
            'templates': [
                {
                    'category': group['category'],
                    'templates': [template.to_dict() for template in group['templates']],
                }
                for group in catalog['categories']
            ],
            'totalCount': catalog['totalCount'],
        })

    @template_schema(summary="Get automation template")
    def retrieve(self, request, pk=None):
        return Response({'success': True, 'template': self.get_template(pk).to_dict()})

    @template_schema(
        summary="Create automation from template",
        description="Create an automation from a template. name, description and isActive may be overridden.",
        request=InstantiateTemplateSerializer,
    )
    @action(detail=True, methods=['post'])
    def instantiate(self, request, pk=None):
        self.get_template(pk)

        overrides = InstantiateTemplateSerializer(data=request.data)
        overrides.is_valid(raise_exception=True)

        serializer = AutomationSerializer(
            data=default_catalog.instantiate(pk, overrides.validated_data))
        serializer.is_valid(raise_exception=True)
        automation = serializer.save()

        logger.info(
            "Automation created from template",
            automation_id=automation.id,
            template_id=pk,
            user_id=request.user.id,
        )

        return Response({
            'success': True,
            'automation': serializer.data,
            'message': 'Automation created successfully',
        }, status=status.HTTP_201_CREATED)


# =============================================================================
# DEFINITIONS
# =============================================================================

class TriggerDefinitionsView(APIView):
    """Trigger types grouped by category."""

    permission_classes = [IsAdminUser]
    failure_message = 'Failed to fetch triggers'

    @automation_schema(summary="List trigger types", examples=[])
    def get(self, request):
        return Response({'success': True, 'triggers': triggers_by_category()})


class ActionDefinitionsView(APIView):
    """Action types grouped by category."""

    permission_classes = [IsAdminUser]
    failure_message = 'Failed to fetch actions'

    @automation_schema(summary="List action types", examples=[])
    def get(self, request):
        return Response({'success': True, 'actions': actions_by_category()})


# =============================================================================
# TRIGGER DISPATCH
# =============================================================================

class TriggerDispatchView(APIView):
    """
    Fire a platform event.

    Every active automation listening to ``triggerType`` whose trigger
    filters match ``data`` gets a queued run.
    """

    permission_classes = [IsAdminUser]
    throttle_classes = [AutomationTriggerThrottle]
    validation_message = 'Invalid trigger data'
    failure_message = 'Failed to trigger automations'

    @run_schema(
        summary="Dispatch trigger event",
        request=TriggerEventSerializer,
    )
    def post(self, request):
        serializer = TriggerEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        runs = dispatch_trigger(
            serializer.validated_data['triggerType'],
            serializer.validated_data['data'],
            source=serializer.validated_data['source'],
        )

        return Response({
            'success': True,
            'triggeredCount': len(runs),
            'runIds': [run.id for run in runs],
            'message': f'Triggered {len(runs)} automation(s)',
        })


# =============================================================================
# RUNS
# =============================================================================

@extend_schema_view(
    list=run_schema(
        summary="List automation runs",
        description="Run history, most recent first, with pagination and overall run stats.",
        parameters=[
            OpenApiParameter('automationId', str, description="Only runs of this automation"),
            OpenApiParameter('status', str, description="running, completed, failed or cancelled"),
            OpenApiParameter('limit', int, description="Page size (default 50)"),
            OpenApiParameter('offset', int, description="Number of runs to skip"),
        ],
    ),
    retrieve=run_schema(summary="Get automation run"),
)
class RunViewSet(mixins.ListModelMixin,
                 mixins.RetrieveModelMixin,
                 viewsets.GenericViewSet):
    """
    ViewSet for automation run history.

    Endpoints:
    - GET /runs/ - List runs with pagination and stats
    - POST /runs/ - Manually run an automation with test data
    - GET /runs/{id}/ - Get run detail
    """

    queryset = AutomationRun.objects.select_related('automation')
    serializer_class = AutomationRunSerializer
    permission_classes = [IsAdminUser]
    filterset_class = AutomationRunFilter
    pagination_class = None
    validation_message = 'Invalid request data'

    failure_messages = {
        'list': 'Failed to fetch automation runs',
        'retrieve': 'Failed to fetch automation run',
        'create': 'Failed to trigger automation',
    }

    @property
    def failure_message(self):
        return self.failure_messages.get(getattr(self, 'action', None), 'Internal server error')

    def get_throttles(self):
        """Apply manual run throttling only on create."""
        if self.action == 'create':
            return [ManualRunThrottle()]
        return super().get_throttles()

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['pk'])
        except AutomationRun.DoesNotExist:
            raise NotFound('Run not found')

    def get_stats(self):
        totals = AutomationRun.objects.aggregate(
            total=Count('id'),
            completed=Count('id', filter=Q(status=AutomationRun.Status.COMPLETED)),
            failed=Count('id', filter=Q(status=AutomationRun.Status.FAILED)),
            duration=Sum('duration'),
        )
        total = totals['total']
        avg_duration = 0
        if total:
            avg_duration = int(
                (Decimal(totals['duration'] or 0) / total).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

        return {
            'total': total,
            'completed': totals['completed'],
            'failed': totals['failed'],
            'avgDuration': avg_duration,
        }

    def list(self, request, *args, **kwargs):
        params = RunListParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        limit = params.validated_data.get('limit', settings.AUTOMATIONS['RUNS_PAGE_LIMIT'])
        offset = params.validated_data['offset']

        queryset = self.filter_queryset(self.get_queryset())
        total = queryset.count()
        runs = list(queryset[offset:offset + limit])

        return Response({
            'success': True,
            'runs': self.get_serializer(runs, many=True).data,
            'pagination': {
                'total': total,
                'limit': limit,
                'offset': offset,
                'hasMore': offset + len(runs) < total,
            },
            'stats': self.get_stats(),
        })

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'run': self.get_serializer(self.get_object()).data})

    @run_schema(
        summary="Run automation manually",
        description="Start a run of an automation with test data as its trigger data.",
    )
    def create(self, request, *args, **kwargs):
        params = ManualRunSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        automation_id = params.validated_data.get('automationId')
        if not automation_id:
            return Response(
                {'success': False, 'error': 'Automation ID required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        test_data = params.validated_data.get('testData') or {}

        try:
            automation = Automation.objects.get(pk=automation_id)
        except Automation.DoesNotExist:
            raise NotFound('Automation not found')

        run = start_run(
            automation,
            test_data,
            source=AutomationRun.Source.MANUAL,
            triggered_by='manual',
        )
        run.refresh_from_db()

        logger.info(
            "Manual automation run started",
            automation_id=automation.id,
            run_id=run.id,
            user_id=request.user.id,
        )

        return Response({
            'success': True,
            'runId': run.id,
            'message': 'Automation triggered successfully',
            'status': run.status,
        })
