"""
Serializers for automations app.

Request payloads and responses use the camelCase keys the back-office
automation builder sends and expects.
"""

import re

from rest_framework import serializers

from .definitions import (
    CONDITION_OPERATORS,
    is_known_action,
    is_known_trigger,
    required_config_fields,
)
from .models import Automation, AutomationRun

TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


# =============================================================================
# AUTOMATION BUILDING BLOCKS
# =============================================================================

class ConditionSerializer(serializers.Serializer):
    field = serializers.CharField(max_length=200)
    operator = serializers.ChoiceField(choices=CONDITION_OPERATORS)
    value = serializers.JSONField(required=False, allow_null=True)


class ActionSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=64)
    config = serializers.DictField()

    def validate_type(self, value):
        if not is_known_action(value):
            raise serializers.ValidationError(f"Unknown action type: {value}")
        return value

    def validate(self, attrs):
        if 'type' not in attrs:
            return attrs
        config = attrs.get('config') or {}
        missing = [
            name for name in required_config_fields(attrs['type'])
            if config.get(name) in (None, '')
        ]
        if missing:
            raise serializers.ValidationError({
                'config': [f"Missing required field: {name}" for name in missing]
            })
        return attrs


class StepSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    action = ActionSerializer()
    conditions = ConditionSerializer(many=True, required=False)
    onSuccess = serializers.CharField(max_length=64, required=False)
    onFailure = serializers.CharField(max_length=64, required=False)


class ScheduleSerializer(serializers.Serializer):
    time = serializers.CharField(required=False)
    dayOfWeek = serializers.IntegerField(min_value=0, max_value=6, required=False)
    dayOfMonth = serializers.IntegerField(min_value=1, max_value=31, required=False)
    timezone = serializers.CharField(max_length=64, required=False)

    def validate_time(self, value):
        if not TIME_PATTERN.match(value):
            raise serializers.ValidationError("Time must use HH:MM format.")
        return value


class TriggerSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=64)
    filters = serializers.DictField(required=False)
    schedule = ScheduleSerializer(required=False)

    def validate_type(self, value):
        if not is_known_trigger(value):
            raise serializers.ValidationError(f"Unknown trigger type: {value}")
        return value


# =============================================================================
# AUTOMATION SERIALIZERS
# =============================================================================

class AutomationSerializer(serializers.ModelSerializer):
    """
    Automation create/update/detail serializer.

    Validates the trigger and step graph:
    - trigger and action types must be known
    - required action config fields must be set
    - step ids are unique
    - onSuccess / onFailure name a later step
    """

    trigger = TriggerSerializer()
    steps = StepSerializer(many=True)
    isActive = serializers.BooleanField(source='is_active', default=True)
    runCount = serializers.IntegerField(source='run_count', read_only=True)
    lastRunAt = serializers.DateTimeField(source='last_run_at', read_only=True)
    templateId = serializers.CharField(
        source='template_id', max_length=100, required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Automation
        fields = [
            'id',
            'name',
            'description',
            'trigger',
            'steps',
            'isActive',
            'runCount',
            'lastRunAt',
            'templateId',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
        }

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Name cannot be empty.")
        return value.strip()

    def _validate_in_full(self, serializer):
        # PATCH makes nested fields optional; trigger and steps are replaced whole
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def validate_trigger(self, value):
        if self.partial:
            value = self._validate_in_full(
                TriggerSerializer(data=self.initial_data.get('trigger')))
        return value

    def validate_steps(self, value):
        if self.partial:
            value = self._validate_in_full(
                StepSerializer(data=self.initial_data.get('steps'), many=True))

        if not value:
            raise serializers.ValidationError("An automation needs at least one step.")

        positions = {}
        for index, step in enumerate(value):
            if step['id'] in positions:
                raise serializers.ValidationError(f"Duplicate step id: {step['id']}")
            positions[step['id']] = index

        for index, step in enumerate(value):
            for key in ('onSuccess', 'onFailure'):
                target = step.get(key)
                if target is None:
                    continue
                if target not in positions:
                    raise serializers.ValidationError(
                        f"Step {step['id']} {key} references unknown step: {target}")
                if positions[target] <= index:
                    raise serializers.ValidationError(
                        f"Step {step['id']} {key} must reference a later step.")

        return value

    def create(self, validated_data):
        return Automation.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Return trigger and steps exactly as stored
        data['trigger'] = instance.trigger
        data['steps'] = instance.steps
        return data


class InstantiateTemplateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    isActive = serializers.BooleanField(required=False)


# =============================================================================
# RUN SERIALIZERS
# =============================================================================

class AutomationRunSerializer(serializers.ModelSerializer):
    automationId = serializers.CharField(source='automation_id', read_only=True)
    automationName = serializers.CharField(source='automation_name', read_only=True)
    triggeredBy = serializers.CharField(source='triggered_by', read_only=True)
    triggerData = serializers.JSONField(source='trigger_data', read_only=True)
    startedAt = serializers.DateTimeField(source='started_at', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = AutomationRun
        fields = [
            'id',
            'automationId',
            'automationName',
            'triggeredBy',
            'triggerData',
            'source',
            'status',
            'steps',
            'startedAt',
            'completedAt',
            'duration',
            'error',
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['error'] = instance.error or None
        return data


class RunListParamsSerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=500, required=False)
    offset = serializers.IntegerField(min_value=0, default=0)


class TriggerEventSerializer(serializers.Serializer):
    triggerType = serializers.CharField(max_length=64)
    data = serializers.DictField()
    source = serializers.ChoiceField(
        choices=AutomationRun.Source.choices,
        default=AutomationRun.Source.SYSTEM
    )

    def validate_triggerType(self, value):
        if not is_known_trigger(value):
            raise serializers.ValidationError(f"Unknown trigger type: {value}")
        return value


class ManualRunSerializer(serializers.Serializer):
    automationId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    testData = serializers.DictField(required=False, allow_null=True)
