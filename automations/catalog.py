"""
Automation template catalog.

Templates are read-only seed data. The catalog groups them by category for
the template library screen and turns a template into the payload used to
create a live automation.
"""

import copy
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .definitions import ActionType, TriggerType
from .library import TEMPLATE_LIBRARY


class TemplateNotFound(LookupError):
    """Raised when a template id is not in the catalog."""

    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


def _choice_or_none(choices, value):
    try:
        return choices(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class Condition:
    field: str
    operator: str
    value: Any = None

    @classmethod
    def from_dict(cls, data):
        return cls(field=data['field'], operator=data['operator'], value=data.get('value'))

    def to_dict(self):
        return {'field': self.field, 'operator': self.operator, 'value': self.value}


@dataclass(frozen=True)
class ActionConfig:
    type: str
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> Optional[ActionType]:
        """The known action type, or None when the type is not recognised."""
        return _choice_or_none(ActionType, self.type)

    @classmethod
    def from_dict(cls, data):
        return cls(type=data['type'], config=copy.deepcopy(data.get('config') or {}))

    def to_dict(self):
        return {'type': self.type, 'config': copy.deepcopy(self.config)}


@dataclass(frozen=True)
class Step:
    id: str
    action: ActionConfig
    conditions: List[Condition] = field(default_factory=list)
    on_success: Optional[str] = None
    on_failure: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            action=ActionConfig.from_dict(data['action']),
            conditions=[Condition.from_dict(c) for c in data.get('conditions') or []],
            on_success=data.get('onSuccess'),
            on_failure=data.get('onFailure'),
        )

    def to_dict(self):
        data = {'id': self.id, 'action': self.action.to_dict()}
        if self.conditions:
            data['conditions'] = [condition.to_dict() for condition in self.conditions]
        if self.on_success:
            data['onSuccess'] = self.on_success
        if self.on_failure:
            data['onFailure'] = self.on_failure
        return data


@dataclass(frozen=True)
class Trigger:
    type: str
    filters: Optional[Dict[str, Any]] = None
    schedule: Optional[Dict[str, Any]] = None

    @property
    def kind(self) -> Optional[TriggerType]:
        """The known trigger type, or None when the type is not recognised."""
        return _choice_or_none(TriggerType, self.type)

    @classmethod
    def from_dict(cls, data):
        return cls(
            type=data['type'],
            filters=copy.deepcopy(data.get('filters')),
            schedule=copy.deepcopy(data.get('schedule')),
        )

    def to_dict(self):
        data = {'type': self.type}
        if self.filters is not None:
            data['filters'] = copy.deepcopy(self.filters)
        if self.schedule is not None:
            data['schedule'] = copy.deepcopy(self.schedule)
        return data


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    category: str
    trigger: Trigger
    description: str = ''
    popularity: int = 0
    steps: List[Step] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description', ''),
            category=data['category'],
            popularity=data.get('popularity', 0),
            trigger=Trigger.from_dict(data['trigger']),
            steps=[Step.from_dict(step) for step in data.get('steps') or []],
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'popularity': self.popularity,
            'trigger': self.trigger.to_dict(),
            'steps': [step.to_dict() for step in self.steps],
        }


class TemplateCatalog:
    """
    In-memory catalog of automation templates.

    The catalog holds templates in source order and never mutates them.
    Trigger and action types are carried as given; the catalog is
    descriptive and does not validate them.
    """

    def __init__(self, templates):
        self._templates = list(templates)
        seen = set()
        for template in self._templates:
            if template.id in seen:
                raise ValueError(f"Duplicate template id: {template.id}")
            seen.add(template.id)

    @classmethod
    def from_dicts(cls, entries):
        return cls(Template.from_dict(entry) for entry in entries)

    def __len__(self):
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates)

    def list_templates(self):
        """
        Group templates by category.

        Categories appear once each, in the order they first appear in the
        source. Within a category templates are ordered by popularity,
        highest first; ties keep source order.

        Returns:
            dict: ``{'categories': [{'category', 'templates'}], 'totalCount'}``
        """
        grouped = OrderedDict()
        for template in self._templates:
            grouped.setdefault(template.category, []).append(template)

        categories = [
            {
                'category': category,
                'templates': sorted(templates, key=lambda t: t.popularity, reverse=True),
            }
            for category, templates in grouped.items()
        ]

        return {
            'categories': categories,
            'totalCount': sum(len(group['templates']) for group in categories),
        }

    def get(self, template_id):
        for template in self._templates:
            if template.id == template_id:
                return template
        raise TemplateNotFound(template_id)

    def instantiate(self, template_id, overrides=None):
        """
        Build a create-automation payload from a template.

        Args:
            template_id: Catalog id of the template
            overrides: Optional ``name``, ``description`` and ``isActive``

        Returns:
            dict: Payload accepted by the automation create serializer
        """
        template = self.get(template_id)
        overrides = overrides or {}

        return {
            'name': overrides.get('name') or template.name,
            'description': overrides.get('description', template.description),
            'trigger': template.trigger.to_dict(),
            'steps': [step.to_dict() for step in template.steps],
            'isActive': overrides.get('isActive', True),
            'templateId': template.id,
        }


default_catalog = TemplateCatalog.from_dicts(TEMPLATE_LIBRARY)
