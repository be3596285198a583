"""
Guard condition evaluation.

A condition is ``{field, operator, value}``. ``field`` may be a dotted path
into nested trigger data (``donor.email``). Unknown operators never match.
"""

from decimal import Decimal, InvalidOperation


def resolve_field(data, path):
    """Look up a dotted ``path`` in nested mappings; missing keys resolve to None."""
    current = data
    for part in path.split('.'):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _to_number(value):
    if isinstance(value, bool) or value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _is_empty(value):
    return value is None or value == '' or value == [] or value == {}


def _compare(field_value, expected, operator):
    left = _to_number(field_value)
    right = _to_number(expected)
    if left is None or right is None or not left.is_finite() or not right.is_finite():
        return False
    if operator == 'greater_than':
        return left > right
    return left < right


def evaluate_condition(condition, data):
    """Evaluate one condition (dict or ``Condition``) against trigger data."""
    if isinstance(condition, dict):
        field, operator, expected = condition.get('field', ''), condition.get('operator'), condition.get('value')
    else:
        field, operator, expected = condition.field, condition.operator, condition.value

    field_value = resolve_field(data, field)

    if operator == 'equals':
        return field_value == expected
    if operator == 'not_equals':
        return field_value != expected
    if operator == 'contains':
        if field_value is None:
            return False
        if isinstance(field_value, (list, tuple)):
            return expected in field_value
        return str(expected) in str(field_value)
    if operator in ('greater_than', 'less_than'):
        return _compare(field_value, expected, operator)
    if operator == 'is_empty':
        return _is_empty(field_value)
    if operator == 'is_not_empty':
        return not _is_empty(field_value)
    return False


def evaluate_conditions(conditions, data, match_type='all'):
    """
    Evaluate a list of conditions.

    ``match_type`` is ``'all'`` (every condition must hold) or ``'any'``.
    An empty list always holds.
    """
    if not conditions:
        return True
    results = (evaluate_condition(condition, data) for condition in conditions)
    if match_type == 'any':
        return any(results)
    return all(results)
