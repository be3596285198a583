"""
Placeholder rendering for automation configs.

Config strings reference trigger data with ``{{identifier}}`` tokens, for
example ``"Thank you {{donorName}}"``. Identifiers are letters, digits and
underscores, matched case-sensitively. Tokens whose key is missing, or whose
value is None, are left in the output untouched.
"""

import re

PLACEHOLDER_PATTERN = re.compile(r'\{\{([A-Za-z0-9_]+)\}\}')


def _format_value(value):
    if isinstance(value, (list, tuple)):
        return ', '.join(_format_value(item) for item in value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def render_template(template, context):
    """Substitute ``{{key}}`` tokens in ``template`` with values from ``context``."""
    if not template:
        return template

    def replace(match):
        value = context.get(match.group(1))
        if value is None:
            return match.group(0)
        return _format_value(value)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def render_config(config, context):
    """Render every string in a step config, descending into dicts and lists."""
    if isinstance(config, str):
        return render_template(config, context)
    if isinstance(config, dict):
        return {key: render_config(value, context) for key, value in config.items()}
    if isinstance(config, list):
        return [render_config(item, context) for item in config]
    return config


def find_placeholders(template):
    """Identifiers referenced by ``template``, in order of appearance."""
    if not template:
        return []
    return PLACEHOLDER_PATTERN.findall(template)
