"""
Unified API Documentation Tags for the Acts 29 Ministry platform.

This module provides a single source of truth for all API documentation tags
to prevent duplicate sections in the OpenAPI/Swagger documentation.
"""

from drf_spectacular.utils import extend_schema, OpenApiExample


class APITags:
    """
    Unified API tags for consistent documentation organization.

    Usage:
        @extend_schema(tags=[APITags.AUTOMATIONS])
        def my_view(request):
            pass
    """

    AUTOMATIONS = "Automations"  # Automation CRUD and toggling
    AUTOMATION_TEMPLATES = "Automation Templates"  # Template library and definitions
    AUTOMATION_RUNS = "Automation Runs"  # Run history, manual runs, trigger dispatch


# Tag descriptions for OpenAPI documentation
TAG_DESCRIPTIONS = {
    APITags.AUTOMATIONS: "Create, update, toggle and delete automations",
    APITags.AUTOMATION_TEMPLATES: "Template library, trigger and action definitions",
    APITags.AUTOMATION_RUNS: "Run history, manual runs and event trigger dispatch",
}


def get_api_tags_metadata():
    """
    Returns OpenAPI tags metadata for Spectacular configuration.

    Add this to your SPECTACULAR_SETTINGS:
    TAGS = get_api_tags_metadata()
    """
    return [
        {"name": tag, "description": description}
        for tag, description in TAG_DESCRIPTIONS.items()
    ]


# Common examples used across multiple endpoints
COMMON_EXAMPLES = {
    'validation_error': OpenApiExample(
        name="Validation Error",
        description="Request validation failed",
        value={
            "success": False,
            "error": "Invalid automation data",
            "details": [
                {"name": "trigger", "reason": "This field is required."}
            ]
        },
        response_only=True,
        status_codes=['400'],
    ),
    'not_found_error': OpenApiExample(
        name="Not Found",
        description="The requested record does not exist",
        value={
            "success": False,
            "error": "Not found."
        },
        response_only=True,
        status_codes=['404'],
    ),
    'server_error': OpenApiExample(
        name="Server Error",
        description="Internal server error occurred",
        value={
            "success": False,
            "error": "Failed to fetch templates"
        },
        response_only=True,
        status_codes=['500'],
    ),
}


# Common schema decorators for consistent API documentation
def automation_schema(**kwargs):
    """Schema decorator for automation CRUD endpoints."""
    defaults = {
        'tags': [APITags.AUTOMATIONS],
        'examples': [
            COMMON_EXAMPLES['validation_error'],
            COMMON_EXAMPLES['not_found_error'],
        ]
    }
    defaults.update(kwargs)
    return extend_schema(**defaults)


def template_schema(**kwargs):
    """Schema decorator for template library endpoints."""
    defaults = {
        'tags': [APITags.AUTOMATION_TEMPLATES],
        'examples': [
            COMMON_EXAMPLES['server_error']
        ]
    }
    defaults.update(kwargs)
    return extend_schema(**defaults)


def run_schema(**kwargs):
    """Schema decorator for run history and trigger endpoints."""
    defaults = {
        'tags': [APITags.AUTOMATION_RUNS],
        'examples': [
            COMMON_EXAMPLES['validation_error'],
            COMMON_EXAMPLES['server_error']
        ]
    }
    defaults.update(kwargs)
    return extend_schema(**defaults)
