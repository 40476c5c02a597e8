# agro_registry/api/routes/__init__.py
# Shared helpers for the route modules.

from typing import Any, Dict

from flask import request

from agro_registry.api.errors import ValidationError


def json_body() -> Dict[str, Any]:
    """Returns the decoded JSON object of the request, or raises ValidationError."""
    if not request.is_json:
        raise ValidationError("Request must be JSON")
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
