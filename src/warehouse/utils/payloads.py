"""Decoding of JSON payloads carried in command ``Text`` fields."""

import json

from protean.exceptions import ValidationError


def load_json_object(raw: str | None, field: str) -> dict:
    """Decode an optional JSON object, reporting bad input against ``field``."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError({field: ["Must be a JSON object"]}) from None
    if not isinstance(data, dict):
        raise ValidationError({field: ["Must be a JSON object"]})
    return data
