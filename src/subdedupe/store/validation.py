"""Plan shape validation against the bundled JSON Schemas."""

import json
from collections.abc import Sequence
from functools import cache
from importlib import resources
from typing import Any

import jsonschema

from subdedupe.store.errors import PlanValidationError

__all__ = [
    "delete_request_errors",
    "load_schema",
    "update_request_errors",
    "validate_plan",
]

PLAN_SCHEMA = "plan.schema.json"


@cache
def load_schema(name: str) -> dict[str, Any]:
    """Load a JSON Schema shipped in ``subdedupe/schemas``.

    Parameters
    ----------
    name : str
        File name, e.g. "plan.schema.json".

    Returns
    -------
    dict[str, Any]
        Parsed schema.
    """
    text = resources.files("subdedupe.schemas").joinpath(name).read_text(encoding="utf-8")
    return json.loads(text)


@cache
def _definition_validator(definition: str) -> jsonschema.Draft7Validator:
    definitions = load_schema(PLAN_SCHEMA)["definitions"]
    schema = {"definitions": definitions, "$ref": f"#/definitions/{definition}"}
    return jsonschema.Draft7Validator(schema)


def _messages(validator: jsonschema.Draft7Validator, instance: Any) -> list[str]:
    errors = sorted(
        validator.iter_errors(instance),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    return [
        f"{'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
        for error in errors
    ]


def delete_request_errors(ids: Sequence[Any]) -> dict[str, list[str]]:
    """Schema violations of a delete request, keyed by record id.

    Parameters
    ----------
    ids : Sequence[Any]
        Requested ids.

    Returns
    -------
    dict[str, list[str]]
        Messages per offending id; empty when the request is valid.
    """
    validator = _definition_validator("delete_request")
    errors: dict[str, list[str]] = {}
    seen: set[str] = set()

    for record_id in ids:
        key = str(record_id)
        messages = _messages(validator, [record_id])
        if key in seen:
            messages.append("duplicate id in request")
        seen.add(key)
        if messages:
            errors.setdefault(key, []).extend(messages)

    return errors


def update_request_errors(ops: Sequence[dict[str, Any]]) -> dict[str, list[str]]:
    """Schema violations of an update request, keyed by record id.

    Parameters
    ----------
    ops : Sequence[dict[str, Any]]
        Serialized update operations (``{"id": ..., "fields": {...}}``).

    Returns
    -------
    dict[str, list[str]]
        Messages per offending id; empty when the request is valid.
    """
    validator = _definition_validator("update_request")
    errors: dict[str, list[str]] = {}

    for op in ops:
        messages = _messages(validator, [op])
        if messages:
            key = str(op.get("id")) if isinstance(op, dict) else str(op)
            errors.setdefault(key, []).extend(messages)

    return errors


def validate_plan(plan: dict[str, Any]) -> None:
    """Validate a serialized cleanup plan.

    Parameters
    ----------
    plan : dict[str, Any]
        Output of ``CleanupPlan.to_dict()``.

    Raises
    ------
    PlanValidationError
        If the plan does not match the plan schema.
    """
    validator = jsonschema.Draft7Validator(load_schema(PLAN_SCHEMA))
    messages = _messages(validator, plan)
    if messages:
        raise PlanValidationError(f"Invalid cleanup plan: {messages[0]}", messages)
