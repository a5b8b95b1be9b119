# crud_ui/coercion.py
"""
Turns a submitted form into the payload handed to create/update actions.
"""

import logging
from typing import Any

from crud_ui.errors import CrudError, ValidationError, ValidationFault
from crud_ui.models import EditMode

logger = logging.getLogger(__name__)


def _coerce_select(ctx, field, value: Any) -> Any:
    if field.null_option and not value:
        return None
    for option in field.get_values(ctx):
        option_value = field.option_value(option)
        # Forms submit strings, so 1 arrives as "1"
        if option_value == value or (value is not None and str(option_value) == value):
            return option_value
    # Only a hand-crafted request can submit a value the form never offered
    raise CrudError(f'Invalid {field.name} value: "{value}".')


def coerce_and_validate(ctx, mode: EditMode) -> dict[str, Any]:
    """
    Coerce ctx.body into a payload for the editable fields of the given mode.
    Raises ValidationError carrying every fault and the attempted payload.
    """
    body = ctx.body or {}
    payload: dict[str, Any] = {}
    faults: list[ValidationFault] = []
    mode_slot = "on_create" if mode == "create" else "on_edit"

    for field in ctx.fields:
        if not field.is_editable(mode):
            continue

        value = body.get(field.name)
        if field.type == "select":
            value = _coerce_select(ctx, field, value)
        elif field.type == "boolean":
            value = bool(value)

        for slot in ("general", mode_slot):
            for message in field.validators.run(slot, ctx, value, body):
                faults.append(ValidationFault(field, message, value))

        payload[field.name] = value

    if faults:
        logger.debug("Payload for %s rejected with %d fault(s)", ctx.options.name, len(faults))
        raise ValidationError(faults, payload)

    return payload
