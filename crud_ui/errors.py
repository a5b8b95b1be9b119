# crud_ui/errors.py
"""
Exceptions raised inside a CRUD UI mount.
Everything request-related derives from CrudError and carries the HTTP
status code the error page should be rendered with.
"""

from typing import Any, Optional

from crud_ui.helpers import capitalize


class CrudError(Exception):
    def __init__(self, message: str, code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(TypeError):
    """Invalid options passed to crud_ui(). Raised at mount time."""


class CSRFError(CrudError):
    def __init__(self):
        super().__init__("Invalid or missing CSRF token. Reload and try again", 403)


class NotFoundError(CrudError):
    def __init__(self, message: str):
        super().__init__(message, 404)


class ActionNotSupportedError(CrudError):
    def __init__(self, action: str):
        super().__init__(f'Action "{action}" is not supported', 500)
        self.action = action

    @classmethod
    def assert_supported(cls, actions, op: str):
        if not callable(getattr(actions, op, None)):
            raise cls(op)


class ValidationFault:
    """A single field-level validation failure."""

    def __init__(self, field, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value

    @property
    def full_message(self) -> str:
        return capitalize(self.field.label) + " " + self.message

    def __repr__(self):
        return f"<ValidationFault {self.field.name}: {self.message}>"


class ValidationError(CrudError):
    """
    Aggregate of all faults found while coercing one request body.
    Never mutated after construction; by_field_name is derived from faults.
    """

    def __init__(self, faults: Optional[list[ValidationFault]] = None, payload: Optional[dict] = None):
        faults = tuple(faults or ())
        if not faults:
            message = "Validation error"
        elif len(faults) == 1:
            message = f"Validation error: {faults[0].full_message}"
        else:
            message = f"{len(faults)} validation errors"
        super().__init__(message, 400)

        self.faults = faults
        self.payload = dict(payload or {})

    @property
    def by_field_name(self) -> dict[str, list[ValidationFault]]:
        lookup: dict[str, list[ValidationFault]] = {}
        for fault in self.faults:
            lookup.setdefault(fault.field.name, []).append(fault)
        return lookup
