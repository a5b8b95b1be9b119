# crud_ui/__init__.py
"""
CRUD UI for Flask.
crud_ui() turns a declarative description of a record type (fields plus
create/read/update/delete callbacks) into a blueprint serving list, detail,
create, edit and delete pages, with flash messages, CSRF protection and
optional server-side sessions.

    app.register_blueprint(crud_ui(name="user", fields=[...], actions=...), url_prefix="/users")
"""

from typing import Any, Optional, Union

from flask import Blueprint
from pydantic import ValidationError as PydanticValidationError

from crud_ui.context import CrudContext
from crud_ui.errors import (ActionNotSupportedError, ConfigurationError,
                            CrudError, CSRFError, NotFoundError,
                            ValidationError, ValidationFault)
from crud_ui.models import Actions, CrudField, Options, Routes, Tweaks
from crud_ui.responses import HtmlResponse, RedirectResponse
from crud_ui.routes import build_blueprint
from crud_ui.texts import Texts
from crud_ui.views import Views


def crud_ui(
    options: Union[Options, dict, None] = None,
    blueprint_name: Optional[str] = None,
    **kwargs: Any,
) -> Blueprint:
    """Validate options and build the blueprint. Bad options raise ConfigurationError."""
    try:
        if isinstance(options, Options):
            opts = options
        else:
            opts = Options.model_validate({**(options or {}), **kwargs})
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid CRUD UI options: {e}") from e
    return build_blueprint(opts, blueprint_name)


__all__ = [
    "crud_ui",
    "Actions",
    "ActionNotSupportedError",
    "ConfigurationError",
    "CrudContext",
    "CrudError",
    "CrudField",
    "CSRFError",
    "HtmlResponse",
    "NotFoundError",
    "Options",
    "RedirectResponse",
    "Routes",
    "Texts",
    "Tweaks",
    "ValidationError",
    "ValidationFault",
    "Views",
]
