# crud_ui/models.py
# This file contains the Pydantic models used by a CRUD UI mount.
# It defines fields, actions, tweaks, routes and the options object, including
# the checks that make a bad configuration fail at mount time.
import os
from datetime import datetime
from typing import Any, Callable, Literal, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from crud_ui.helpers import capitalize, deslugify, get_or_call, pluralize
from crud_ui.rules import compile_rules
from crud_ui.texts import Texts
from crud_ui.views import Views

FieldType = Literal["string", "secret", "text", "select", "boolean"]
Mode = Literal["detail_list", "simple_list", "single_record"]
EditMode = Literal["create", "edit"]

ACTION_NAMES = ("get_list", "get_single", "create", "update", "delete")
VALIDATOR_SLOTS = ("general", "on_create", "on_edit")
VALIDATOR_SHORTCUTS = {
    "validate": "general",
    "validate_create": "on_create",
    "validate_edit": "on_edit",
}

ValidatorSpec = Union[Callable[..., Any], dict, None]
SCALAR_TYPES = (str, int, float, bool)


class FieldValidators(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    general: ValidatorSpec = None
    on_create: ValidatorSpec = None
    on_edit: ValidatorSpec = None

    _rule_sets: dict = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def compile_rule_sets(self):
        for slot in VALIDATOR_SLOTS:
            spec = getattr(self, slot)
            if isinstance(spec, dict):
                self._rule_sets[slot] = compile_rules(spec)
        return self

    def run(self, slot: str, ctx, value: Any, body: dict) -> list[str]:
        """Run one validator slot. Always returns a list of messages."""
        validator = getattr(self, slot)
        if validator is None:
            return []
        if slot in self._rule_sets:
            errors = self._rule_sets[slot](value)
        else:
            errors = validator(ctx, value, body)
        if not errors:
            return []
        if isinstance(errors, str):
            return [errors]
        return [str(e) for e in errors if e]


class CrudField(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: FieldType = "string"
    name: str = Field(min_length=1)
    title: Optional[str] = None
    label: Optional[str] = None
    help_text: Optional[str] = None

    allow_list: bool = True
    allow_detail: bool = True
    allow_edit: bool = True
    allow_edit_new: bool = True
    allow_edit_existing: bool = True

    default_value: Any = None
    null_option: Union[str, bool, None] = None
    values: Union[list, Callable[..., Any], None] = None
    validators: FieldValidators = Field(default_factory=FieldValidators)

    # Custom renderers called as fn(ctx, value, record, field); returning None falls back to the default markup
    list_view: Optional[Callable[..., Any]] = None
    detail_view: Optional[Callable[..., Any]] = None
    edit_view: Optional[Callable[..., Any]] = None

    @model_validator(mode="before")
    @classmethod
    def collect_validator_shortcuts(cls, data: Any) -> Any:
        if isinstance(data, dict) and any(k in data for k in VALIDATOR_SHORTCUTS):
            data = dict(data)
            validators = dict(data.get("validators") or {})
            for key, slot in VALIDATOR_SHORTCUTS.items():
                if key in data:
                    validators[slot] = data.pop(key)
            data["validators"] = validators
        return data

    @model_validator(mode="after")
    def derive_titles(self):
        if not self.name.strip():
            raise ValueError("Field name must not be blank")
        if self.type == "select" and self.values is None:
            raise ValueError(f'Select field "{self.name}" must provide values')
        if self.title is None:
            self.title = capitalize(deslugify(self.name))
        if self.label is None:
            self.label = self.title
        return self

    def is_editable(self, mode: EditMode) -> bool:
        if not self.allow_edit:
            return False
        return self.allow_edit_new if mode == "create" else self.allow_edit_existing

    def get_values(self, ctx) -> list:
        return list(get_or_call(self.values, ctx) or [])

    def get_default(self, ctx) -> Any:
        return get_or_call(self.default_value, ctx, self)

    # Options are plain values, (value, title) pairs, {"value", "title"} dicts or objects with .value
    @staticmethod
    def option_value(option: Any) -> Any:
        if isinstance(option, dict):
            return option.get("value")
        if isinstance(option, tuple):
            return option[0]
        if isinstance(option, SCALAR_TYPES):
            return option
        return getattr(option, "value", option)

    @staticmethod
    def option_title(option: Any) -> str:
        if isinstance(option, dict):
            return str(option.get("title") or option.get("label") or option.get("value"))
        if isinstance(option, tuple):
            return str(option[1] if len(option) > 1 else option[0])
        if isinstance(option, SCALAR_TYPES):
            return str(option)
        return str(getattr(option, "title", None) or getattr(option, "value", option))


class Actions(BaseModel):
    """User-supplied CRUD callbacks. Each one may be a plain or an async function."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    get_list: Optional[Callable[..., Any]] = None
    get_single: Optional[Callable[..., Any]] = None
    create: Optional[Callable[..., Any]] = None
    update: Optional[Callable[..., Any]] = None
    delete: Optional[Callable[..., Any]] = None

    @model_validator(mode="before")
    @classmethod
    def from_object(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, (dict, cls)):
            return data
        # Any object carrying the action methods works, e.g. a repository class
        return {name: getattr(data, name) for name in ACTION_NAMES if getattr(data, name, None) is not None}

    def supports(self, op: str) -> bool:
        return callable(getattr(self, op, None))


class Tweaks(BaseModel):
    show_validation_error_summary: bool = True

    csrf_enabled: bool = True
    csrf_field_name: str = Field(default="__cui_csrf__", min_length=1)
    csrf_cookie_name: str = Field(default="CUI_csrf", min_length=1)

    flash_cookie_name: str = Field(default="CUI_flash", min_length=1)
    flash_max_age: float = Field(default=60, gt=0)  # seconds

    sessions_enabled: bool = False
    session_cookie_name: str = Field(default="CUI_session", min_length=1)
    session_ttl: float = Field(default=60 * 60 * 24, gt=0)  # seconds
    session_cleanup_interval: float = Field(default=60 * 5, ge=0)  # seconds


class Routes(BaseModel):
    """Path patterns relative to the mount point. "{id}" stands for the record id."""

    index_page: str = "/"
    create_page: str = "/create"
    create_action: str = "/create"
    edit_page: str = "/edit/{id}"
    edit_action: str = "/edit/{id}"
    detail_page: str = "/detail/{id}"
    detail_edit_page: str = "/detail/{id}/edit"
    detail_edit_action: str = "/detail/{id}/edit"
    single_record_mode_edit_page: str = "/edit"
    single_record_mode_edit_action: str = "/edit"
    delete_action: str = "/delete/{id}"

    def path(self, route_name: str, id: Any = None) -> str:
        pattern = getattr(self, route_name)
        if "{id}" in pattern:
            return pattern.replace("{id}", quote(str(id), safe=""))
        return pattern

    def rule(self, route_name: str) -> str:
        """Flask URL rule for a route."""
        return getattr(self, route_name).replace("{id}", "<id>")


def _env_is_production() -> bool:
    env = os.environ.get("CRUD_UI_ENV") or os.environ.get("FLASK_ENV") or ""
    return env.lower() == "production"


class Options(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    plural_name: Optional[str] = None
    mode: Mode = "detail_list"
    record_id: Union[str, Callable[..., Any]] = "id"
    fields: list[CrudField] = Field(min_length=1)
    actions: Actions = Field(default_factory=Actions)
    tweaks: Tweaks = Field(default_factory=Tweaks)
    routes: Routes = Field(default_factory=Routes)
    views: Any = None
    texts: Any = None
    on_error: Optional[Callable[..., Any]] = None
    debug_log: bool = False
    is_production: bool = Field(default_factory=_env_is_production)
    ntfy_topic: str = Field(default_factory=lambda: os.environ.get("NTFY_TOPIC", ""))

    @model_validator(mode="after")
    def check_consistency(self):
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names: {', '.join(duplicates)}")

        if self.mode == "single_record":
            if not self.actions.get_single:
                raise ValueError('"get_single" action must be provided in single_record mode')
        else:
            if not self.actions.get_list:
                raise ValueError('"get_list" action must be provided')
            if self.actions.update and not self.actions.get_single:
                raise ValueError('"update" action requires "get_single" action')

        if self.plural_name is None:
            self.plural_name = pluralize(self.name)

        if self.views is None:
            self.views = Views()
        elif isinstance(self.views, dict):
            self.views = Views(**self.views)

        if self.texts is None:
            self.texts = Texts()
        elif isinstance(self.texts, dict):
            self.texts = Texts(**self.texts)
        return self

    @property
    def is_single_record_mode(self) -> bool:
        return self.mode == "single_record"

    @property
    def has_detail_pages(self) -> bool:
        return self.mode == "detail_list"

    def get_record_id(self, record: Any) -> Any:
        if record is None:
            return None
        if callable(self.record_id):
            return self.record_id(record)
        if isinstance(record, dict):
            return record.get(self.record_id)
        return getattr(record, self.record_id, None)


class FlashEntry(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    token: str
    payload: Any
    created_at: datetime


class Session(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str
    created_at: datetime
    last_seen_at: datetime
    csrf_token: str
    flash: Any = None
    edit_back_url: Optional[str] = None
