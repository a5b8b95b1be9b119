# crud_ui/views.py
"""
Default page renderers. Every view is a function of (ctx, data) returning
markup; pass overrides as Views(list_page=my_list_page) or as a dict in the
"views" option.
"""

from typing import Any, Optional

from flask import render_template
from markupsafe import Markup

VIEW_NAMES = ("list_page", "edit_page", "detail_page", "error_page")


def record_value(record: Any, field) -> Any:
    if record is None:
        return None
    if isinstance(record, dict):
        return record.get(field.name)
    return getattr(record, field.name, None)


def display_value(ctx, field, record: Any) -> str:
    value = record_value(record, field)
    if field.type == "boolean":
        return "Yes" if value else "No"
    if field.type == "secret":
        return "******" if value else ""
    if field.type == "select":
        for option in field.get_values(ctx):
            if field.option_value(option) == value:
                return field.option_title(option)
    return "" if value is None else str(value)


def form_value(ctx, field, record: Any) -> Any:
    """Value to pre-fill an editor with: attempted input, then the record, then the default."""
    error = ctx.validation_error
    if error is not None and field.name in error.payload:
        return error.payload[field.name]
    if record is None:
        return field.get_default(ctx)
    if field.type == "secret":
        return ""
    return record_value(record, field)


def custom_view(ctx, field, hook: str, record: Any, value: Any) -> Optional[Markup]:
    """Markup from a field's own renderer, or None to use the default one."""
    render = getattr(field, hook)
    if render is None:
        return None
    markup = render(ctx, value, record, field)
    return None if markup is None else Markup(markup)


def edit_back_url(ctx) -> str:
    if ctx.session is not None and ctx.session.edit_back_url:
        return ctx.session.edit_back_url
    if ctx.route_name == "detail_edit_page":
        return ctx.route_url("detail_page", ctx.id_param)
    return ctx.route_url("index_page")


def edit_form_action(ctx, record: Any) -> str:
    if record is None:
        return ctx.route_url("create_action")
    if ctx.options.is_single_record_mode:
        return ctx.route_url("single_record_mode_edit_action")
    if ctx.route_name == "detail_edit_page":
        return ctx.route_url("detail_edit_action", ctx.id_param)
    return ctx.route_url("edit_action", ctx.id_param)


class Views:
    def __init__(self, **overrides):
        for name, view in overrides.items():
            if name not in VIEW_NAMES:
                raise ValueError(f'Unknown view "{name}"')
            if not callable(view):
                raise ValueError(f'View "{name}" must be callable')
            setattr(self, name, view)

    def _render(self, template: str, ctx, **kwargs) -> str:
        return render_template(
            f"crud_ui/{template}",
            ctx=ctx,
            display_value=display_value,
            form_value=form_value,
            custom_view=custom_view,
            record_value=record_value,
            **kwargs,
        )

    def list_page(self, ctx, data: list) -> str:
        return self._render("list.html", ctx, data=data)

    def edit_page(self, ctx, record: Any) -> str:
        return self._render(
            "edit.html",
            ctx,
            record=record,
            back_url=edit_back_url(ctx),
            form_action=edit_form_action(ctx, record),
        )

    def detail_page(self, ctx, record: Any) -> str:
        return self._render("detail.html", ctx, record=record)

    def error_page(self, ctx, error: BaseException) -> str:
        return self._render("error.html", ctx, error=error)
