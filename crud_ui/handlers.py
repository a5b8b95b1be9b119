# crud_ui/handlers.py
"""
Handlers for the standard CRUD pages and actions.
Each takes a CrudContext and returns HTML or a redirect; record access goes
exclusively through the user-supplied actions.
"""

from typing import Any, Optional

from flask import current_app

from crud_ui.coercion import coerce_and_validate
from crud_ui.context import CrudContext
from crud_ui.errors import ActionNotSupportedError, CrudError, NotFoundError, ValidationError
from crud_ui.responses import RedirectResponse


def run_action(ctx: CrudContext, name: str, *args) -> Any:
    """Call an action, whether it is a plain function or a coroutine function."""
    action = getattr(ctx.actions, name)
    return current_app.ensure_sync(action)(ctx, *args)


def result_to_flash(ctx: CrudContext, text_key: str, result: Any) -> Optional[dict]:
    """Turn an action's return value into a flash. True or falsy results show nothing."""
    if not result or result is True:
        return None
    message = result if isinstance(result, str) else ctx.text(text_key, result)
    return {"message": message, "flavor": "success"}


def _get_record(ctx: CrudContext) -> Any:
    record = run_action(ctx, "get_single", ctx.id_param)
    if not record:
        raise NotFoundError(ctx.text("error_not_found", ctx.id_param))
    return record


def index_page(ctx: CrudContext):
    if ctx.options.is_single_record_mode:
        data = run_action(ctx, "get_single", None)
        if not data:
            raise CrudError("Invalid data")
        return ctx.views.detail_page(ctx, data)

    data = run_action(ctx, "get_list")
    if data is None:
        raise CrudError("Invalid data")
    return ctx.views.list_page(ctx, list(data))


def create_page(ctx: CrudContext):
    ActionNotSupportedError.assert_supported(ctx.actions, "create")
    return ctx.views.edit_page(ctx, None)


def create_action(ctx: CrudContext):
    ActionNotSupportedError.assert_supported(ctx.actions, "create")

    try:
        payload = coerce_and_validate(ctx, "create")
        result = run_action(ctx, "create", payload)
    except ValidationError as error:
        return RedirectResponse(ctx.route_url("create_page"), {"error": error})

    return RedirectResponse(
        ctx.route_url("index_page"),
        result_to_flash(ctx, "flash_message_record_created", result),
    )


def edit_page(ctx: CrudContext):
    ActionNotSupportedError.assert_supported(ctx.actions, "update")
    record = _get_record(ctx)

    if ctx.session is not None:
        if ctx.route_name == "detail_edit_page":
            ctx.session.edit_back_url = ctx.route_url("detail_page", ctx.id_param)
        else:
            ctx.session.edit_back_url = ctx.route_url("index_page")

    return ctx.views.edit_page(ctx, record)


def edit_action(ctx: CrudContext):
    ActionNotSupportedError.assert_supported(ctx.actions, "update")
    from_detail = ctx.route_name == "detail_edit_action"

    try:
        payload = coerce_and_validate(ctx, "edit")
        if ctx.options.is_single_record_mode:
            result = run_action(ctx, "update", payload)
        else:
            result = run_action(ctx, "update", ctx.id_param, payload)
    except ValidationError as error:
        if ctx.options.is_single_record_mode:
            back = ctx.route_url("single_record_mode_edit_page")
        elif from_detail:
            back = ctx.route_url("detail_edit_page", ctx.id_param)
        else:
            back = ctx.route_url("edit_page", ctx.id_param)
        return RedirectResponse(back, {"error": error})

    if from_detail and not ctx.options.is_single_record_mode:
        target = ctx.route_url("detail_page", ctx.id_param)
    else:
        target = ctx.route_url("index_page")
    return RedirectResponse(target, result_to_flash(ctx, "flash_message_record_updated", result))


def detail_page(ctx: CrudContext):
    return ctx.views.detail_page(ctx, _get_record(ctx))


def delete_action(ctx: CrudContext):
    ActionNotSupportedError.assert_supported(ctx.actions, "delete")
    result = run_action(ctx, "delete", ctx.id_param)
    return RedirectResponse(
        ctx.route_url("index_page"),
        result_to_flash(ctx, "flash_message_record_deleted", result),
    )
