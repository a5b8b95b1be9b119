# crud_ui/texts.py
"""
Texts shown by the CRUD UI.
Each entry is either a literal string or a function taking the request
context (plus entry-specific arguments) and returning a string. Everything
goes through Texts.resolve().
"""

from typing import Any, Callable, Union

from crud_ui.helpers import capitalize, uncapitalize

Text = Union[str, Callable[..., str]]


def _record_descriptor(ctx, record) -> str:
    if ctx.options.is_single_record_mode:
        return ""
    return f"#{ctx.options.get_record_id(record)}"


def _record_title(ctx, record) -> str:
    if ctx.options.is_single_record_mode:
        return ctx.options.name
    return f"{ctx.options.name} {ctx.text('record_descriptor', record)}"


DEFAULT_TEXTS: dict[str, Text] = {
    "record_descriptor": _record_descriptor,
    "record_title": _record_title,
    "flash_message_record_created": lambda ctx, record: f"{capitalize(ctx.text('record_title', record))} created",
    "flash_message_record_updated": lambda ctx, record: f"{capitalize(ctx.text('record_title', record))} updated",
    "flash_message_record_deleted": lambda ctx, record: f"{capitalize(ctx.text('record_title', record))} deleted",
    "page_base_title": lambda ctx: capitalize(ctx.options.plural_name),
    "list_title": lambda ctx: capitalize(ctx.options.plural_name),
    "list_no_data": "No data is available",
    "list_create_button": lambda ctx: "Create a new " + uncapitalize(ctx.options.name),
    "list_edit_button": "Edit",
    "list_detail_button": "Show",
    "list_delete_button": "Delete",
    "list_confirm_delete_question": lambda ctx, record: (
        f"You are about to delete {uncapitalize(ctx.text('record_title', record))}. Proceed?"
    ),
    "edit_new_title": lambda ctx: "Create a new " + uncapitalize(ctx.options.name),
    "edit_new_save_button": "Create",
    "edit_existing_title": lambda ctx, record: f"Edit {uncapitalize(ctx.text('record_title', record))}",
    "edit_existing_save_button": "Save changes",
    "edit_cancel_button": "Cancel",
    "detail_title": lambda ctx, record: (
        capitalize(ctx.text("record_title", record))
        if ctx.options.is_single_record_mode
        else f"{capitalize(ctx.text('record_title', record))} details"
    ),
    "detail_edit_button": "Edit",
    "detail_delete_button": "Delete",
    "detail_back_button": "Back",
    "detail_confirm_delete_question": lambda ctx, record: (
        f"You are about to delete {uncapitalize(ctx.text('record_title', record))}. Proceed?"
    ),
    "error_page_title": "Error",
    "error_not_found": lambda ctx, id: f"{capitalize(ctx.options.name)} with id \"{id}\" couldn't be found",
}


class Texts:
    def __init__(self, **overrides: Text):
        self._texts: dict[str, Text] = dict(DEFAULT_TEXTS)
        for key, value in overrides.items():
            self.use(key, value)

    def use(self, key: str, value: Text) -> "Texts":
        if key not in DEFAULT_TEXTS:
            raise ValueError(f'Unknown text "{key}"')
        if not isinstance(value, str) and not callable(value):
            raise ValueError(f'Text "{key}" must be a string or a function')
        self._texts[key] = value
        return self

    def resolve(self, key: str, ctx, *args: Any) -> str:
        text = self._texts[key]
        if isinstance(text, str):
            return text
        return text(ctx, *args)
