# crud_ui/responses.py
"""
Handler results and the wrapper that turns them into Flask responses.

A handler takes a CrudContext and returns a string (literal HTML), an
HtmlResponse or a RedirectResponse. Either response may carry a flash,
which is stored through the flash manager before the response leaves.
"""

from typing import Any, Callable, Optional, Union

from flask import g, make_response, redirect

from crud_ui.context import CrudContext
from crud_ui.errors import CrudError, NotFoundError


class CrudResponse:
    def __init__(self, flash: Optional[dict] = None):
        self.flash = flash

    @staticmethod
    def cast(result: Any) -> "CrudResponse":
        if isinstance(result, str):
            return HtmlResponse(result)
        if isinstance(result, CrudResponse):
            return result
        raise CrudError("Invalid handler response")


class HtmlResponse(CrudResponse):
    def __init__(self, html: str, flash: Optional[dict] = None):
        super().__init__(flash)
        self.html = html


class RedirectResponse(CrudResponse):
    def __init__(self, location: str, flash: Optional[dict] = None):
        super().__init__(flash)
        self.location = location


HandlerResult = Union[str, CrudResponse]


def html_response(html: str, status: int = 200):
    response = make_response(html, status)
    response.headers["Content-Type"] = "text/html; charset=utf-8"
    return response


def create_handler_response_wrapper(options, flash_manager):
    def wrap(handler: Callable[[CrudContext], HandlerResult], route_name: str):
        def view(**_):
            # Remember which route was triggered, the error handler needs it too
            g.crud_route_name = route_name
            ctx = CrudContext(options, route_name)
            try:
                resp = CrudResponse.cast(handler(ctx))
            except NotFoundError as err:
                return html_response(ctx.views.error_page(ctx, err), err.code)

            if isinstance(resp, RedirectResponse):
                response = redirect(resp.location, code=303)
            else:
                response = html_response(resp.html)

            if resp.flash:
                flash_manager.set_flash(response, resp.flash)
            return response

        view.__name__ = route_name
        return view

    return wrap
