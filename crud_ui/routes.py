# crud_ui/routes.py
"""
Builds the blueprint serving one CRUD UI mount.
Each call constructs its own flash manager, CSRF guard and session store, so
two mounts never share state unless they share cookie names on purpose.
"""

import logging
from typing import Optional

from flask import Blueprint, g
from werkzeug.exceptions import HTTPException

from crud_ui import handlers
from crud_ui.context import CrudContext
from crud_ui.csrf import CSRFGuard
from crud_ui.errors import CrudError
from crud_ui.flash import FlashManager
from crud_ui.helpers import slugify
from crud_ui.loggers import configure_logger
from crud_ui.models import Options
from crud_ui.responses import create_handler_response_wrapper, html_response
from crud_ui.sessions import SessionStore

LIST_ROUTES = (
    ("create_page", "GET", handlers.create_page),
    ("create_action", "POST", handlers.create_action),
    ("edit_page", "GET", handlers.edit_page),
    ("edit_action", "POST", handlers.edit_action),
    ("detail_page", "GET", handlers.detail_page),
    ("detail_edit_page", "GET", handlers.edit_page),
    ("detail_edit_action", "POST", handlers.edit_action),
    ("delete_action", "POST", handlers.delete_action),
)

SINGLE_RECORD_ROUTES = (
    ("single_record_mode_edit_page", "GET", handlers.edit_page),
    ("single_record_mode_edit_action", "POST", handlers.edit_action),
)


def default_on_error(logger: logging.Logger):
    def on_error(ctx: CrudContext, err: BaseException):
        code = getattr(err, "code", None) or 500
        if code < 500:
            logger.warning("%s %s: %s", ctx.route_name or "-", code, err)
        else:
            logger.error("Error while serving %s", ctx.original_url, exc_info=err)

    return on_error


def build_blueprint(options: Options, blueprint_name: Optional[str] = None) -> Blueprint:
    tweaks = options.tweaks
    logger = configure_logger(slugify(options.name), options.debug_log, options.ntfy_topic)
    on_error = options.on_error or default_on_error(logger)

    session_store = None
    if tweaks.sessions_enabled:
        session_store = SessionStore(
            tweaks.session_cookie_name,
            tweaks.session_ttl,
            tweaks.session_cleanup_interval,
            logger=logger,
            secure=options.is_production,
        )
    flash_manager = FlashManager(
        tweaks.flash_cookie_name,
        tweaks.flash_max_age,
        logger=logger,
        use_sessions=tweaks.sessions_enabled,
        secure=options.is_production,
    )
    csrf_guard = None
    if tweaks.csrf_enabled:
        csrf_guard = CSRFGuard(
            tweaks.csrf_field_name,
            tweaks.csrf_cookie_name,
            logger=logger,
            use_sessions=tweaks.sessions_enabled,
            secure=options.is_production,
        )

    bp = Blueprint(blueprint_name or slugify(options.name), __name__, template_folder="templates")
    bp.crud_options = options
    bp.flash_manager = flash_manager
    bp.csrf_guard = csrf_guard
    bp.session_store = session_store

    # The session feeds both the CSRF token and the flash slot. The CSRF check
    # runs before the flash is consumed so a rejected request leaves it pending
    for component in (session_store, csrf_guard, flash_manager):
        if component is not None:
            bp.before_request(component.before_request)
            bp.after_request(component.after_request)

    wrap = create_handler_response_wrapper(options, flash_manager)
    routes = options.routes

    def add(route_name: str, method: str, handler):
        bp.add_url_rule(
            routes.rule(route_name),
            endpoint=route_name,
            view_func=wrap(handler, route_name),
            methods=[method],
        )

    add("index_page", "GET", handlers.index_page)
    for route_name, method, handler in SINGLE_RECORD_ROUTES if options.is_single_record_mode else LIST_ROUTES:
        add(route_name, method, handler)

    @bp.errorhandler(Exception)
    def handle_error(err: Exception):
        if isinstance(err, HTTPException) and err.code and err.code < 400:
            return err

        ctx = CrudContext(options, g.get("crud_route_name"))
        on_error(ctx, err)

        code = err.code if isinstance(err, (CrudError, HTTPException)) and err.code else 500
        return html_response(options.views.error_page(ctx, err), code)

    logger.debug("Mounted CRUD UI for %s in %s mode", options.name, options.mode)
    return bp
