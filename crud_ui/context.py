# crud_ui/context.py
"""
Per-request context handed to actions, validators, texts and views.
Built fresh for every request, so nothing in here is shared between clients.
"""

from typing import Any, Optional
from urllib.parse import urlencode

from flask import g, request, url_for


class CrudContext:
    def __init__(self, options, route_name: Optional[str] = None):
        self.options = options
        self.route_name = route_name
        self.id_param: Optional[str] = (request.view_args or {}).get("id")
        self.body: dict[str, Any] = request.form.to_dict() if request.form else {}
        self.original_url = request.full_path.rstrip("?")
        self.base_url = self._find_base_url()
        self.csrf_token: Optional[str] = g.get("crud_csrf_token")
        self.flash: dict = g.get("crud_flash") or {}
        self.session = g.get("crud_session")

    def _find_base_url(self) -> str:
        if not request.blueprint:
            return request.script_root
        index_url = url_for(f"{request.blueprint}.index_page")
        index_path = self.options.routes.index_page
        if index_path and index_url.endswith(index_path):
            index_url = index_url[: -len(index_path)]
        return index_url.rstrip("/")

    def url(self, path: str, query: Any = None) -> str:
        """Make a URL relative to where the CRUD UI is mounted."""
        if not path.startswith("/"):
            path = "/" + path
        result = self.base_url + path
        if query:
            if isinstance(query, str):
                result += query if query.startswith("?") else "?" + query
            else:
                result += "?" + urlencode(query)
        return result

    def route_url(self, route_name: str, id: Any = None, query: Any = None) -> str:
        return self.url(self.options.routes.path(route_name, id), query)

    def text(self, key: str, *args) -> str:
        return self.options.texts.resolve(key, self, *args)

    @property
    def validation_error(self):
        return self.flash.get("error")

    @property
    def actions(self):
        return self.options.actions

    @property
    def fields(self):
        return self.options.fields

    @property
    def tweaks(self):
        return self.options.tweaks

    @property
    def views(self):
        return self.options.views

    @property
    def texts(self):
        return self.options.texts

    @property
    def routes(self):
        return self.options.routes
