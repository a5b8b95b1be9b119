# crud_ui/csrf.py
"""
CSRF protection for CRUD UI forms.

Two shapes, chosen per mount and never mixed:
- double-submit: the token lives in a cookie and is echoed back in a hidden
  form field; a missing cookie is minted on the way out, so it is available
  from the next request on;
- session-bound: the token lives in the server-side session and is compared
  against the same hidden form field.
"""

import hmac
import logging
from typing import Optional

from flask import g, request

from crud_ui.errors import CSRFError
from crud_ui.helpers import extract_cookie, random_token, set_cookie

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def tokens_match(expected: Optional[str], submitted: Optional[str]) -> bool:
    if not expected or not submitted:
        return False
    return hmac.compare_digest(expected.encode(), submitted.encode())


class CSRFGuard:
    def __init__(
        self,
        field_name: str,
        cookie_name: str,
        logger: Optional[logging.Logger] = None,
        use_sessions: bool = False,
        secure: bool = False,
    ):
        self.field_name = field_name
        self.cookie_name = cookie_name
        self.logger = logger or logging.getLogger(__name__)
        self.use_sessions = use_sessions
        self.secure = secure

    def _current_token(self) -> Optional[str]:
        if self.use_sessions:
            session = g.get("crud_session")
            return session.csrf_token if session is not None else None
        return extract_cookie(request.headers.get("Cookie"), self.cookie_name)

    def before_request(self):
        token = self._current_token()

        if request.method in MUTATING_METHODS:
            submitted = request.form.get(self.field_name)
            if not tokens_match(token, submitted):
                self.logger.debug("CSRF check failed for %s %s", request.method, request.path)
                raise CSRFError()

        if not token and not self.use_sessions:
            token = random_token()
            g.crud_csrf_new = token
            self.logger.debug('CSRF set to "%s" for %s', token, request.path)

        g.crud_csrf_token = token
        return None

    def after_request(self, response):
        token = g.get("crud_csrf_new")
        if token:
            set_cookie(response, self.cookie_name, token, secure=self.secure)
        return response
