# crud_ui/flash.py
"""
One-time "flash" messages that survive a redirect.

The payload stays in process memory; the client only holds an opaque token
in a cookie. Reading a flash deletes it, and stale entries are swept out
whenever a new flash is set. With sessions enabled the payload lives in the
session's flash slot instead and no flash cookie is used.
"""

import logging
from datetime import timedelta
from typing import Any, Callable, Optional

from flask import g, request

from crud_ui.helpers import clear_cookie, extract_cookie, random_token, set_cookie
from crud_ui.models import FlashEntry
from crud_ui.stores import TokenStore, utcnow


class FlashManager:
    def __init__(
        self,
        cookie_name: str,
        max_age: float,
        logger: Optional[logging.Logger] = None,
        use_sessions: bool = False,
        secure: bool = False,
        clock: Callable = utcnow,
    ):
        self.cookie_name = cookie_name
        self.max_age = timedelta(seconds=max_age)
        self.logger = logger or logging.getLogger(__name__)
        self.use_sessions = use_sessions
        self.secure = secure
        self.clock = clock
        self.store: TokenStore[FlashEntry] = TokenStore()

    def clean_old_flashes(self) -> list[str]:
        now = self.clock()
        removed = self.store.sweep(lambda entry: now - entry.created_at > self.max_age)
        for token in removed:
            self.logger.debug('Cleaned outdated flash "%s"', token)
        return removed

    def set_flash(self, response, payload: Any) -> Optional[str]:
        """Store payload as a one-time flash for the client that receives response."""
        g.crud_flash_set = True

        session = g.get("crud_session")
        if self.use_sessions and session is not None:
            session.flash = payload
            self.logger.debug("Set flash on session %s", session.key)
            return None

        self.clean_old_flashes()

        token = random_token()
        self.store.put(token, FlashEntry(token=token, payload=payload, created_at=self.clock()))
        self.logger.debug('Set flash "%s": %r', token, payload)
        set_cookie(response, self.cookie_name, token, secure=self.secure)
        return token

    def consume(self, token: Optional[str]) -> Optional[Any]:
        if not token:
            return None
        entry = self.store.pop(token)
        if entry is None:
            return None
        self.logger.debug('Consumed flash "%s"', token)
        return entry.payload

    def before_request(self):
        session = g.get("crud_session")
        if self.use_sessions and session is not None:
            if session.flash is not None:
                g.crud_flash, session.flash = session.flash, None
            return None

        token = extract_cookie(request.headers.get("Cookie"), self.cookie_name)
        if not token:
            return None

        g.crud_flash_clear = True
        payload = self.consume(token)
        if payload is not None:
            g.crud_flash = payload
        return None

    def after_request(self, response):
        # A flash set during this request already replaced the cookie
        if g.get("crud_flash_clear") and not g.get("crud_flash_set"):
            clear_cookie(response, self.cookie_name, secure=self.secure)
        return response
