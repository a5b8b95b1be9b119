# crud_ui/sessions.py
"""
Server-side sessions for CRUD UI clients.

A session is found through its cookie or created on the spot, and its
last_seen_at is touched on every request. Expired sessions are removed by a
sweep that runs at most once per cleanup interval, piggybacking on
whichever request happens to come in.
"""

import logging
from datetime import timedelta
from typing import Callable, Optional

from flask import g, request

from crud_ui.helpers import extract_cookie, random_token, set_cookie
from crud_ui.models import Session
from crud_ui.stores import TokenStore, utcnow


class SessionStore:
    def __init__(
        self,
        cookie_name: str,
        ttl: float,
        cleanup_interval: float = 300,
        logger: Optional[logging.Logger] = None,
        secure: bool = False,
        clock: Callable = utcnow,
    ):
        self.cookie_name = cookie_name
        self.ttl = timedelta(seconds=ttl)
        self.cleanup_interval = timedelta(seconds=cleanup_interval)
        self.logger = logger or logging.getLogger(__name__)
        self.secure = secure
        self.clock = clock
        self.store: TokenStore[Session] = TokenStore()
        self.last_cleanup_at = clock()

    def is_expired(self, session: Session, now) -> bool:
        return now - session.last_seen_at > self.ttl

    def clean_expired_sessions(self, now=None) -> list[str]:
        now = now or self.clock()
        removed = self.store.sweep(lambda session: self.is_expired(session, now))
        for key in removed:
            self.logger.debug("Session %s has expired", key)
        self.last_cleanup_at = now
        return removed

    def create(self, now) -> Session:
        session = Session(
            key=random_token(),
            created_at=now,
            last_seen_at=now,
            csrf_token=random_token(),
        )
        self.store.put(session.key, session)
        self.logger.debug("Session %s was created. IP: %s", session.key, request.remote_addr)
        return session

    def resolve(self, key: Optional[str], now) -> tuple[Session, bool]:
        """Find the live session for key, or make a new one. Returns (session, created)."""
        session = self.store.get(key) if key else None
        if session is not None and self.is_expired(session, now):
            self.store.pop(session.key)
            session = None
        if session is None:
            return self.create(now), True
        return session, False

    def before_request(self):
        now = self.clock()
        key = extract_cookie(request.headers.get("Cookie"), self.cookie_name)
        session, created = self.resolve(key, now)
        session.last_seen_at = now
        if created:
            g.crud_session_new = session.key
        g.crud_session = session

        if now - self.last_cleanup_at > self.cleanup_interval:
            self.clean_expired_sessions(now)
        return None

    def after_request(self, response):
        key = g.get("crud_session_new")
        if key:
            set_cookie(response, self.cookie_name, key, secure=self.secure)
        return response
