# crud_ui/helpers.py
"""
Helper functions for the CRUD UI.
This module provides token generation, raw cookie header parsing,
cookie emission and the small string utilities used to derive titles.
"""

import os
import re
from inspect import iscoroutinefunction
from typing import Any, Optional

from flask import current_app
from werkzeug.http import parse_cookie


def random_token() -> str:
    return os.urandom(16).hex()


def extract_cookie(cookie_header: Optional[str], name: str) -> Optional[str]:
    """Pull one cookie value out of a raw Cookie header. Returns None if absent or empty."""
    if not cookie_header:
        return None
    return parse_cookie(cookie_header).get(name) or None


def set_cookie(response, name: str, value: str, secure: bool = False):
    # No explicit path: every mount sharing a cookie name shares the cookie
    response.set_cookie(name, value, httponly=True, samesite="Strict", secure=secure)


def clear_cookie(response, name: str, secure: bool = False):
    response.delete_cookie(name, httponly=True, samesite="Strict", secure=secure)


def get_or_call(value: Any, *args) -> Any:
    """Function-or-literal options: call value with args if it is callable. Coroutine functions run to completion."""
    if iscoroutinefunction(value):
        return current_app.ensure_sync(value)(*args)
    if callable(value):
        return value(*args)
    return value


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def uncapitalize(text: str) -> str:
    return text[:1].lower() + text[1:]


def deslugify(text: str) -> str:
    """Turn "first_name" or "firstName" into "first name"."""
    text = re.sub(r"[_\-]+", " ", text)
    words = re.findall(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+", text)
    if not words:
        return text.strip()
    return " ".join([words[0]] + [w.lower() for w in words[1:]])


def pluralize(word: str) -> str:
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and lower[-2:-1] not in ("a", "e", "i", "o", "u"):
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def slugify(text: str) -> str:
    return re.sub(r"\W+", "_", text).strip("_").lower() or "crud"
