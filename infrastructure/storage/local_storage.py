"""
Durable key-value storage for the session credentials.

Every backend is synchronous from the caller's point of view and stores plain
strings. No expiry or versioning is applied here.
"""

import json
import logging
import os
import re
import secrets
import tempfile
from typing import Callable, Dict, Mapping, Optional, Protocol
from urllib.parse import quote, unquote

log = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """Single JSON object on disk; each write replaces the file atomically."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning(f"⚠️ Session file {self.path} is unreadable, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


COOKIE_PREFIX = "trackhive_"
COOKIE_MAX_AGE = 2592000  # 30 days


def _cookie_script(name: str, value: Optional[str]) -> str:
    if value is None:
        cookie = f"{name}=; path=/; max-age=0; SameSite=Lax"
    else:
        cookie = f"{name}={quote(value, safe='')}; path=/; max-age={COOKIE_MAX_AGE}; SameSite=Lax"
    return f"""
        <script>
            var cookieStr = {json.dumps(cookie)};
            document.cookie = cookieStr;
            try {{ window.parent.document.cookie = cookieStr; }} catch (e) {{}}
        </script>
    """


def _emit_html(script: str) -> None:
    import streamlit.components.v1 as components

    components.html(script, height=0)


class BrowserCookieStorage:
    """
    Browser-origin cookies as durable storage.

    Reads come from the request cookies overlaid with writes made during the
    current session, so a value written is immediately readable even though
    the browser only receives it through an injected script.
    """

    def __init__(
        self,
        cookies: Optional[Mapping[str, str]] = None,
        overlay: Optional[Dict[str, Optional[str]]] = None,
        emit: Callable[[str], None] = _emit_html,
    ):
        self._cookies = cookies
        # key -> value, None marks a removal not yet visible in request cookies
        self._overlay: Dict[str, Optional[str]] = overlay if overlay is not None else {}
        self._emit = emit

    def _request_cookies(self) -> Mapping[str, str]:
        if self._cookies is not None:
            return self._cookies
        import streamlit as st

        try:
            return st.context.cookies
        except Exception:
            # No script run context (bare mode)
            return {}

    def get(self, key: str) -> Optional[str]:
        if key in self._overlay:
            return self._overlay[key]
        raw = self._request_cookies().get(COOKIE_PREFIX + key)
        return unquote(raw) if raw else None

    def set(self, key: str, value: str) -> None:
        self._overlay[key] = value
        self._emit(_cookie_script(COOKIE_PREFIX + key, value))

    def remove(self, key: str) -> None:
        self._overlay[key] = None
        self._emit(_cookie_script(COOKIE_PREFIX + key, None))


SESSION_ID_KEY = "sid"
_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]{32,64}$")


def browser_session_id(cookies: KeyValueStorage) -> str:
    """Random per-browser id kept in a cookie; issued on first visit."""
    sid = cookies.get(SESSION_ID_KEY)
    if not sid or not _SESSION_ID_PATTERN.match(sid):
        sid = secrets.token_urlsafe(32)
        cookies.set(SESSION_ID_KEY, sid)
    return sid


def session_file_storage(directory: str, cookies: KeyValueStorage) -> JsonFileStorage:
    """
    Server-side session file for one browser. The browser only holds the id,
    the credentials stay on disk under `directory`.
    """
    return JsonFileStorage(os.path.join(directory, f"{browser_session_id(cookies)}.json"))
