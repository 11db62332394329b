"""
Client Session
Explicit session context holding the token and the signed-in user
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from timesheet_app.utils.logger import setup_logger

logger = setup_logger()

TOKEN_KEY = "token"
USER_KEY = "user"


def normalize_user(user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Return a copy of a user payload whose identity is available as ``_id``

    The API serializes identity as ``id``; callers only ever read ``_id``.
    """
    normalized = dict(user or {})
    if normalized.get("id") and not normalized.get("_id"):
        normalized["_id"] = normalized["id"]
    return normalized


class MemorySessionStore:
    """Key/value session storage kept in memory"""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str):
        self._items[key] = value

    def clear(self):
        self._items.clear()


class FileSessionStore:
    """Key/value session storage persisted as a JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt session file {self.path}")
            return {}

    def _write(self, items: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(items), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str):
        items = self._read()
        items[key] = value
        self._write(items)

    def clear(self):
        if self.path.exists():
            self.path.unlink()


class SessionContext:
    """
    Authentication state shared by client components

    ``start`` is called after a successful login and ``clear`` on logout.
    The token and the JSON-encoded user live under the ``token`` and
    ``user`` keys of the backing store.
    """

    def __init__(self, store=None):
        self.store = store if store is not None else MemorySessionStore()

    def start(self, token: str, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        normalized = normalize_user(user)
        self.store.set(TOKEN_KEY, token)
        self.store.set(USER_KEY, json.dumps(normalized))
        logger.info(f"Session started for {normalized.get('email', 'unknown user')}")
        return normalized

    def clear(self):
        self.store.clear()

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    @property
    def user(self) -> Dict[str, Any]:
        raw = self.store.get(USER_KEY)
        if not raw:
            return {}
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return {}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)
