"""
Key/value store used by the screening session for credential, criteria, language and history.
"""
import threading
from typing import Dict, Optional, Protocol

# Keys shared with the browser client's local storage
CREDENTIAL_KEY = "openai_api_key"
HISTORY_KEY = "resume_history"
LANGUAGE_KEY = "preferred_language"
CRITERIA_KEY = "resume_criteria"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local store; one instance per screening session"""

    def __init__(self, initial: Dict[str, str] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
