"""Process-scoped de-duplication of log messages."""
from __future__ import annotations

import threading
from typing import Set


class LoggingBouncer:
    """Remembers which keys have already been logged.

    Used to emit a message once per coordinate or once per repository even
    when the same project is resolved many times in one process. Guarded by
    a lock because resolutions may run on several threads.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def add(self, key: str) -> bool:
        """Insert ``key`` if absent; return True only for the first insertion."""
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._seen

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()


# Default instance shared by the CLI entry point.
DEFAULT_BOUNCER = LoggingBouncer()
