from __future__ import annotations

import threading

from .errors import AlreadyCalled


class CallTracker:
    """Allows exactly one call over the lifetime of its owner.

    The flag flips under a lock, so racing callers (threads or tasks) get
    exactly one success.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._called = False

    @property
    def called(self) -> bool:
        return self._called

    def record_call(self) -> None:
        with self._lock:
            if self._called:
                raise AlreadyCalled()
            self._called = True
