"""
Cooperative cancellation shared by the monitor and its worker
"""

import threading

from .errors import MonitoringCancelled


class CancellationToken:
    """Cancellation signal checked at every point where monitoring may block"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        """Signal cancellation (safe to call more than once)"""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self):
        """Raise MonitoringCancelled if cancellation has been requested"""
        if self._event.is_set():
            raise MonitoringCancelled()

    def sleep(self, seconds: float):
        """Wait up to `seconds`, waking early and raising if cancelled"""
        if self._event.wait(seconds):
            raise MonitoringCancelled()
