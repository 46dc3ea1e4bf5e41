"""
Cooperative cancellation hooks for the chain runner.

The runner calls its callback once per iteration before the transition; a
callback stops the chain by raising. These helpers raise ChainCancelled so
callers can tell a deliberate stop from a real failure.
"""

import threading
import time

from ..errors import ChainCancelled


def no_op_callback():
    """Default callback: never cancels."""


class CancellationToken:
    """
    Callback that raises ChainCancelled once cancel() has been called.

    cancel() may be called from any thread; the chain stops before its next
    transition.
    """

    def __init__(self):
        self._event = threading.Event()
        self.reason = None

    def cancel(self, reason='cancelled'):
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def __call__(self):
        if self._event.is_set():
            raise ChainCancelled(self.reason)


def deadline_callback(seconds, clock=time.monotonic):
    """Callback raising ChainCancelled once `seconds` of wall time have passed."""
    deadline = clock() + seconds

    def check_deadline():
        if clock() >= deadline:
            raise ChainCancelled(f"time budget of {seconds}s exhausted")
    return check_deadline
