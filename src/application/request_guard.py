"""
Last-request-wins guard for overlapping async pricing passes
"""

import threading


class LatestRequestGuard:
    """
    Hands out increasing tokens; only the newest token is current

    A pass calls ``begin()`` before awaiting its fetches and checks
    ``is_current(token)`` before publishing, so a slower earlier pass can
    never overwrite the result of a later one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    def begin(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest
