import threading


class OneShotLatch:
    """A flag that goes from unset to set exactly once and never resets.

    ``set()`` is a compare-and-set: among any number of racing callers exactly
    one gets True. Waiters are released when that first call returns.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()

    def set(self):
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    def is_set(self):
        return self._event.is_set()

    def wait(self, timeout=None):
        return self._event.wait(timeout)

    def __repr__(self):
        return "OneShotLatch(set={})".format(self.is_set())
