"""
Singleflight - collapse concurrent calls for the same key into one.

The first caller for a key runs the function; callers arriving while it is
in flight block and receive the same result (or exception).
"""
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Tuple


class _Call:
    def __init__(self):
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None


class SingleFlight:

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[Hashable, _Call] = {}

    def do(self, key: Hashable, fn: Callable[[], Any]) -> Tuple[Any, bool]:
        """Run ``fn`` once per in-flight ``key``.

        Returns:
            (result, shared) where shared is True if this caller joined
            another caller's computation.
        """
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if leader:
                call = _Call()
                self._calls[key] = call

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result, True

        try:
            call.result = fn()
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                self._calls.pop(key, None)
            call.done.set()

        return call.result, False

    def in_flight(self) -> int:
        with self._lock:
            return len(self._calls)
