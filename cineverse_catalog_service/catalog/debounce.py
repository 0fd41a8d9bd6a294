"""Trailing-edge debounce for rapidly changing input (search text)."""
import functools
import threading
from typing import Any, Callable

_MISSING = object()


class Debouncer:
    """
    Delay-and-coalesce a stream of values.

    Every ``push`` cancels the pending timer and starts a new one, so only
    the most recent value survives a quiet period of ``delay_ms``. The last
    value is always delivered once input stops.

    Args:
        delay_ms: Quiet period in milliseconds
        callback: Called with the surviving value
        timer_factory: ``threading.Timer`` compatible factory (injectable for tests)
    """

    def __init__(
            self,
            delay_ms: int,
            callback: Callable[[Any], None],
            timer_factory: Callable[..., Any] = threading.Timer
    ):
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

        self.delay_ms = delay_ms
        self.callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._pending = _MISSING
        # Bumped on every push/cancel; a timer only fires for its own generation
        self._generation = 0

    @property
    def pending(self) -> bool:
        """True while a value is waiting for the quiet period to elapse."""
        with self._lock:
            return self._pending is not _MISSING

    def push(self, value: Any) -> None:
        """Record ``value`` and restart the quiet period."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = value
            timer = self._timer_factory(self.delay_ms / 1000.0, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is _MISSING:
                return
            value = self._pending
            self._pending = _MISSING
            self._timer = None
        self.callback(value)

    def flush(self) -> bool:
        """
        Deliver the pending value immediately.

        Returns:
            True if a value was delivered
        """
        with self._lock:
            if self._pending is _MISSING:
                return False
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            value = self._pending
            self._pending = _MISSING
            self._timer = None
        self.callback(value)
        return True

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = _MISSING
            self._timer = None


def debounce(delay_ms: int, timer_factory: Callable[..., Any] = threading.Timer):
    """
    Decorator form of ``Debouncer`` for single-argument callbacks.

    The wrapped function exposes its ``Debouncer`` as ``.debouncer``.
    """
    def decorator(func):
        debouncer = Debouncer(delay_ms, func, timer_factory=timer_factory)

        @functools.wraps(func)
        def wrapper(value):
            debouncer.push(value)

        wrapper.debouncer = debouncer
        return wrapper

    return decorator
