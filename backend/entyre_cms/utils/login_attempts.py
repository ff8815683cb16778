# entyre_cms/utils/login_attempts.py
"""
In-process login attempt limiter.

Failures are tracked per ``client_ip:username`` key. Once a key reaches
``max_attempts`` failures inside ``window_seconds`` it stays locked until the
oldest failure in the window ages out. A successful login clears the key.
The map never grows past ``capacity`` keys: stale keys are swept on access and
the least recently touched key is evicted when it is full.
"""
import threading
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional


class LoginAttemptLimiter:
    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: int = 300,
        capacity: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.capacity = capacity
        self._clock = clock
        self._lock = threading.Lock()
        self._attempts: "OrderedDict[str, List[float]]" = OrderedDict()

    @staticmethod
    def key_for(client_ip: Optional[str], username: str) -> str:
        return f"{client_ip or 'unknown'}:{username}"

    def _recent(self, key: str, now: float) -> List[float]:
        cutoff = now - self.window_seconds
        attempts = [ts for ts in self._attempts.get(key, []) if ts > cutoff]
        if attempts:
            self._attempts[key] = attempts
        else:
            self._attempts.pop(key, None)
        return attempts

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        stale = [key for key, attempts in self._attempts.items() if not attempts or attempts[-1] <= cutoff]
        for key in stale:
            del self._attempts[key]

    def retry_after(self, key: str) -> int:
        """Seconds until ``key`` may try again; 0 when it is not locked."""
        with self._lock:
            now = self._clock()
            attempts = self._recent(key, now)
            if len(attempts) < self.max_attempts:
                return 0
            return max(1, int(attempts[0] + self.window_seconds - now))

    def register_failure(self, key: str) -> int:
        """Record a failure; returns the number of failures in the window."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            attempts = self._recent(key, now)
            attempts.append(now)
            self._attempts[key] = attempts
            self._attempts.move_to_end(key)
            while len(self._attempts) > self.capacity:
                self._attempts.popitem(last=False)
            return len(attempts)

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {key: len(attempts) for key, attempts in self._attempts.items()}

    def __len__(self):
        with self._lock:
            return len(self._attempts)
