from flask import request
from .utils.time import utc_now


class FixedWindowLimiter:
    """Counts hits per client in fixed time windows, in process memory."""

    def __init__(self):
        self._state: dict[str, tuple[int, int]] = {}

    def allow(self, key: str, limit: int, window_seconds: int, now: int | None = None) -> bool:
        if now is None:
            now = int(utc_now().timestamp())
        window = now // window_seconds
        self._prune(window)

        count, win = self._state.get(key, (0, window))
        if win != window:
            count, win = 0, window
        count += 1
        self._state[key] = (count, win)
        return count <= limit

    def _prune(self, window: int) -> None:
        expired = [key for key, (_, win) in self._state.items() if win < window]
        for key in expired:
            del self._state[key]

    def clear(self) -> None:
        self._state.clear()

    def __len__(self) -> int:
        return len(self._state)


# Every /api/ request, and bookings on top of that.
api_limiter = FixedWindowLimiter()
booking_limiter = FixedWindowLimiter()


def client_ip() -> str:
    fwd = request.headers.get("X-Forwarded-For")
    return (fwd.split(",")[0].strip() if fwd else request.remote_addr or "0.0.0.0")
