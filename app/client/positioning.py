from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from app.schemas.enums import PositionErrorCode

POSITION_ERROR_MESSAGES = {
    PositionErrorCode.permission_denied: "Location permission denied. Please allow location access in your device settings.",
    PositionErrorCode.position_unavailable: "Location information is unavailable. Please make sure GPS is enabled.",
    PositionErrorCode.timeout: "Location request timed out. Please try again.",
}


@dataclass(frozen=True)
class PositionFix:
    lat: float
    lng: float
    accuracy: Optional[float] = None


class PositionError(Exception):
    def __init__(self, code: PositionErrorCode, detail: str | None = None):
        self.code = PositionErrorCode(code)
        super().__init__(detail or self.user_message)

    @property
    def user_message(self) -> str:
        return POSITION_ERROR_MESSAGES[self.code]


FixHandler = Callable[[PositionFix], None]
ErrorHandler = Callable[[PositionError], None]


class Subscription(Protocol):
    def cancel(self) -> None: ...


class PositionSource(Protocol):
    def watch(self, on_fix: FixHandler, on_error: ErrorHandler) -> Subscription: ...


class _Watch:
    def __init__(self, source: "ManualPositionSource", on_fix: FixHandler, on_error: ErrorHandler):
        self._source = source
        self.on_fix = on_fix
        self.on_error = on_error
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self._source._drop(self)


class ManualPositionSource:
    """In-process position source; the embedding code pushes fixes into it."""

    def __init__(self):
        self._watches: List[_Watch] = []

    @property
    def watching(self) -> bool:
        return bool(self._watches)

    def watch(self, on_fix: FixHandler, on_error: ErrorHandler) -> _Watch:
        w = _Watch(self, on_fix, on_error)
        self._watches.append(w)
        return w

    def _drop(self, w: _Watch) -> None:
        if w in self._watches:
            self._watches.remove(w)

    def emit(self, fix: PositionFix) -> None:
        for w in list(self._watches):
            w.on_fix(fix)

    def fail(self, code: PositionErrorCode) -> None:
        for w in list(self._watches):
            w.on_error(PositionError(code))
