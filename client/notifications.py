"""Toast notifications posted by the UI controllers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

ERROR = "error"
SUCCESS = "success"


class ClientValidationError(ValueError):
    """Raised when form input is rejected before any network call."""

    def __init__(self, title: str, message: str) -> None:
        super().__init__(message)
        self.title = title
        self.message = message


@dataclass(frozen=True)
class Toast:
    title: str
    message: str
    level: str = SUCCESS


class ToastQueue:
    """In-memory queue of notifications waiting to be shown."""

    def __init__(self) -> None:
        self._pending: List[Toast] = []

    def post(self, title: str, message: str, level: str = SUCCESS) -> Toast:
        toast = Toast(title=title, message=message, level=level)
        self._pending.append(toast)
        return toast

    def error(self, title: str, message: str) -> Toast:
        return self.post(title, message, level=ERROR)

    def success(self, title: str, message: str) -> Toast:
        return self.post(title, message, level=SUCCESS)

    def drain(self) -> List[Toast]:
        pending, self._pending = self._pending, []
        return pending

    @property
    def last(self) -> Toast | None:
        return self._pending[-1] if self._pending else None

    def __len__(self) -> int:
        return len(self._pending)


__all__ = ["ClientValidationError", "ERROR", "SUCCESS", "Toast", "ToastQueue"]
