"""
Outcome of a message handler.

The three variants can only be built through `success()`, `retry()` and
`drop()`; the response encoder checks for exactly these classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

ResultError = Union[BaseException, str]


class ResultStatus(str, Enum):
    SUCCESS = "SUCCESS"
    RETRY = "RETRY"
    DROP = "DROP"


@dataclass(frozen=True)
class MessageResult:
    status: ResultStatus
    error: Optional[ResultError] = None

    @property
    def error_message(self) -> Optional[str]:
        return None if self.error is None else str(self.error)


class _Success(MessageResult):
    pass


class _Retry(MessageResult):
    pass


class _Drop(MessageResult):
    pass


_SUCCESS = _Success(ResultStatus.SUCCESS)


def success() -> MessageResult:
    return _SUCCESS


def retry(error: Optional[ResultError] = None) -> MessageResult:
    """Transient failure: the sidecar should redeliver the message later."""
    return _Retry(ResultStatus.RETRY, error)


def drop(error: Optional[ResultError] = None) -> MessageResult:
    """Permanent failure: the sidecar should stop redelivering the message."""
    return _Drop(ResultStatus.DROP, error)


def is_success(result: object) -> bool:
    return type(result) is _Success


def is_retry(result: object) -> bool:
    return type(result) is _Retry


def is_drop(result: object) -> bool:
    return type(result) is _Drop


__all__ = [
    "MessageResult",
    "ResultStatus",
    "success",
    "retry",
    "drop",
    "is_success",
    "is_retry",
    "is_drop",
]
