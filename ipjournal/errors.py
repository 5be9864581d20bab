# ipjournal/errors.py

from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_ADDRESS = "invalid_address"
    INVALID_MASK = "invalid_mask"
    INVALID_TIME = "invalid_time"
    IO_FAILURE = "io_failure"
    CONFIG = "config"


class IpJournalError(ValueError):
    """Base error; `kind` tags the failure, `param` names the offending input."""

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(self, message: str, param: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.param = param

    def __str__(self) -> str:
        if self.param and self.param not in self.message:
            return f"{self.message} (parameter '{self.param}')"
        return self.message


class InvalidAddressError(IpJournalError):
    kind = ErrorKind.INVALID_ADDRESS


class InvalidMaskError(IpJournalError):
    kind = ErrorKind.INVALID_MASK


class InvalidTimeError(IpJournalError):
    kind = ErrorKind.INVALID_TIME


class IoFailureError(IpJournalError):
    kind = ErrorKind.IO_FAILURE


class ConfigError(IpJournalError):
    kind = ErrorKind.CONFIG
