"""Error normalization for bus connections."""

from __future__ import annotations

import errno
from enum import Enum
from typing import Any


class BusErrorCode(str, Enum):
    ALREADY_REGISTERED = "already_registered"
    NOT_REGISTERED = "not_registered"
    CONNECTION_CLOSED = "connection_closed"
    INVALID_ARGUMENT = "invalid_argument"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class BusError(Exception):
    """Connection-level normalized bus error."""

    def __init__(self, code: BusErrorCode, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.code = code
        self.cause = cause


_CLOSED_ERRNOS = {errno.ENOTCONN, errno.EPIPE, errno.ECONNRESET, errno.ESHUTDOWN}


def map_bus_error(error: Exception | Any) -> BusError:
    """Map transport exceptions to internal bus errors.

    Already-normalized errors pass through unchanged.
    """

    if isinstance(error, BusError):
        return error

    message = str(error)
    code = getattr(error, "errno", None)

    if code == errno.EEXIST:
        return BusError(BusErrorCode.ALREADY_REGISTERED, message, cause=error)
    if code == errno.ENOENT:
        return BusError(BusErrorCode.NOT_REGISTERED, message, cause=error)
    if code in _CLOSED_ERRNOS or isinstance(error, (BrokenPipeError, ConnectionResetError)):
        return BusError(BusErrorCode.CONNECTION_CLOSED, message, cause=error)
    if isinstance(error, OSError):
        return BusError(BusErrorCode.TRANSPORT, message, cause=error)
    if isinstance(error, (ValueError, TypeError)):
        return BusError(BusErrorCode.INVALID_ARGUMENT, message, cause=error)

    return BusError(BusErrorCode.UNKNOWN, message, cause=error)
