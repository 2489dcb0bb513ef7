"""Default kernel error callback."""

from __future__ import annotations

from typing import Any, NoReturn, Optional, Union

from embedkit.rtx_os import ErrorCode

_DESCRIPTIONS = {
    ErrorCode.STACK_UNDERFLOW: "stack overflow detected for thread",
    ErrorCode.ISR_QUEUE_OVERFLOW: "ISR queue overflow detected when inserting object",
    ErrorCode.TIMER_QUEUE_OVERFLOW: "user timer callback queue overflow detected for timer",
    ErrorCode.CLIB_SPACE: "standard C library libspace not available: increase OS_THREAD_LIBSPACE_NUM",
    ErrorCode.CLIB_MUTEX: "standard C library mutex initialization failed",
}


class RtxFatalError(RuntimeError):
    """A fatal kernel error reported through the error callback."""

    def __init__(self, code: Union[ErrorCode, int], object_id: Optional[Any] = None) -> None:
        self.code = code
        self.object_id = object_id
        description = _DESCRIPTIONS.get(code, "reserved error code")
        message = f"kernel error {int(code)}: {description}"
        if object_id is not None:
            message += f" (object {object_id!r})"
        super().__init__(message)


def error_notify(code: int, object_id: Optional[Any] = None) -> NoReturn:
    """Report a kernel error; the default handler never returns."""
    if isinstance(code, bool) or not isinstance(code, int):
        raise TypeError("error code must be an integer")
    try:
        resolved: Union[ErrorCode, int] = ErrorCode(code)
    except ValueError:
        resolved = code
    raise RtxFatalError(resolved, object_id)