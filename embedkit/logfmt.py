"""Minimal printf-style log formatter with a fixed-size output buffer."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Optional

DEFAULT_BUFFER_SIZE = 32
UNSUPPORTED_TAG = "[Unsupported Tag]"

_U32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def _stdout_write(chunk: str) -> None:
    sys.stdout.write(chunk)


def _integer(value: Any, tag: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"%{tag} expects an integer, got {type(value).__name__}")
    return value


def _signed_decimal(value: int) -> str:
    number = value & _U32
    if number & _SIGN_BIT:
        return "-" + str((1 << 32) - number)
    return str(number)


def _hex(value: int, upper: bool) -> str:
    text = format(value & _U32, "x")
    return text.upper() if upper else text


def _char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c expects a single character")
        return value
    return chr(_integer(value, "c") & 0xFF)


def _render(fmt: str, args: Iterable[Any]) -> Iterator[str]:
    """Yield the pieces of the formatted text."""
    if not isinstance(fmt, str):
        raise TypeError("format must be a string")
    pending = iter(args)

    def take(tag: str) -> Any:
        try:
            return next(pending)
        except StopIteration:
            raise TypeError(f"not enough arguments for %{tag}") from None

    chars = iter(fmt)
    for ch in chars:
        if ch != "%":
            yield ch
            continue
        tag = next(chars, "")
        match tag:
            case "d" | "i":
                yield _signed_decimal(_integer(take(tag), tag))
            case "u":
                yield str(_integer(take(tag), tag) & _U32)
            case "x":
                yield _hex(_integer(take(tag), tag), upper=False)
            case "X":
                yield _hex(_integer(take(tag), tag), upper=True)
            case "p":
                yield "0x" + _hex(_integer(take(tag), tag), upper=False)
            case "s":
                text = take(tag)
                if not isinstance(text, str):
                    raise TypeError(f"%s expects a string, got {type(text).__name__}")
                yield text
            case "c":
                yield _char(take(tag))
            case "%":
                yield "%"
            case _:
                # The unknown tag character is then printed as ordinary text.
                yield UNSUPPORTED_TAG
                if tag:
                    yield tag


def format_log(fmt: str, *args: Any) -> str:
    """Format ``fmt`` with the supported tags (%s %d %i %u %x %X %p %c %%)."""
    return "".join(_render(fmt, args))


class LogPrinter:
    """Formats log messages and hands them to ``output`` in fixed-size chunks."""

    def __init__(
        self,
        output: Optional[Callable[[str], Any]] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int):
            raise TypeError("buffer_size must be an integer")
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.output = output if output is not None else _stdout_write
        self.buffer_size = buffer_size
        self.enabled = True

    def printf(self, fmt: str, *args: Any) -> int:
        """Format and emit a message; return the number of characters printed."""
        text = format_log(fmt, *args)
        size = self.buffer_size
        for start in range(0, len(text), size):
            self.output(text[start:start + size])
        return len(text)

    def log_msg(self, fmt: str, *args: Any) -> int:
        """Like :meth:`printf`, but does nothing while logging is disabled."""
        if not self.enabled:
            return 0
        return self.printf(fmt, *args)