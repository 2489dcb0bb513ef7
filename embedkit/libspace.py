"""Per-thread C library space assignment and event-recorder level setup."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any, Optional

from embedkit.config import RtxConfig
from embedkit.hooks import error_notify
from embedkit.rtx_os import ErrorCode

COMPONENTS = (
    "memory",
    "kernel",
    "thread",
    "wait",
    "thflags",
    "evflags",
    "timer",
    "mutex",
    "semaphore",
    "mempool",
    "msgqueue",
)

_FILTER_PREFIX = "OS_EVR_"
_FILTER_SUFFIX = "_FILTER"


class LibspaceAllocator:
    """Hands out per-thread library space slots.

    Slot ``slots`` (one past the last thread slot) is the shared space used
    before the kernel has started.
    """

    def __init__(self, slots: int) -> None:
        if isinstance(slots, bool) or not isinstance(slots, int):
            raise TypeError("slots must be an integer")
        if slots < 1:
            raise ValueError("slots must be at least 1")
        self.slots = slots
        self._owners: list[Optional[Hashable]] = [None] * slots
        self._kernel_active = False

    @property
    def kernel_active(self) -> bool:
        """Whether the kernel has been seen running; once set it stays set."""
        return self._kernel_active

    @property
    def owners(self) -> tuple[Optional[Hashable], ...]:
        """Thread identifiers holding each slot, ``None`` for free slots."""
        return tuple(self._owners)

    def slot(self, thread_id: Optional[Hashable], kernel_active: bool) -> int:
        """Return the slot index for ``thread_id``, claiming a free one if needed.

        Raises :class:`~embedkit.hooks.RtxFatalError` when every slot is taken
        by another thread.
        """
        if kernel_active:
            self._kernel_active = True
        if not self._kernel_active:
            return self.slots
        for index, owner in enumerate(self._owners):
            if owner is None:
                self._owners[index] = thread_id
                owner = thread_id
            if owner == thread_id:
                return index
        error_notify(ErrorCode.CLIB_SPACE, thread_id)


def level_from_filter(filter_value: int) -> int:
    """Convert a legacy filter byte to a recording level.

    Bit 7 enables the filter; the low nibble holds the level.
    """
    if isinstance(filter_value, bool) or not isinstance(filter_value, int):
        raise TypeError("filter value must be an integer")
    if filter_value < 0:
        raise ValueError("filter value must not be negative")
    return filter_value & 0x0F if filter_value & 0x80 else 0


def _component(key: str) -> str:
    name = key.strip().upper()
    if name.startswith(_FILTER_PREFIX):
        name = name[len(_FILTER_PREFIX):]
    if name.endswith(_FILTER_SUFFIX):
        name = name[: -len(_FILTER_SUFFIX)]
    name = name.lower()
    if name not in COMPONENTS:
        raise ValueError(f"unknown event recorder component: {key}")
    return name


def evr_levels(
    config: RtxConfig, filters: Optional[Mapping[str, Any]] = None
) -> dict[str, int]:
    """Recording level per component, with legacy filters taking precedence.

    A thread filter also applies to thread flags and generic wait unless those
    have their own filter.
    """
    given: dict[str, int] = {}
    for key, value in (filters or {}).items():
        given[_component(key)] = value
    if "thread" in given:
        given.setdefault("thflags", given["thread"])
        given.setdefault("wait", given["thread"])
    levels: dict[str, int] = {}
    for name in COMPONENTS:
        if name in given:
            levels[name] = level_from_filter(given[name])
        else:
            levels[name] = getattr(config, f"evr_{name}_level")
    return levels