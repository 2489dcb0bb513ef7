"""Kernel configuration: object counts, stack sizes, timer and event-recorder settings."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Any, Optional


class IsrQueueSize(IntEnum):
    """Documented choices for the ISR FIFO queue length."""

    ENTRIES_4 = 4
    ENTRIES_8 = 8
    ENTRIES_12 = 12
    ENTRIES_16 = 16
    ENTRIES_24 = 24
    ENTRIES_32 = 32
    ENTRIES_48 = 48
    ENTRIES_64 = 64
    ENTRIES_96 = 96
    ENTRIES_128 = 128
    ENTRIES_196 = 196
    ENTRIES_256 = 256


class TimerPriority(IntEnum):
    """Documented choices for the timer thread priority."""

    LOW = 8
    BELOW_NORMAL = 16
    NORMAL = 24
    ABOVE_NORMAL = 32
    HIGH = 40
    REALTIME = 48


_PREFIX = "OS_"
_SUFFIXES = "uUlL"


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().rstrip(_SUFFIXES)
        try:
            return int(text, 0)
        except ValueError:
            raise ValueError(f"{name}: not an integer literal: {value!r}") from None
    raise TypeError(f"{name} must be an integer, got {type(value).__name__}")


@dataclass(frozen=True)
class RtxConfig:
    """Kernel configuration with the stock defaults."""

    # System
    dynamic_mem_size: int = 8192
    tick_freq: int = 1000
    robin_enable: bool = True
    robin_timeout: int = 5
    isr_fifo_queue: int = IsrQueueSize.ENTRIES_16
    obj_mem_usage: bool = False

    # Threads
    thread_obj_mem: bool = False
    thread_num: int = 1
    thread_def_stack_num: int = 0
    thread_user_stack_size: int = 0
    stack_size: int = 256
    idle_thread_stack_size: int = 256
    idle_thread_tz_mod_id: int = 0
    stack_check: bool = True
    stack_watermark: bool = False
    privilege_mode: bool = True
    idle_thread_name: Optional[str] = None

    # Timers
    timer_obj_mem: bool = False
    timer_num: int = 1
    timer_thread_prio: int = TimerPriority.HIGH
    timer_thread_stack_size: int = 256
    timer_thread_tz_mod_id: int = 0
    timer_cb_queue: int = 4
    timer_thread_name: Optional[str] = None

    # Event flags, mutexes, semaphores
    evflags_obj_mem: bool = False
    evflags_num: int = 1
    mutex_obj_mem: bool = False
    mutex_num: int = 1
    semaphore_obj_mem: bool = False
    semaphore_num: int = 1

    # Memory pools and message queues
    mempool_obj_mem: bool = False
    mempool_num: int = 1
    mempool_data_size: int = 0
    msgqueue_obj_mem: bool = False
    msgqueue_num: int = 1
    msgqueue_data_size: int = 0

    # Event recorder initialisation
    evr_init: bool = False
    evr_start: bool = True
    evr_level: int = 0x00
    evr_memory_level: int = 0x01
    evr_kernel_level: int = 0x01
    evr_thread_level: int = 0x05
    evr_wait_level: int = 0x01
    evr_thflags_level: int = 0x01
    evr_evflags_level: int = 0x01
    evr_timer_level: int = 0x01
    evr_mutex_level: int = 0x01
    evr_semaphore_level: int = 0x01
    evr_mempool_level: int = 0x01
    evr_msgqueue_level: int = 0x01

    # Event generation
    evr_memory: bool = True
    evr_kernel: bool = True
    evr_thread: bool = True
    evr_wait: bool = True
    evr_thflags: bool = True
    evr_evflags: bool = True
    evr_timer: bool = True
    evr_mutex: bool = True
    evr_semaphore: bool = True
    evr_mempool: bool = True
    evr_msgqueue: bool = True

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if field.name.endswith("_name"):
                if value is not None and not isinstance(value, str):
                    raise TypeError(f"{field.name} must be a string or None")
            elif isinstance(field.default, bool):
                if not isinstance(value, bool):
                    raise TypeError(f"{field.name} must be a bool")
            else:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError(f"{field.name} must be an integer")
                if value < 0:
                    raise ValueError(f"{field.name} must not be negative")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "RtxConfig":
        """Build a configuration from macro names (OS_TICK_FREQ) or field names.

        Integer values may be given as C literals such as ``"0x05U"``; flags
        accept 0/1 as well as booleans. Missing entries keep their defaults.
        """
        known = {field.name: field for field in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, raw in values.items():
            name = key.strip()
            if name.upper().startswith(_PREFIX):
                name = name[len(_PREFIX):]
            name = name.lower()
            field = known.get(name)
            if field is None:
                raise ValueError(f"unknown configuration option: {key}")
            if name.endswith("_name"):
                kwargs[name] = None if raw is None else str(raw)
            elif isinstance(field.default, bool):
                number = _parse_int(key, raw)
                if number not in (0, 1):
                    raise ValueError(f"{key} must be 0 or 1, got {number}")
                kwargs[name] = bool(number)
            else:
                kwargs[name] = _parse_int(key, raw)
        return cls(**kwargs)

    def replace(self, **kwargs: Any) -> "RtxConfig":
        """A copy with the given fields changed."""
        return dataclasses.replace(self, **kwargs)

    def thread_libspace_num(self) -> int:
        """Threads that may use the C library per-thread space."""
        return self.thread_num if self.thread_obj_mem else 4