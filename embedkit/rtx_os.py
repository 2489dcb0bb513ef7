"""Kernel object identifiers, states, limits and storage-size helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

API_VERSION = 20010003
KERNEL_VERSION = 50050000
KERNEL_ID = "RTX V5.5.0"

THREAD_STATE_MASK = 0x0F
THREAD_FLAG_DEF_STACK = 0x10

STACK_MAGIC_WORD = 0xE25A2EA5
STACK_FILL_PATTERN = 0xCCCCCCCC

THREAD_FLAGS_LIMIT = 31
EVENT_FLAGS_LIMIT = 31
MUTEX_LOCK_LIMIT = 255
SEMAPHORE_TOKEN_LIMIT = 65535

_U32 = 0xFFFFFFFF


class ObjectId(IntEnum):
    """Identifier stored in the first byte of every control block."""

    INVALID = 0x00
    THREAD = 0xF1
    TIMER = 0xF2
    EVENT_FLAGS = 0xF3
    MUTEX = 0xF5
    SEMAPHORE = 0xF6
    MEMORY_POOL = 0xF7
    MESSAGE = 0xF9
    MESSAGE_QUEUE = 0xFA


class ObjectFlag(IntFlag):
    """Allocation flags of a kernel object."""

    SYSTEM_OBJECT = 0x01
    SYSTEM_MEMORY = 0x02


class TimerState(IntEnum):
    """State of a timer object."""

    INACTIVE = 0x00
    STOPPED = 0x01
    RUNNING = 0x02


class ThreadState(IntEnum):
    """Thread state; blocked states carry the wait reason in the high nibble."""

    INACTIVE = 0
    READY = 1
    RUNNING = 2
    BLOCKED = 3
    TERMINATED = 4

    WAITING_DELAY = 3 | 0x10
    WAITING_JOIN = 3 | 0x20
    WAITING_THREAD_FLAGS = 3 | 0x30
    WAITING_EVENT_FLAGS = 3 | 0x40
    WAITING_MUTEX = 3 | 0x50
    WAITING_SEMAPHORE = 3 | 0x60
    WAITING_MEMORY_POOL = 3 | 0x70
    WAITING_MESSAGE_GET = 3 | 0x80
    WAITING_MESSAGE_PUT = 3 | 0x90

    @property
    def base(self) -> "ThreadState":
        """The state with the wait reason masked off."""
        return ThreadState(self.value & THREAD_STATE_MASK)

    @property
    def is_blocked(self) -> bool:
        return self.base is ThreadState.BLOCKED


class ConfigFlag(IntFlag):
    """Kernel configuration flags."""

    PRIVILEGED_MODE = 1 << 0
    STACK_CHECK = 1 << 1
    STACK_WATERMARK = 1 << 2


class ErrorCode(IntEnum):
    """Codes passed to the kernel error callback."""

    STACK_UNDERFLOW = 1
    ISR_QUEUE_OVERFLOW = 2
    TIMER_QUEUE_OVERFLOW = 3
    CLIB_SPACE = 4
    CLIB_MUTEX = 5


@dataclass
class ObjectMemUsage:
    """Allocation counters for one kind of kernel object."""

    cnt_alloc: int = 0
    cnt_free: int = 0
    max_used: int = 0

    def in_use(self) -> int:
        """Number of objects currently allocated."""
        return (self.cnt_alloc - self.cnt_free) & _U32

    def record_alloc(self) -> None:
        """Count one allocation and update the high-water mark."""
        self.cnt_alloc = (self.cnt_alloc + 1) & _U32
        used = self.in_use()
        if used > self.max_used:
            self.max_used = used

    def record_free(self) -> None:
        """Count one release."""
        if self.in_use() == 0:
            raise ValueError("free without a matching allocation")
        self.cnt_free = (self.cnt_free + 1) & _U32


def _check_non_negative(**values: int) -> None:
    for name, value in values.items():
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{name} must be an integer")
        if value < 0:
            raise ValueError(f"{name} must not be negative")


def _words(size: int) -> int:
    return (size + 3) // 4


def memory_pool_mem_size(block_count: int, block_size: int) -> int:
    """Bytes of storage needed for a memory pool."""
    _check_non_negative(block_count=block_count, block_size=block_size)
    return 4 * block_count * _words(block_size)


def message_queue_mem_size(msg_count: int, msg_size: int) -> int:
    """Bytes of storage needed for a message queue, headers included."""
    _check_non_negative(msg_count=msg_count, msg_size=msg_size)
    return 4 * msg_count * (3 + _words(msg_size))