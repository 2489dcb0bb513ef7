"""Checks a kernel configuration and derives the runtime configuration record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from embedkit.config import RtxConfig
from embedkit.rtx_os import ConfigFlag, ObjectId, message_queue_mem_size

PRIORITY_IDLE = 1

# Control block sizes in bytes for a 32-bit target.
CONTROL_BLOCK_SIZES = {
    ObjectId.THREAD: 68,
    ObjectId.TIMER: 32,
    ObjectId.EVENT_FLAGS: 16,
    ObjectId.MUTEX: 28,
    ObjectId.SEMAPHORE: 16,
    ObjectId.MEMORY_POOL: 36,
    ObjectId.MESSAGE_QUEUE: 52,
}

TIMER_MESSAGE_SIZE = 8


class ConfigError(ValueError):
    """The configuration cannot be built; ``errors`` lists every problem."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = tuple(errors)
        super().__init__("; ".join(self.errors))


@dataclass(frozen=True)
class MemoryPoolInfo:
    """A fixed-block memory pool."""

    max_blocks: int
    block_size: int
    used_blocks: int = 0

    @property
    def total_size(self) -> int:
        return self.max_blocks * self.block_size


@dataclass(frozen=True)
class ThreadAttr:
    """Attributes of a system thread."""

    name: Optional[str]
    cb_size: int
    stack_size: int
    priority: int
    tz_module: int = 0
    detached: bool = True


@dataclass(frozen=True)
class MessageQueueAttr:
    """Attributes of a system message queue."""

    cb_size: int
    mq_size: int
    name: Optional[str] = None


@dataclass(frozen=True)
class OsConfig:
    """Runtime configuration record derived from an :class:`RtxConfig`."""

    flags: ConfigFlag
    tick_freq: int
    robin_timeout: int
    isr_queue_max: int
    stack_mem_size: int
    mp_data_size: int
    mq_data_size: int
    common_mem_size: int
    mpi_stack: Optional[MemoryPoolInfo]
    mpi_thread: Optional[MemoryPoolInfo]
    mpi_timer: Optional[MemoryPoolInfo]
    mpi_event_flags: Optional[MemoryPoolInfo]
    mpi_mutex: Optional[MemoryPoolInfo]
    mpi_semaphore: Optional[MemoryPoolInfo]
    mpi_memory_pool: Optional[MemoryPoolInfo]
    mpi_message_queue: Optional[MemoryPoolInfo]
    thread_stack_size: int
    idle_thread_attr: ThreadAttr
    timer_thread_attr: Optional[ThreadAttr]
    timer_mq_attr: Optional[MessageQueueAttr]
    timer_mq_mcnt: int


_OBJECT_POOLS = (
    ("timer_obj_mem", "timer_num", "Invalid number of Timer objects!"),
    ("evflags_obj_mem", "evflags_num", "Invalid number of Event Flags objects!"),
    ("mutex_obj_mem", "mutex_num", "Invalid number of Mutex objects!"),
    ("semaphore_obj_mem", "semaphore_num", "Invalid number of Semaphore objects!"),
    ("mempool_obj_mem", "mempool_num", "Invalid number of Memory Pool objects!"),
    ("msgqueue_obj_mem", "msgqueue_num", "Invalid number of Message Queue objects!"),
)


def _timer_thread_enabled(config: RtxConfig) -> bool:
    return config.timer_thread_stack_size != 0 and config.timer_cb_queue != 0


def _bad_stack(size: int, minimum: int) -> bool:
    return size % 8 != 0 or size < minimum


def validate(config: RtxConfig) -> None:
    """Raise :class:`ConfigError` if the configuration is not buildable."""
    errors: list[str] = []
    if config.dynamic_mem_size != 0 and config.dynamic_mem_size % 8 != 0:
        errors.append("Invalid Dynamic Memory size!")
    if config.tick_freq < 1:
        errors.append("Invalid Kernel Tick Frequency!")
    if config.isr_fifo_queue < 4:
        errors.append("Invalid ISR FIFO Queue size!")
    if _bad_stack(config.stack_size, 72):
        errors.append("Invalid default Thread Stack size!")
    if _bad_stack(config.idle_thread_stack_size, 72):
        errors.append("Invalid Idle Thread Stack size!")
    if config.thread_obj_mem:
        if config.thread_num == 0:
            errors.append("Invalid number of user Threads!")
        if config.thread_user_stack_size != 0 and config.thread_user_stack_size % 8 != 0:
            errors.append("Invalid total Stack size!")
    for enabled, count, message in _OBJECT_POOLS:
        if getattr(config, enabled) and getattr(config, count) == 0:
            errors.append(message)
    if _timer_thread_enabled(config) and _bad_stack(config.timer_thread_stack_size, 96):
        errors.append("Invalid Timer Thread Stack size!")
    if config.mempool_obj_mem and config.mempool_data_size % 8 != 0:
        errors.append("Invalid Data Memory size for Memory Pools!")
    if config.msgqueue_obj_mem and config.msgqueue_data_size % 8 != 0:
        errors.append("Invalid Data Memory size for Message Queues!")
    if errors:
        raise ConfigError(errors)


def _object_pool(enabled: bool, count: int, kind: ObjectId) -> Optional[MemoryPoolInfo]:
    if not enabled:
        return None
    return MemoryPoolInfo(max_blocks=count, block_size=CONTROL_BLOCK_SIZES[kind])


def _data_area(enabled: bool, count: int, size: int) -> int:
    if not enabled or size == 0:
        return 0
    return (2 + count + size // 8) * 8


def build_os_config(config: RtxConfig) -> OsConfig:
    """Validate ``config`` and derive the runtime configuration record."""
    validate(config)

    flags = ConfigFlag(0)
    if config.privilege_mode:
        flags |= ConfigFlag.PRIVILEGED_MODE
    if config.stack_check:
        flags |= ConfigFlag.STACK_CHECK
    if config.stack_watermark:
        flags |= ConfigFlag.STACK_WATERMARK

    mpi_stack = None
    if config.thread_obj_mem and config.thread_def_stack_num != 0:
        mpi_stack = MemoryPoolInfo(
            max_blocks=config.thread_def_stack_num, block_size=config.stack_size
        )

    idle_attr = ThreadAttr(
        name=config.idle_thread_name,
        cb_size=CONTROL_BLOCK_SIZES[ObjectId.THREAD],
        stack_size=config.idle_thread_stack_size,
        priority=PRIORITY_IDLE,
        tz_module=config.idle_thread_tz_mod_id,
    )

    timer_attr: Optional[ThreadAttr] = None
    timer_mq: Optional[MessageQueueAttr] = None
    timer_mcnt = 0
    if _timer_thread_enabled(config):
        timer_attr = ThreadAttr(
            name=config.timer_thread_name,
            cb_size=CONTROL_BLOCK_SIZES[ObjectId.THREAD],
            stack_size=config.timer_thread_stack_size,
            priority=config.timer_thread_prio,
            tz_module=config.timer_thread_tz_mod_id,
        )
        timer_mq = MessageQueueAttr(
            cb_size=CONTROL_BLOCK_SIZES[ObjectId.MESSAGE_QUEUE],
            mq_size=message_queue_mem_size(config.timer_cb_queue, TIMER_MESSAGE_SIZE),
        )
        timer_mcnt = config.timer_cb_queue

    return OsConfig(
        flags=flags,
        tick_freq=config.tick_freq,
        robin_timeout=config.robin_timeout if config.robin_enable else 0,
        isr_queue_max=int(config.isr_fifo_queue),
        stack_mem_size=_data_area(
            config.thread_obj_mem, config.thread_num, config.thread_user_stack_size
        ),
        mp_data_size=_data_area(
            config.mempool_obj_mem, config.mempool_num, config.mempool_data_size
        ),
        mq_data_size=_data_area(
            config.msgqueue_obj_mem, config.msgqueue_num, config.msgqueue_data_size
        ),
        common_mem_size=config.dynamic_mem_size,
        mpi_stack=mpi_stack,
        mpi_thread=_object_pool(config.thread_obj_mem, config.thread_num, ObjectId.THREAD),
        mpi_timer=_object_pool(config.timer_obj_mem, config.timer_num, ObjectId.TIMER),
        mpi_event_flags=_object_pool(
            config.evflags_obj_mem, config.evflags_num, ObjectId.EVENT_FLAGS
        ),
        mpi_mutex=_object_pool(config.mutex_obj_mem, config.mutex_num, ObjectId.MUTEX),
        mpi_semaphore=_object_pool(
            config.semaphore_obj_mem, config.semaphore_num, ObjectId.SEMAPHORE
        ),
        mpi_memory_pool=_object_pool(
            config.mempool_obj_mem, config.mempool_num, ObjectId.MEMORY_POOL
        ),
        mpi_message_queue=_object_pool(
            config.msgqueue_obj_mem, config.msgqueue_num, ObjectId.MESSAGE_QUEUE
        ),
        thread_stack_size=config.stack_size,
        idle_thread_attr=idle_attr,
        timer_thread_attr=timer_attr,
        timer_mq_attr=timer_mq,
        timer_mq_mcnt=timer_mcnt,
    )