import pytest

from embedkit.rtx_os import (
    KERNEL_ID,
    THREAD_STATE_MASK,
    ConfigFlag,
    ErrorCode,
    ObjectId,
    ObjectMemUsage,
    ThreadState,
    memory_pool_mem_size,
    message_queue_mem_size,
)


def test_documented_identifiers():
    assert ObjectId(0xF1) is ObjectId.THREAD
    assert ObjectId(0xFA) is ObjectId.MESSAGE_QUEUE
    assert KERNEL_ID == "RTX V5.5.0"


def test_error_codes_follow_source_order():
    assert [c.value for c in ErrorCode] == [1, 2, 3, 4, 5]
    assert ErrorCode(4) is ErrorCode.CLIB_SPACE


def test_config_flags_are_distinct_bits():
    combined = ConfigFlag(1) | ConfigFlag(2) | ConfigFlag(4)
    assert ConfigFlag(1) is ConfigFlag.PRIVILEGED_MODE
    assert ConfigFlag(2) is ConfigFlag.STACK_CHECK
    assert ConfigFlag(4) is ConfigFlag.STACK_WATERMARK
    assert ConfigFlag.STACK_CHECK in combined
    assert combined & ConfigFlag.PRIVILEGED_MODE == ConfigFlag.PRIVILEGED_MODE


@pytest.mark.parametrize(
    "state",
    [s for s in ThreadState if s.name.startswith("WAITING_")],
)
def test_waiting_states_are_blocked(state):
    looked_up = ThreadState(state.value)
    assert looked_up is state
    assert looked_up.base is ThreadState.BLOCKED
    assert looked_up.is_blocked
    assert looked_up.value & THREAD_STATE_MASK == ThreadState.BLOCKED.value


@pytest.mark.parametrize("name", ["READY", "RUNNING", "TERMINATED"])
def test_plain_states_are_their_own_base(name):
    state = ThreadState[name]
    looked_up = ThreadState(state.value)
    assert looked_up.base is state
    assert not looked_up.is_blocked


def test_mem_usage_tracks_high_water_mark():
    usage = ObjectMemUsage()
    usage.record_alloc()
    usage.record_alloc()
    usage.record_alloc()
    usage.record_free()
    usage.record_free()
    usage.record_alloc()
    assert usage.in_use() == usage.cnt_alloc - usage.cnt_free
    assert usage.max_used == 3
    assert usage.in_use() == 2


def test_mem_usage_rejects_unmatched_free():
    usage = ObjectMemUsage()
    with pytest.raises(ValueError):
        usage.record_free()


@pytest.mark.parametrize("count", [0, 1, 7, 32])
def test_pool_size_rounds_to_words(count):
    assert memory_pool_mem_size(count, 1) == memory_pool_mem_size(count, 4)
    assert memory_pool_mem_size(count, 5) == memory_pool_mem_size(count, 8)
    assert memory_pool_mem_size(count, 13) % 4 == 0


@pytest.mark.parametrize("count,size", [(1, 1), (4, 8), (16, 30)])
def test_queue_size_adds_header_per_message(count, size):
    diff = message_queue_mem_size(count, size) - memory_pool_mem_size(count, size)
    assert diff == 12 * count


def test_sizes_reject_negative():
    with pytest.raises(ValueError):
        memory_pool_mem_size(-1, 4)
    with pytest.raises(ValueError):
        message_queue_mem_size(2, -3)