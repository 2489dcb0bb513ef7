# embedkit

Tools for describing, checking and laying out the configuration of a small
real-time kernel, plus a compact printf-style log formatter of the kind used on
microcontroller serial consoles. Pure Python, no dependencies.

## Installation

```
pip install embedkit
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "embedkit[test]"
pytest
```

## Modules

- `embedkit.rtx_os`: kernel constants as enums (`ObjectId`, `ObjectFlag`,
  `TimerState`, `ThreadState`, `ConfigFlag`, `ErrorCode`), version and limit
  constants, per-object memory usage counters (`ObjectMemUsage` with
  `record_alloc()`, `record_free()` and `in_use()`), and the storage-size
  helpers `memory_pool_mem_size()` and `message_queue_mem_size()`.
  `ThreadState` members have `base` (wait reason masked off) and `is_blocked`.
- `embedkit.config`: `RtxConfig`, an immutable set of kernel settings with the
  usual defaults. Build it directly or with `RtxConfig.from_mapping()`, which
  accepts macro names such as `OS_TICK_FREQ` or field names such as
  `tick_freq`, and C integer literals such as `"0x05U"`. Change it with
  `replace()`; `thread_libspace_num()` gives the number of per-thread library
  slots. `IsrQueueSize` and `TimerPriority` list the documented choices.
- `embedkit.build`: `validate()` checks a configuration and raises
  `ConfigError` listing every problem found (in its `errors` attribute);
  `build_os_config()` validates and turns a configuration into an `OsConfig`
  made of `MemoryPoolInfo`, `ThreadAttr` and `MessageQueueAttr` parts.
- `embedkit.hooks`: `error_notify()` reports a fatal kernel error by raising
  `RtxFatalError`; it never returns.
- `embedkit.libspace`: `LibspaceAllocator` hands per-thread C library
  workspace slots to threads, raising `RtxFatalError` when all slots are taken;
  `level_from_filter()` converts a legacy filter byte to a recording level and
  `evr_levels()` works out the event recorder level of every component.
- `embedkit.logfmt`: `format_log()` and `LogPrinter` implement the small format
  language `%s %d %i %u %x %X %p %c %%`. Any other tag prints
  `[Unsupported Tag]` followed by the tag character. `LogPrinter.printf()`
  passes the text to its output callable in chunks of `buffer_size`
  characters (default 32, standard output by default) and returns the number of
  characters printed; `log_msg()` does the same unless `enabled` is false.

## Examples

```python
from embedkit.logfmt import format_log, LogPrinter

format_log("tick %u, addr %p, %s\n", 42, 0x2000_0000, "ok")
# 'tick 42, addr 0x20000000, ok\n'

chunks = []
printer = LogPrinter(chunks.append, 32)
count = printer.printf("value=%X%%", 255)   # count == 9, chunks == ['value=FF%']
```

```python
from embedkit.config import RtxConfig
from embedkit.build import validate, build_os_config, ConfigError

config = RtxConfig().replace(thread_obj_mem=True, thread_num=4)
validate(config)
os_config = build_os_config(config)

try:
    validate(config.replace(stack_size=70))
except ConfigError as exc:
    print(exc.errors)   # ('Invalid default Thread Stack size!',)
```

```python
from embedkit.rtx_os import memory_pool_mem_size, message_queue_mem_size

memory_pool_mem_size(10, 5)    # 80
message_queue_mem_size(4, 8)   # 80
```

## What it does not do

embedkit models and checks a kernel configuration; it does not run a kernel,
schedule threads or generate C sources or headers from a configuration. It has
no command-line tool: everything is used from Python.