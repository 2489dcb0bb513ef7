import pytest

from embedkit.logfmt import UNSUPPORTED_TAG, LogPrinter, format_log


def test_plain_text_passes_through():
    assert format_log("hello world") == "hello world"


@pytest.mark.parametrize(
    "fmt, args",
    [
        ("%d", (42,)),
        ("%i", (7,)),
        ("%u", (123456,)),
        ("%x", (0xBEEF,)),
        ("%X", (0xBEEF,)),
        ("%s!", ("name",)),
        ("%c", (65,)),
        ("a=%d b=%x c=%s", (10, 255, "z")),
    ],
)
def test_matches_python_formatting_for_plain_values(fmt, args):
    assert format_log(fmt, *args) == fmt % args


def test_negative_decimal():
    assert format_log("%d", -1234) == str(-1234)


def test_most_negative_int32():
    assert format_log("%d", -(2**31)) == str(-(2**31))


def test_unsigned_wraps_negative():
    assert format_log("%u", -1) == "4294967295"


def test_hex_wraps_negative():
    assert format_log("%x", -1) == "ffffffff"
    assert format_log("%X", -1) == "FFFFFFFF"


def test_pointer_has_prefix():
    assert format_log("%p", 0x2000ABCD) == "0x" + format(0x2000ABCD, "x")


def test_percent_escape():
    assert format_log("100%%") == "100%"


def test_char_from_string():
    assert format_log("[%c]", "q") == "[q]"


def test_unsupported_tag_keeps_following_char():
    assert format_log("a%qb") == "a" + UNSUPPORTED_TAG + "qb"


def test_trailing_percent():
    assert format_log("abc%") == "abc" + UNSUPPORTED_TAG


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        format_log("%d %d", 1)


def test_string_tag_requires_string():
    with pytest.raises(TypeError):
        format_log("%s", 5)


def test_integer_tag_rejects_string():
    with pytest.raises(TypeError):
        format_log("%d", "5")


def test_printer_chunks_output():
    chunks = []
    printer = LogPrinter(chunks.append, 4)
    count = printer.printf("abcdefghij")
    assert count == len("abcdefghij")
    assert chunks == ["abcd", "efgh", "ij"]


def test_printer_exact_multiple_has_no_empty_chunk():
    chunks = []
    LogPrinter(chunks.append, 4).printf("abcdefgh")
    assert chunks == ["abcd", "efgh"]


def test_printer_chunks_reassemble_formatted_text():
    chunks = []
    printer = LogPrinter(chunks.append, 5)
    count = printer.printf("value=%d hex=%X name=%s", -77, 0xABC, "sensor")
    expected = format_log("value=%d hex=%X name=%s", -77, 0xABC, "sensor")
    assert "".join(chunks) == expected
    assert count == len(expected)
    assert all(len(chunk) == 5 for chunk in chunks[:-1])


def test_printer_empty_message_emits_nothing():
    chunks = []
    assert LogPrinter(chunks.append, 8).printf("") == 0
    assert chunks == []


def test_printer_default_writes_to_stdout(capsys):
    LogPrinter().printf("id=%u\n", 9)
    assert capsys.readouterr().out == "id=9\n"


def test_log_msg_disabled_outputs_nothing():
    chunks = []
    printer = LogPrinter(chunks.append, 8)
    printer.enabled = False
    assert printer.log_msg("x=%d", 3) == 0
    assert chunks == []


def test_log_msg_enabled_prints():
    chunks = []
    printer = LogPrinter(chunks.append, 8)
    assert printer.log_msg("x=%d", 3) == len("x=3")
    assert "".join(chunks) == "x=3"


def test_invalid_buffer_size():
    with pytest.raises(ValueError):
        LogPrinter(print, 0)