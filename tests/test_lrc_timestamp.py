from core.lrc_timestamp import (
    find_timestamps,
    find_word_timings,
    format_timestamp,
    normalize_timestamp,
    parse_timestamp,
)


def test_parse_two_digit_fraction():
    assert parse_timestamp("[01:02.34]") == 62340


def test_parse_three_digit_fraction_rounds_to_10ms():
    assert parse_timestamp("[01:02.345]") == 62350
    assert parse_timestamp("[00:05.124]") == 5120


def test_parse_rejects_non_tokens():
    assert parse_timestamp("[1:02.34]") is None
    assert parse_timestamp("hello") is None
    assert parse_timestamp("") is None


def test_format_timestamp_carries_over():
    assert format_timestamp(62340) == "[01:02.34]"
    assert format_timestamp(0) == "[00:00.00]"
    assert format_timestamp(-5) == "[00:00.00]"


def test_normalize_timestamp_two_digits():
    assert normalize_timestamp("[00:05.125]") == "[00:05.13]"
    assert normalize_timestamp("[00:05.12]") == "[00:05.12]"


def test_normalize_timestamp_rounding_into_next_second():
    assert normalize_timestamp("[00:00.995]") == "[00:01.00]"


def test_normalize_timestamp_keeps_minutes_and_seconds_as_written():
    assert normalize_timestamp("[00:75.00]") == "[00:75.00]"
    assert normalize_timestamp("[00:59.999]") == "[01:00.00]"
    assert normalize_timestamp("[99:59.999]") == "[99:59.99]"


def test_normalize_timestamp_keeps_unparsable_text():
    assert normalize_timestamp("[xx:yy]") == "[xx:yy]"


def test_find_timestamps_global_scan():
    line = "[00:01.00][00:02.500] text [00:03.00]"
    assert find_timestamps(line) == ["[00:01.00]", "[00:02.500]", "[00:03.00]"]


def test_find_word_timings_accepts_single_digit_minutes():
    assert find_word_timings("<0:01.00>Hi <00:01.500>there") == ["<0:01.00>", "<00:01.500>"]
