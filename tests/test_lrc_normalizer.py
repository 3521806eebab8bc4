from core.lrc_normalizer import (
    extract_plain_lyrics,
    normalize_and_sort_lrc,
    normalize_lrc,
    sort_lrc_lines,
    strip_word_timings,
)
from core.lrc_validator import validate_lrc


def test_multi_timestamp_line_is_expanded():
    result = normalize_lrc("[00:29.52][01:29.47][02:09.54] Repeated chorus line")
    assert result.normalized.split("\n") == [
        "[00:29.52] Repeated chorus line",
        "[01:29.47] Repeated chorus line",
        "[02:09.54] Repeated chorus line",
    ]
    assert result.changes == 1
    assert result.expanded_lines == 3


def test_expansion_counts_add_up_over_lines():
    result = normalize_lrc("[00:01.00][00:02.00]A\n[00:03.00]B\n[00:04.00][00:05.00][00:06.00]C")
    assert result.changes == 2
    assert result.expanded_lines == 5
    assert len(result.normalized.split("\n")) == 6


def test_expanded_timestamps_get_two_digit_fractions():
    result = normalize_lrc("[00:01.125][00:02.00]x")
    assert result.normalized == "[00:01.13]x\n[00:02.00]x"


def test_text_between_tokens_is_dropped():
    result = normalize_lrc("[00:01.00]a[00:02.00]b")
    assert result.normalized == "[00:01.00]b\n[00:02.00]b"


def test_single_timestamp_and_metadata_lines_pass_through():
    content = "[ti:Song]\n\n[00:01.500] Hello\nplain words"
    result = normalize_lrc(content)
    assert result.normalized == content
    assert result.changes == 0
    assert result.expanded_lines == 0


def test_normalized_output_no_longer_has_multi_timestamps():
    result = normalize_lrc("[00:01.00][00:20.00] Chorus\n[00:10.00] Verse")
    assert not validate_lrc(result.normalized).has_multi_timestamps


def test_extract_plain_lyrics_keeps_timed_text_only():
    synced = "[ar:Artist]\n[00:01.00] One\n[00:02.00]\nstray text\n[00:03.00]  Two  "
    assert extract_plain_lyrics(synced) == "One\nTwo"


def test_sort_puts_metadata_first_and_other_lines_last():
    content = "hello\n[00:02.00]B\n[ar:X]\n[00:01.00]A\n[00:02.00]C\n\nbye"
    assert sort_lrc_lines(content) == "[ar:X]\n[00:01.00]A\n[00:02.00]B\n[00:02.00]C\nhello\nbye"


def test_sort_is_stable_for_equal_timestamps():
    content = "[00:05.00]first\n[00:01.00]x\n[00:05.000]second"
    assert sort_lrc_lines(content).split("\n") == ["[00:01.00]x", "[00:05.00]first", "[00:05.000]second"]


def test_sort_uses_millisecond_value_for_three_digit_fractions():
    assert sort_lrc_lines("[00:02.00]B\n[00:01.500]A") == "[00:01.500]A\n[00:02.00]B"


def test_normalize_and_sort_orders_expanded_lines():
    result = normalize_and_sort_lrc("[00:10.00][00:01.00]Chorus\n[00:05.00]Verse")
    assert result.normalized == "[00:01.00]Chorus\n[00:05.00]Verse\n[00:10.00]Chorus"
    assert result.plain_lyrics == "Chorus\nVerse\nChorus"
    assert result.changes == 1
    assert result.expanded_lines == 2


def test_normalize_and_sort_is_idempotent_on_clean_input(sample_lrc):
    result = normalize_and_sort_lrc(sample_lrc)
    assert result.normalized == sample_lrc
    assert result.changes == 0

    again = normalize_and_sort_lrc(result.normalized)
    assert again.normalized == result.normalized


def test_plain_lyrics_follow_chronological_order():
    content = "[ti:Song]\n[00:09.00] Last\n[00:03.00][00:06.00] Middle\n[00:01.00]\n[00:00.50] First"
    result = normalize_and_sort_lrc(content)
    assert result.plain_lyrics == "First\nMiddle\nMiddle\nLast"


def test_strip_word_timings_keeps_line_timestamp():
    text, removed = strip_word_timings("[00:01.00]<00:01.00>Hello <00:01.50>world\n[00:02.00]Plain")
    assert text == "[00:01.00]Hello world\n[00:02.00]Plain"
    assert removed == 2
    assert not validate_lrc(text).has_elrc


def test_strip_word_timings_without_tokens_is_a_noop(sample_lrc):
    assert strip_word_timings(sample_lrc) == (sample_lrc, 0)


def test_expansion_keeps_minutes_and_seconds_as_written():
    result = normalize_lrc("[00:75.00][00:01.00]x")
    assert result.normalized == "[00:75.00]x\n[00:01.00]x"


def test_expansion_of_last_representable_token_stays_timed():
    result = normalize_and_sort_lrc("[99:59.999][00:01.00]x")
    assert result.normalized == "[00:01.00]x\n[99:59.99]x"
    assert result.plain_lyrics == "x\nx"


def test_leading_byte_order_mark_does_not_move_first_line():
    result = normalize_and_sort_lrc("\ufeff[00:01.00]A\n[00:02.00]B")
    assert result.normalized == "[00:01.00]A\n[00:02.00]B"
