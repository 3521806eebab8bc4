import pytest

from core.lrc_validator import (
    IssueType,
    Severity,
    has_multi_timestamp_issues,
    is_publish_blocked,
    needs_confirmation,
    validate_lrc,
    validation_summary,
)


def _types(result):
    return [i.type for i in result.issues]


def test_valid_lrc_has_no_issues(sample_lrc):
    result = validate_lrc(sample_lrc)
    assert result.is_valid is True
    assert result.issues == ()
    assert result.total_lines == 5
    assert result.affected_lines == 0
    assert not result.has_errors
    assert not result.has_warnings


def test_empty_content_is_valid():
    result = validate_lrc("")
    assert result.is_valid
    assert result.total_lines == 0


def test_issues_by_type_has_every_member():
    result = validate_lrc("[00:10.00]A\n[00:05.00]B")
    assert set(result.issues_by_type) == set(IssueType)
    assert result.issues_by_type[IssueType.OUT_OF_ORDER] == 1
    assert sum(result.issues_by_type.values()) == 1


def test_out_of_order_warning_on_second_line():
    result = validate_lrc("[00:10.00]A\n[00:05.00]B")
    assert _types(result) == [IssueType.OUT_OF_ORDER]
    issue = result.issues[0]
    assert issue.line == 2
    assert issue.severity == Severity.WARNING
    assert issue.message == "Timestamp is earlier than previous line (1)"
    assert issue.raw == "[00:05.00]B"


def test_duplicate_references_first_line():
    result = validate_lrc("[00:05.00]A\n[00:01.00]x\n[00:05.00]B")
    dups = [i for i in result.issues if i.type == IssueType.DUPLICATE_TIMESTAMP]
    assert len(dups) == 1
    assert dups[0].line == 3
    assert dups[0].message == "Duplicate timestamp (also on line 1)"


def test_duplicate_keys_on_milliseconds_not_text():
    result = validate_lrc("[00:05.000]A\n[00:05.00]B")
    assert _types(result) == [IssueType.DUPLICATE_TIMESTAMP]


def test_adjacent_duplicates_are_not_reported_as_overlap():
    result = validate_lrc("[00:05.00]A\n[00:05.00]B")
    assert _types(result) == [IssueType.DUPLICATE_TIMESTAMP]


def test_excessive_gap_reports_rounded_seconds():
    result = validate_lrc("[00:00.00]A\n[00:35.00]B")
    assert _types(result) == [IssueType.EXCESSIVE_GAP]
    assert "35s" in result.issues[0].message
    assert result.issues[0].line == 2


def test_gap_of_exactly_thirty_seconds_is_fine():
    assert validate_lrc("[00:00.00]A\n[00:30.00]B").is_valid


def test_near_overlap_warning():
    result = validate_lrc("[00:01.00]A\n[00:01.05]B")
    assert _types(result) == [IssueType.TIMESTAMP_OVERLAP]
    assert result.issues[0].message == "Very close to previous timestamp (50ms gap)"


def test_no_timestamps_error():
    result = validate_lrc("just some words\nand more words")
    assert _types(result) == [IssueType.NO_TIMESTAMPS]
    issue = result.issues[0]
    assert issue.line == 1
    assert issue.severity == Severity.ERROR
    assert result.is_valid is False
    assert result.has_errors


def test_no_timestamps_preview_is_truncated():
    content = "x" * 150
    issue = validate_lrc(content).issues[0]
    assert issue.raw == "x" * 100 + "..."


def test_multi_timestamp_line_is_excluded_from_timing_checks():
    result = validate_lrc("[00:20.00][00:40.00]Chorus\n[00:03.00]Verse")
    assert _types(result) == [IssueType.MULTI_TIMESTAMP]
    issue = result.issues[0]
    assert issue.severity == Severity.WARNING
    assert issue.timestamps == ("[00:20.00]", "[00:40.00]")
    assert issue.message == "Contains 2 timestamps (non-standard format)"
    assert result.has_multi_timestamps


def test_only_multi_timestamp_lines_means_no_timestamps():
    result = validate_lrc("[00:01.00][00:02.00]Hi")
    assert _types(result) == [IssueType.MULTI_TIMESTAMP, IssueType.NO_TIMESTAMPS]


def test_elrc_word_timing_is_an_error():
    result = validate_lrc("[00:01.00]<00:01.00>Hello <00:01.50>world")
    assert _types(result) == [IssueType.ELRC_WORD_TIMING]
    issue = result.issues[0]
    assert issue.severity == Severity.ERROR
    assert issue.timestamps == ("<00:01.00>", "<00:01.50>")
    assert "2 ELRC word timestamps" in issue.message
    assert result.has_elrc
    # the line timestamp still counts
    assert not any(i.type == IssueType.NO_TIMESTAMPS for i in result.issues)


def test_stray_text_before_timestamp_is_invalid_format():
    result = validate_lrc("x[00:01.00]Hello")
    assert _types(result) == [IssueType.INVALID_FORMAT]
    assert result.issues[0].severity == Severity.ERROR


def test_metadata_lines_are_skipped():
    result = validate_lrc("[ar:Artist]\n[length:03:00.00]\n[offset:+100]\n[00:01.00]A")
    assert result.is_valid
    assert result.total_lines == 4


def test_plain_lines_next_to_timed_lines_are_not_errors():
    assert validate_lrc("[00:01.00]A\nsome note\n[00:02.00]B").is_valid


def test_cross_line_checks_run_after_per_line_checks():
    result = validate_lrc("[00:40.00]A\n[00:05.00]B\nx[00:05.05]C")
    assert _types(result) == [
        IssueType.INVALID_FORMAT,
        IssueType.OUT_OF_ORDER,
        IssueType.TIMESTAMP_OVERLAP,
    ]


def test_summary_counts_errors_and_warnings():
    result = validate_lrc("x[00:01.00]A\n[00:00.50]B\n[00:40.00]C")
    assert validation_summary(result) == "1 error, 2 warnings"
    assert validation_summary(validate_lrc("[00:01.00]A")) == "LRC format is valid"


@pytest.mark.parametrize("content,blocked", [
    ("[00:01.00][00:02.00]Hi\n[00:03.00]There", True),
    ("[00:01.00]<00:01.00>Hi", False),
    ("x[00:01.00]Hi", False),
    ("[00:01.00]Hi", False),
])
def test_publish_gate_only_checks_multi_timestamps(content, blocked):
    assert is_publish_blocked(validate_lrc(content)) is blocked


def test_any_issue_needs_confirmation():
    assert needs_confirmation(validate_lrc("[00:01.00]<00:01.00>Hi"))
    assert not needs_confirmation(validate_lrc("[00:01.00]Hi"))


def test_has_multi_timestamp_issues():
    assert has_multi_timestamp_issues("a\n[00:01.00][00:02.00] b")
    assert not has_multi_timestamp_issues("[00:01.00] a\n[00:02.00] b")


def test_issue_labels():
    assert IssueType.ELRC_WORD_TIMING.label == "ELRC Word Timestamps"
    assert IssueType.NO_TIMESTAMPS.label == "No LRC Timestamps Found"


def test_leading_byte_order_mark_is_ignored():
    result = validate_lrc("\ufeff[00:01.00]A\n[00:02.00]B\n")
    assert result.is_valid

    result = validate_lrc("\ufeff[ti:Song]\n[00:01.00]A")
    assert result.is_valid
