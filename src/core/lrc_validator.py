# core/lrc_validator.py
"""
Validation of synced (LRC) lyrics.

Problems are reported as data: every rule appends a ValidationIssue and the
whole list is returned, nothing is raised.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from core.lrc_lines import LineKind, classify_lines, split_lines
from core.lrc_timestamp import TIMESTAMP_RE, find_word_timings, parse_timestamp

SINGLE_TIMESTAMP_LINE_RE = re.compile(r"^\[(\d{2}):(\d{2})\.(\d{2,3})\](.*)$")

MAX_GAP_MS = 30000
MIN_GAP_MS = 100
PREVIEW_CHARS = 100


class IssueType(str, Enum):
    MULTI_TIMESTAMP = "multi-timestamp"
    INVALID_FORMAT = "invalid-format"
    INVALID_TIMESTAMP = "invalid-timestamp"
    OUT_OF_ORDER = "out-of-order"
    NEGATIVE_TIMESTAMP = "negative-timestamp"
    DUPLICATE_TIMESTAMP = "duplicate-timestamp"
    EXCESSIVE_GAP = "excessive-gap"
    TIMESTAMP_OVERLAP = "timestamp-overlap"
    NO_TIMESTAMPS = "no-timestamps"
    ELRC_WORD_TIMING = "elrc-word-timing"

    @property
    def label(self) -> str:
        return _ISSUE_LABELS[self]


_ISSUE_LABELS = {
    IssueType.MULTI_TIMESTAMP: "Multi-timestamp Format",
    IssueType.INVALID_FORMAT: "Invalid Format",
    IssueType.INVALID_TIMESTAMP: "Invalid Timestamp",
    IssueType.OUT_OF_ORDER: "Out of Order",
    IssueType.NEGATIVE_TIMESTAMP: "Negative Timestamp",
    IssueType.DUPLICATE_TIMESTAMP: "Duplicate Timestamp",
    IssueType.EXCESSIVE_GAP: "Excessive Gap",
    IssueType.TIMESTAMP_OVERLAP: "Timestamp Overlap",
    IssueType.NO_TIMESTAMPS: "No LRC Timestamps Found",
    IssueType.ELRC_WORD_TIMING: "ELRC Word Timestamps",
}


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    line: int
    type: IssueType
    severity: Severity
    message: str
    raw: str
    timestamps: Optional[Tuple[str, ...]] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    issues: Tuple[ValidationIssue, ...]
    has_multi_timestamps: bool
    has_elrc: bool
    has_errors: bool
    has_warnings: bool
    total_lines: int
    affected_lines: int
    issues_by_type: Dict[IssueType, int] = field(default_factory=dict)

    @staticmethod
    def from_issues(issues: List[ValidationIssue], total_lines: int) -> "ValidationResult":
        by_type = {t: 0 for t in IssueType}
        for issue in issues:
            by_type[issue.type] += 1

        return ValidationResult(
            is_valid=not issues,
            issues=tuple(issues),
            has_multi_timestamps=by_type[IssueType.MULTI_TIMESTAMP] > 0,
            has_elrc=by_type[IssueType.ELRC_WORD_TIMING] > 0,
            has_errors=any(i.severity == Severity.ERROR for i in issues),
            has_warnings=any(i.severity == Severity.WARNING for i in issues),
            total_lines=total_lines,
            affected_lines=len(issues),
            issues_by_type=by_type,
        )


@dataclass(frozen=True)
class TimedLine:
    timestamp_ms: int
    source_line: int
    raw: str


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n > 1 else ''}"


def validate_lrc(content: str) -> ValidationResult:
    """
    Validate LRC content and collect every non-standard pattern found.

    Lines are processed in order (1-based). Metadata and blank lines are
    skipped; lines without any [mm:ss.xx] token are plain text and are not
    errors. Ordering, gap and overlap checks only look at adjacent pairs of
    successfully timed lines.
    """
    issues: List[ValidationIssue] = []
    timed: List[TimedLine] = []
    seen: Dict[int, int] = {}  # ms -> first line using it

    for cl in classify_lines(content):
        if cl.kind in (LineKind.BLANK, LineKind.METADATA):
            continue

        line = cl.text
        n = cl.number

        word_timings = find_word_timings(line)
        if word_timings:
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.ELRC_WORD_TIMING,
                severity=Severity.ERROR,
                message=f"Contains {_plural(len(word_timings), 'ELRC word timestamp')} (not supported by LRCLIB)",
                raw=line,
                timestamps=tuple(word_timings),
                suggestion="Use auto-fix to strip word timestamps while keeping line timestamps",
            ))

        if not cl.timestamps:
            continue

        if len(cl.timestamps) > 1:
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.MULTI_TIMESTAMP,
                severity=Severity.WARNING,
                message=f"Contains {len(cl.timestamps)} timestamps (non-standard format)",
                raw=line,
                timestamps=cl.timestamps,
                suggestion="Use auto-fix to expand into separate lines",
            ))
            continue

        token = cl.timestamps[0]
        ms = parse_timestamp(token)
        if ms is None:
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.INVALID_TIMESTAMP,
                severity=Severity.ERROR,
                message="Invalid timestamp format",
                raw=line,
                suggestion="Format should be [mm:ss.xx]",
            ))
            continue

        # unreachable with an unsigned token pattern; kept as a guard
        if ms < 0:
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.NEGATIVE_TIMESTAMP,
                severity=Severity.ERROR,
                message="Timestamp cannot be negative",
                raw=line,
            ))
            continue

        # empty lyrics (instrumental breaks) are fine
        if ms in seen:
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.DUPLICATE_TIMESTAMP,
                severity=Severity.WARNING,
                message=f"Duplicate timestamp (also on line {seen[ms]})",
                raw=line,
                suggestion="Different lyrics should have different timestamps",
            ))
        else:
            seen[ms] = n

        timed.append(TimedLine(timestamp_ms=ms, source_line=n, raw=line))

        if not SINGLE_TIMESTAMP_LINE_RE.match(line):
            issues.append(ValidationIssue(
                line=n,
                type=IssueType.INVALID_FORMAT,
                severity=Severity.ERROR,
                message="Invalid timestamp format",
                raw=line,
                suggestion="Format should be [mm:ss.xx] Lyrics",
            ))

    pairs = list(zip(timed, timed[1:]))

    for prev, cur in pairs:
        if cur.timestamp_ms < prev.timestamp_ms:
            issues.append(ValidationIssue(
                line=cur.source_line,
                type=IssueType.OUT_OF_ORDER,
                severity=Severity.WARNING,
                message=f"Timestamp is earlier than previous line ({prev.source_line})",
                raw=cur.raw,
                suggestion="Lines should be in chronological order",
            ))

    for prev, cur in pairs:
        gap = cur.timestamp_ms - prev.timestamp_ms
        if gap > MAX_GAP_MS:
            issues.append(ValidationIssue(
                line=cur.source_line,
                type=IssueType.EXCESSIVE_GAP,
                severity=Severity.WARNING,
                message=f"Large gap ({_round_half_up(gap / 1000)}s) from previous line",
                raw=cur.raw,
                suggestion="Verify this gap is intentional",
            ))

    for prev, cur in pairs:
        gap = cur.timestamp_ms - prev.timestamp_ms
        # gap == 0 was already reported as a duplicate
        if 0 < gap < MIN_GAP_MS:
            issues.append(ValidationIssue(
                line=cur.source_line,
                type=IssueType.TIMESTAMP_OVERLAP,
                severity=Severity.WARNING,
                message=f"Very close to previous timestamp ({gap}ms gap)",
                raw=cur.raw,
                suggestion="Ensure this timing is intentional",
            ))

    if not timed and content.strip():
        preview = content[:PREVIEW_CHARS] + ("..." if len(content) > PREVIEW_CHARS else "")
        issues.append(ValidationIssue(
            line=1,
            type=IssueType.NO_TIMESTAMPS,
            severity=Severity.ERROR,
            message="No valid LRC timestamps found in the content",
            raw=preview,
            suggestion=(
                "LRC format requires timestamps like [mm:ss.xx] lyrics. "
                "If you are submitting plain lyrics, use the plain lyrics field instead."
            ),
        ))

    total_lines = sum(1 for raw in split_lines(content) if raw.strip())
    return ValidationResult.from_issues(issues, total_lines)


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def has_multi_timestamp_issues(content: str) -> bool:
    """Fast check used before normalization."""
    return any(len(TIMESTAMP_RE.findall(line)) > 1 for line in split_lines(content))


def is_publish_blocked(result: ValidationResult) -> bool:
    # Only unresolved multi-timestamp lines block publishing; other errors
    # (ELRC word timing, malformed timestamps) need an explicit override.
    return result.has_multi_timestamps


def needs_confirmation(result: ValidationResult) -> bool:
    return not result.is_valid


def validation_summary(result: ValidationResult) -> str:
    if result.is_valid:
        return "LRC format is valid"

    errors = sum(1 for i in result.issues if i.severity == Severity.ERROR)
    warnings = sum(1 for i in result.issues if i.severity == Severity.WARNING)

    parts = []
    if errors:
        parts.append(_plural(errors, "error"))
    if warnings:
        parts.append(_plural(warnings, "warning"))
    return ", ".join(parts)
