# core/lrc_normalizer.py
"""
Repairs for non-standard LRC.

Example:
    [00:29.52][01:29.47][02:09.54] Repeated chorus line
becomes
    [00:29.52] Repeated chorus line
    [01:29.47] Repeated chorus line
    [02:09.54] Repeated chorus line
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, Tuple

from core.lrc_lines import is_metadata, split_lines
from core.lrc_timestamp import WORD_TIMING_RE, find_timestamps, normalize_timestamp, parse_timestamp

LEADING_TIMESTAMP_RE = re.compile(r"^\[\d{2}:\d{2}\.\d{2,3}\]")
TIMED_LINE_RE = re.compile(r"^\[\d{2}:\d{2}\.\d{2,3}\](.*)$")


@dataclass(frozen=True)
class NormalizationResult:
    normalized: str
    plain_lyrics: str
    changes: int            # multi-timestamp source lines rewritten
    expanded_lines: int     # lines emitted by those rewrites


def normalize_lrc(content: str) -> NormalizationResult:
    """
    Expand multi-timestamp lines into one line per timestamp.

    Every expanded line gets the text that follows the *last* token of the
    source line; text before or between earlier tokens is dropped.
    """
    out: List[str] = []
    changes = 0
    expanded = 0

    for raw in split_lines(content):
        line = raw.strip()

        if not line or is_metadata(line):
            out.append(line)
            continue

        timestamps = find_timestamps(line)
        if len(timestamps) <= 1:
            out.append(line)
            continue

        changes += 1
        last = timestamps[-1]
        lyrics_text = line[line.rfind(last) + len(last):]

        for token in timestamps:
            out.append(f"{normalize_timestamp(token)}{lyrics_text}")
            expanded += 1

    normalized = "\n".join(out)
    return NormalizationResult(
        normalized=normalized,
        plain_lyrics=extract_plain_lyrics(normalized),
        changes=changes,
        expanded_lines=expanded,
    )


def extract_plain_lyrics(synced_lyrics: str) -> str:
    """Lyric text of timed lines, in document order, without empty ones."""
    plain: List[str] = []
    for raw in split_lines(synced_lyrics):
        line = raw.strip()
        if not line or is_metadata(line):
            continue
        m = TIMED_LINE_RE.match(line)
        if m:
            text = m.group(1).strip()
            if text:
                plain.append(text)
    return "\n".join(plain)


def sort_lrc_lines(content: str) -> str:
    """
    Metadata first, then timed lines in chronological order (stable), then
    any other non-empty lines in their original order.
    """
    metadata: List[str] = []
    timed: List[Tuple[int, str]] = []
    other: List[str] = []

    for raw in split_lines(content):
        line = raw.strip()

        if is_metadata(line):
            metadata.append(line)
            continue

        m = LEADING_TIMESTAMP_RE.match(line)
        if m:
            timed.append((parse_timestamp(m.group(0)), line))
        elif line:
            other.append(line)

    timed.sort(key=lambda x: x[0])
    return "\n".join(metadata + [line for _, line in timed] + other)


def normalize_and_sort_lrc(content: str) -> NormalizationResult:
    result = normalize_lrc(content)
    ordered = sort_lrc_lines(result.normalized)
    # sorting changes the order plain lyrics are read in
    return replace(result, normalized=ordered, plain_lyrics=extract_plain_lyrics(ordered))


def strip_word_timings(content: str) -> Tuple[str, int]:
    """
    Remove ELRC <mm:ss.xx> word timings, keeping line timestamps.
    Returns (text, number of tokens removed).
    """
    removed = 0
    out: List[str] = []
    for raw in split_lines(content):
        found = WORD_TIMING_RE.findall(raw)
        if not found:
            out.append(raw)
            continue
        removed += len(found)
        line = WORD_TIMING_RE.sub("", raw)
        out.append(re.sub(r"[ \t]{2,}", " ", line).rstrip())
    return "\n".join(out), removed
