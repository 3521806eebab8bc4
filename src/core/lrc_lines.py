# core/lrc_lines.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from core.lrc_timestamp import TIMESTAMP_RE, find_timestamps

METADATA_RE = re.compile(r"^\[(ti|ar|al|length|offset):", re.IGNORECASE)


class LineKind(str, Enum):
    BLANK = "blank"
    METADATA = "metadata"
    TIMESTAMPED = "timestamped"
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifiedLine:
    number: int                    # 1-based position in the input
    text: str                      # trimmed line
    kind: LineKind
    timestamps: Tuple[str, ...] = ()


def is_metadata(line: str) -> bool:
    return bool(METADATA_RE.match(line))


def split_lines(content: str) -> List[str]:
    # pasted text can still carry a UTF-8 byte order mark
    return (content or "").lstrip("\ufeff").split("\n")


def classify_line(text: str, number: int = 1) -> ClassifiedLine:
    line = text.strip()
    if not line:
        return ClassifiedLine(number, line, LineKind.BLANK)

    # metadata first, so [length:03:12.00] never counts as a lyric timestamp
    if is_metadata(line):
        return ClassifiedLine(number, line, LineKind.METADATA)

    timestamps = find_timestamps(line)
    if timestamps:
        return ClassifiedLine(number, line, LineKind.TIMESTAMPED, tuple(timestamps))
    return ClassifiedLine(number, line, LineKind.PLAIN)


def classify_lines(content: str) -> List[ClassifiedLine]:
    return [classify_line(raw, i + 1) for i, raw in enumerate(split_lines(content))]


def has_timestamps(content: str) -> bool:
    """True if any non-metadata line carries a [mm:ss.xx] token."""
    for raw in split_lines(content):
        line = raw.strip()
        if line and not is_metadata(line) and TIMESTAMP_RE.search(line):
            return True
    return False
