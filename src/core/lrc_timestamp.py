# core/lrc_timestamp.py
from __future__ import annotations

import re
from typing import List, Optional

TIMESTAMP_RE = re.compile(r"\[(\d{2}):(\d{2})\.(\d{2,3})\]")
WORD_TIMING_RE = re.compile(r"<\d{1,2}:\d{2}\.\d{2,3}>")


def _frac_to_hundredths(frac: str) -> int:
    # 3-digit fractions are rounded half up to the nearest 10 ms
    if len(frac) == 3:
        return (int(frac) + 5) // 10
    return int(frac)


def _ts_to_ms(mm: str, ss: str, frac: str) -> int:
    return int(mm) * 60000 + int(ss) * 1000 + _frac_to_hundredths(frac) * 10


def parse_timestamp(token: str) -> Optional[int]:
    """
    Parse a bracket token ([mm:ss.xx] or [mm:ss.xxx]) to whole milliseconds.
    Returns None when the text holds no such token.
    """
    m = TIMESTAMP_RE.search(token or "")
    if not m:
        return None
    return _ts_to_ms(m.group(1), m.group(2), m.group(3))


def format_timestamp(ms: int) -> str:
    """Format milliseconds as [mm:ss.xx] (centiseconds)."""
    if ms < 0:
        ms = 0
    total_s = ms // 1000
    m = total_s // 60
    s = total_s % 60
    cs = (ms % 1000) // 10
    return f"[{m:02d}:{s:02d}.{cs:02d}]"


def normalize_timestamp(token: str) -> str:
    """
    [mm:ss.xxx] -> [mm:ss.xx]. Minutes and seconds are kept as written; a
    fraction that rounds up to a whole second carries, clamped at
    [99:59.99]. Anything unparsable is returned as-is.
    """
    m = TIMESTAMP_RE.fullmatch(token or "")
    if not m:
        return token
    mm, ss, frac = m.groups()
    cs = _frac_to_hundredths(frac)
    if cs < 100:
        return f"[{mm}:{ss}.{cs:02d}]"

    minutes, seconds = int(mm), int(ss) + 1
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    if minutes > 99 or seconds > 99:
        return "[99:59.99]"
    return f"[{minutes:02d}:{seconds:02d}.00]"


def find_timestamps(line: str) -> List[str]:
    return [m.group(0) for m in TIMESTAMP_RE.finditer(line)]


def find_word_timings(line: str) -> List[str]:
    return WORD_TIMING_RE.findall(line)
