from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import sqlite3


@dataclass
class Config:
    lrclib_instance: str = "https://lrclib.net"
    validation_debounce_ms: int = 1000
    solver_max_attempts: Optional[int] = None

    @staticmethod
    def from_row(row: sqlite3.Row) -> "Config":
        max_attempts = row["solver_max_attempts"]
        return Config(
            lrclib_instance=row["lrclib_instance"] or "https://lrclib.net",
            validation_debounce_ms=int(row["validation_debounce_ms"] or 1000),
            solver_max_attempts=int(max_attempts) if max_attempts else None,
        )
