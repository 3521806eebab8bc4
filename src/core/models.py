# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.lrc_normalizer import extract_plain_lyrics


def _norm(s: Optional[str]) -> Optional[str]:
    """Normalize optional strings (strip + convert empty to None)."""
    if not s:
        return None
    s = s.strip()
    return s or None


@dataclass(frozen=True)
class PublishPayload:
    track_name: str
    artist_name: str
    album_name: Optional[str]
    duration: Optional[int]   # whole seconds
    plain_lyrics: str
    synced_lyrics: str

    @staticmethod
    def from_form(
        track_name: str,
        artist_name: str,
        album_name: Optional[str],
        duration_s: Optional[float],
        plain_lyrics: Optional[str],
        synced_lyrics: Optional[str],
    ) -> "PublishPayload":
        synced = _norm(synced_lyrics) or ""
        plain = _norm(plain_lyrics)

        # derive plain lyrics from the synced ones when only those are given
        if synced and not plain:
            plain = extract_plain_lyrics(synced)

        duration = int(round(duration_s)) if duration_s and duration_s > 0 else None

        return PublishPayload(
            track_name=(track_name or "").strip(),
            artist_name=(artist_name or "").strip(),
            album_name=_norm(album_name),
            duration=duration,
            plain_lyrics=plain or "",
            synced_lyrics=synced,
        )

    @property
    def is_synced(self) -> bool:
        return bool(self.synced_lyrics)

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.track_name:
            missing.append("track name")
        if not self.artist_name:
            missing.append("artist name")
        if not self.plain_lyrics and not self.synced_lyrics:
            missing.append("lyrics")
        return missing

    def to_json(self) -> dict:
        body = {
            "trackName": self.track_name,
            "artistName": self.artist_name,
            "plainLyrics": self.plain_lyrics,
            "syncedLyrics": self.synced_lyrics,
        }
        if self.album_name:
            body["albumName"] = self.album_name
        if self.duration is not None:
            body["duration"] = self.duration
        return body
