# src/library/track_file.py
from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from mutagen import File as MutagenFile, MutagenError
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.flac import FLAC
from mutagen.oggvorbis import OggVorbis
from mutagen.oggopus import OggOpus
from mutagen.mp4 import MP4

from core.lrc_lines import has_timestamps

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".mp4", ".flac", ".ogg", ".oga", ".opus", ".wav"}
LYRICS_EXTS = {".lrc", ".txt"}

# Where other taggers (and LRCGET) keep lyrics:
#   - synced LRC:  LYRICS
#   - plain:       UNSYNCEDLYRICS
VORBIS_SYNCED_KEY = "LYRICS"
VORBIS_PLAIN_KEY = "UNSYNCEDLYRICS"
ID3_SYNCED_DESC = "LYRICS"
MP4_PLAIN_KEY = "\xa9lyr"
MP4_SYNCED_KEY = "----:com.lrclib:LYRICS"


@dataclass
class TrackFile:
    file_path: str
    title: str
    artist: str
    album: str
    duration: float
    plain_lyrics: Optional[str] = None
    synced_lyrics: Optional[str] = None


def _norm(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    s2 = str(s).strip()
    return s2 or None


def _first(easy, key: str) -> str:
    v = easy.get(key) if easy is not None else None
    if not v:
        return ""
    if isinstance(v, list):
        return str(v[0]).strip() if v else ""
    return str(v).strip()


def _first_of(values) -> Optional[str]:
    if isinstance(values, (list, tuple)) and values:
        first = values[0]
        if isinstance(first, (bytes, bytearray)):
            return first.decode("utf-8", errors="replace")
        return str(first)
    if isinstance(values, str):
        return values
    return None


def read_text_file(path: str) -> str:
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read()


def read_lyrics_file(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Read a .lrc/.txt file. Returns (plain, synced); content with timestamps
    counts as synced whatever the extension says.
    """
    text = _norm(read_text_file(path))
    if text is None:
        return None, None
    if has_timestamps(text):
        return None, text
    return text, None


def read_sidecar_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    base, _ = os.path.splitext(path)
    plain = None
    synced = None

    txt_path = base + ".txt"
    lrc_path = base + ".lrc"

    if os.path.isfile(txt_path):
        plain = _norm(read_text_file(txt_path))
    if os.path.isfile(lrc_path):
        synced = _norm(read_text_file(lrc_path))

    return plain, synced


def read_embedded_lyrics(path: str) -> Tuple[Optional[str], Optional[str]]:
    """Returns (plain, synced) stored in the audio file tags, if any."""
    ext = os.path.splitext(path)[1].lower()
    plain: Optional[str] = None
    synced: Optional[str] = None

    try:
        if ext == ".mp3":
            try:
                tags = ID3(path)
            except ID3NoHeaderError:
                return None, None

            uslt = tags.getall("USLT")
            if uslt:
                plain = getattr(uslt[0], "text", None)
            for frame in tags.getall("TXXX"):
                if getattr(frame, "desc", "") == ID3_SYNCED_DESC:
                    synced = _first_of(frame.text)
                    break

        elif ext in {".flac", ".ogg", ".oga", ".opus"}:
            audio_cls = {".flac": FLAC, ".opus": OggOpus}.get(ext, OggVorbis)
            audio = audio_cls(path)
            plain = _first_of(audio.get(VORBIS_PLAIN_KEY))
            synced = _first_of(audio.get(VORBIS_SYNCED_KEY))

        elif ext in {".m4a", ".mp4"}:
            audio = MP4(path)
            plain = _first_of(audio.get(MP4_PLAIN_KEY))
            synced = _first_of(audio.get(MP4_SYNCED_KEY))

    except MutagenError as e:
        logger.warning("Failed to read embedded lyrics from %s: %s", path, e)
        return None, None

    return _norm(plain), _norm(synced)


def read_track_file(path: str) -> TrackFile:
    """
    Read title/artist/album/duration from an audio file and pick up lyrics,
    preferring .lrc/.txt sidecars over embedded tags.
    Raises ValueError when the file is not readable audio.
    """
    try:
        audio = MutagenFile(path, easy=True)
    except MutagenError as e:
        raise ValueError(f"Cannot parse file: {path}") from e
    if audio is None:
        raise ValueError(f"Cannot parse file: {path}")

    duration = float(audio.info.length) if getattr(audio, "info", None) else 0.0

    track = TrackFile(
        file_path=path,
        title=_first(audio, "title") or os.path.splitext(os.path.basename(path))[0],
        artist=_first(audio, "artist"),
        album=_first(audio, "album"),
        duration=duration,
    )

    plain, synced = read_sidecar_lyrics(path)
    if plain is None or synced is None:
        emb_plain, emb_synced = read_embedded_lyrics(path)
        plain = plain or emb_plain
        synced = synced or emb_synced

    track.plain_lyrics = plain
    track.synced_lyrics = synced
    return track
