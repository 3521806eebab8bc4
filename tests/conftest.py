"""Shared fixtures. Qt runs headless."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.models import PublishPayload


SAMPLE_LRC = """[ti:Sample Song]
[ar:Sample Artist]
[00:01.00] First line
[00:05.50] Second line
[00:10.25] Third line"""


@pytest.fixture
def sample_lrc() -> str:
    return SAMPLE_LRC


@pytest.fixture
def payload() -> PublishPayload:
    return PublishPayload.from_form(
        track_name="Sample Song",
        artist_name="Sample Artist",
        album_name="Sample Album",
        duration_s=183.4,
        plain_lyrics="",
        synced_lyrics=SAMPLE_LRC,
    )
