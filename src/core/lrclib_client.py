from __future__ import annotations

import logging

import requests

from core.challenge import Challenge
from core.models import PublishPayload

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE = "https://lrclib.net"
CHALLENGE_PATH = "/api/request-challenge"
PUBLISH_PATH = "/api/publish"

CHALLENGE_FAILED = "Failed to request a publish challenge."
PUBLISH_FAILED = "Failed to publish lyrics."


class LrcLibError(Exception):
    """Failure with a message that can be shown to the user as-is."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalize_instance(url: str | None) -> str:
    u = (url or "").strip().rstrip("/")
    if not u:
        u = DEFAULT_INSTANCE
    if u.endswith("/api"):
        u = u[: -len("/api")]
    return u


class LrcLibClient:
    def __init__(self, base_url: str = DEFAULT_INSTANCE, user_agent: str = "lrc-publisher/0.1", timeout: float = 15):
        self.base_url = normalize_instance(base_url)
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def request_challenge(self) -> Challenge:
        # POST /api/request-challenge -> {"prefix": "...", "target": "..."}
        try:
            r = self.session.post(f"{self.base_url}{CHALLENGE_PATH}", timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
            prefix = data["prefix"]
            target = data["target"]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning("Challenge request to %s failed: %s", self.base_url, e)
            raise LrcLibError(CHALLENGE_FAILED) from e

        if not isinstance(prefix, str) or not isinstance(target, str):
            logger.warning("Malformed challenge from %s: %r", self.base_url, data)
            raise LrcLibError(CHALLENGE_FAILED)

        return Challenge(prefix=prefix, target=target)

    def publish(self, token: str, payload: PublishPayload) -> None:
        # POST /api/publish with X-Publish-Token: "{prefix}:{nonce}"
        try:
            r = self.session.post(
                f"{self.base_url}{PUBLISH_PATH}",
                json=payload.to_json(),
                headers={"X-Publish-Token": token},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Publish request to %s failed: %s", self.base_url, e)
            raise LrcLibError(PUBLISH_FAILED) from e

        if r.ok:
            logger.info("Published lyrics for %s - %s", payload.artist_name, payload.track_name)
            return

        raise LrcLibError(_error_message(r, PUBLISH_FAILED), status_code=r.status_code)


def _error_message(r: requests.Response, fallback: str) -> str:
    # error bodies look like {"code": 400, "name": "...", "message": "..."}
    try:
        data = r.json()
    except ValueError:
        return fallback
    message = data.get("message") if isinstance(data, dict) else None
    return message if isinstance(message, str) and message else fallback
