from __future__ import annotations

import logging
import time
from typing import Callable
from urllib.parse import urlsplit

import requests

from ..config import SETTINGS


LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def _validate_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ValueError(f"Invalid source URL: {url!r}")
    return url


class SourceFetcher:
    def __init__(self, session_factory: SessionFactory | None = None, backoff: float = 0.4) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()
        self._backoff = backoff

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "fabric-xray/1.0"})
        return session

    def fetch_bytes(self, source_url: str | None = None) -> bytes:
        """Download the source image, retrying with linear backoff.

        Raises ``ValueError`` when no usable URL is configured and
        ``RuntimeError`` once every attempt has failed.
        """
        target_url = _validate_url(source_url or SETTINGS.source_url)
        last_exception: Exception | None = None
        for attempt in range(1, SETTINGS.retries + 2):
            try:
                response = self._session.get(target_url, timeout=SETTINGS.timeout)
                response.raise_for_status()
                return response.content
            except requests.RequestException as exc:
                last_exception = exc
                LOGGER.warning("fetch attempt %d for %s failed: %s", attempt, target_url, exc)
                time.sleep(self._backoff * attempt)
        raise RuntimeError(last_exception)


FETCHER = SourceFetcher()
