from __future__ import annotations

import logging
import os
from typing import Optional

import requests
from bs4 import BeautifulSoup

log = logging.getLogger(__name__)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.environ.get(name)
    return v if v is not None and v != "" else default


REQUEST_TIMEOUT = float(_env("TVGRAB_IL_TIMEOUT", "30"))
USER_AGENT = _env(
    "TVGRAB_IL_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36",
)


class FetchError(RuntimeError):
    """A page could not be retrieved. Callers decide whether to skip or abort."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class PageFetcher:
    """Fetches pages over one requests.Session and parses them with lxml."""

    def __init__(self, *, user_agent: str = USER_AGENT, timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept-Language": "he,en;q=0.8",
        })

    def get_text(self, url: str) -> str:
        log.debug("GET %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(url, str(e)) from e
        # the site omits charset on some responses
        if not r.encoding or r.encoding.lower() == "iso-8859-1":
            r.encoding = "utf-8"
        return r.text

    def get_soup(self, url: str) -> BeautifulSoup:
        return BeautifulSoup(self.get_text(url), "lxml")

    def close(self) -> None:
        self.session.close()
