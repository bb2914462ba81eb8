# tv_grab_il/parsers/tvguide.py
from __future__ import annotations

import json
import logging
import os
import re
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from .base import Channel, Parser, ShowPayloadError, ShowRecord

log = logging.getLogger(__name__)

BASE_URL = os.environ.get("TVGRAB_IL_BASE_URL", "https://www.tvguide.co.il").rstrip("/")
SOURCE_SUFFIX = "tvguide.co.il"

CHANNEL_PATH_RX = re.compile(r"^/channel/(\d+)/?$")
CHANNEL_ID_RX = re.compile(r"^(\d+)\.%s$" % re.escape(SOURCE_SUFFIX))

LOGO_CLASS = "channel-logo"
DAY_CLASS = "channel-line"
DAY_ATTR = "data-day"


def channel_id(site_num: str) -> str:
    return f"{site_num}.{SOURCE_SUFFIX}"


def site_id(chan_id: str) -> str:
    """'12.tvguide.co.il' -> '12'"""
    m = CHANNEL_ID_RX.match(chan_id)
    if not m:
        raise ValueError(f"not a {SOURCE_SUFFIX} channel id: {chan_id!r}")
    return m.group(1)


def schedule_url(chan_id: str, base_url: str = BASE_URL) -> str:
    return f"{base_url}/channel/{site_id(chan_id)}"


# ---------- Channel directory ----------
def _channel_num(href: str, base_url: str) -> Optional[str]:
    parsed = urlparse(href)
    if parsed.netloc and parsed.netloc.lower() != urlparse(base_url).netloc.lower():
        return None
    m = CHANNEL_PATH_RX.match(parsed.path)
    return m.group(1) if m else None


def parse_channel_directory(soup: BeautifulSoup, base_url: str = BASE_URL) -> Dict[str, Channel]:
    """Map channel id -> Channel from the landing page's logo links."""
    channels: Dict[str, Channel] = {}
    for a in soup.find_all("a", class_=LOGO_CLASS, href=True):
        num = _channel_num(a["href"], base_url)
        if not num:
            continue
        name = a.get_text(" ", strip=True)
        if not name:
            continue

        icon = None
        img = a.find("img", src=True)
        if img and img["src"].strip():
            icon = urljoin(base_url + "/", img["src"].strip())

        chan = Channel(
            id=channel_id(num),
            name=name,
            url=urljoin(base_url + "/", a["href"]),
            icon=icon,
        )
        if chan.id in channels:
            log.debug("Duplicate channel %s on directory page; keeping last", chan.id)
        channels[chan.id] = chan
    return channels


# ---------- Schedule page ----------
def find_day_container(soup: BeautifulSoup, day: int) -> Optional[Tag]:
    return soup.find("li", class_=DAY_CLASS, attrs={DAY_ATTR: str(day)})


def _is_show_entry(tag: Tag) -> bool:
    return (
        tag.name == "li"
        and not tag.has_attr("class")
        and "flex" in (tag.get("style") or "")
    )


def _payload_text(tag: Tag) -> Optional[str]:
    for value in tag.attrs.values():
        if isinstance(value, str) and value.lstrip().startswith("{"):
            return value
    return None


def parse_show_entry(tag: Tag) -> Optional[ShowRecord]:
    raw = _payload_text(tag)
    if raw is None:
        raise ShowPayloadError("show entry has no JSON payload")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ShowPayloadError(f"bad JSON payload: {e}") from e
    return ShowRecord.from_payload(payload)


def parse_day_shows(container: Tag) -> List[ShowRecord]:
    """Show records of one day container, in page order.
    Unnamed entries are layout filler; malformed payloads are logged and skipped.
    """
    shows: List[ShowRecord] = []
    for li in container.find_all(_is_show_entry):
        try:
            rec = parse_show_entry(li)
        except ShowPayloadError as e:
            log.warning("Skipping show entry: %s", e)
            continue
        if rec is None:
            continue
        shows.append(rec)
    return shows


# ---------- Parser class ----------
class TvGuideParser(Parser):
    domains = [SOURCE_SUFFIX]

    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url.rstrip("/")

    def fetch_channels(self, fetcher) -> Dict[str, Channel]:
        soup = fetcher.get_soup(self.base_url + "/")
        return parse_channel_directory(soup, self.base_url)

    def fetch_schedule(self, fetcher, chan_id: str) -> BeautifulSoup:
        # one page carries every published day
        return fetcher.get_soup(schedule_url(chan_id, self.base_url))
