from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from .fetch import FetchError
from .parsers import Channel, Parser, Programme, TvGuideParser
from .parsers.tvguide import find_day_container, parse_day_shows
from .util.timeparse import day_window, format_xmltv_time, show_times
from .xmltv import Listings, assemble_listings

log = logging.getLogger(__name__)


@dataclass
class GrabResult:
    listings: Listings
    complete: bool  # False when any schedule page failed to fetch


def fetch_directory(fetcher, parser: Optional[Parser] = None) -> Dict[str, Channel]:
    """Channel directory from the landing page. FetchError propagates."""
    parser = parser or TvGuideParser()
    channels = parser.fetch_channels(fetcher)
    log.info("Found %d channels on %s", len(channels), parser.domains[0])
    return channels


def day_programmes(soup, chan_id: str, day: int, *, today: date) -> List[Programme]:
    container = find_day_container(soup, day)
    if container is None:
        log.debug("%s: no listings for day %d", chan_id, day)
        return []

    out: List[Programme] = []
    for rec in parse_day_shows(container):
        start, stop = show_times(rec, day, today=today)
        out.append(Programme(
            channel=chan_id,
            start=format_xmltv_time(start),
            stop=format_xmltv_time(stop),
            title=rec.name,
            description=rec.description,
        ))
    return out


def grab_listings(fetcher,
                  selected: Sequence[str],
                  *,
                  today: date,
                  offset: int = 0,
                  days: Optional[int] = None,
                  parser: Optional[Parser] = None,
                  directory: Optional[Dict[str, Channel]] = None) -> GrabResult:
    """Scrape every selected channel for the requested day window.

    A channel whose page cannot be fetched is reported and skipped; the
    result is then marked incomplete. A failing directory fetch is raised.
    """
    parser = parser or TvGuideParser()
    if directory is None:
        directory = fetch_directory(fetcher, parser)

    window = day_window(offset, days)
    programmes: List[Programme] = []
    complete = True
    selected = list(dict.fromkeys(selected))
    total = len(selected)

    for idx, chan_id in enumerate(selected, start=1):
        chan = directory.get(chan_id)
        if chan is None:
            log.debug("%s is not on the site any more; skipping", chan_id)
            continue

        try:
            soup = parser.fetch_schedule(fetcher, chan_id)
        except FetchError as e:
            log.error("Failed to fetch listings for %s (%s): %s", chan_id, chan.name, e)
            complete = False
            continue

        for day in window:
            progs = day_programmes(soup, chan_id, day, today=today)
            programmes.extend(progs)
            log.info("[%d/%d] %s day %d: %d programmes", idx, total, chan.name, day, len(progs))

    listings = assemble_listings(directory, selected, programmes)
    log.info("Done. Channels: %d; Programmes: %d%s",
             len(listings.channels), len(listings.programmes),
             "" if complete else " (incomplete)")
    return GrabResult(listings=listings, complete=complete)
