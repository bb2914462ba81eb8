"""
Pytest fixtures: canned tvguide.co.il pages and an offline fetcher.
"""
import json

import pytest
from bs4 import BeautifulSoup

from tv_grab_il.fetch import FetchError

BASE = "https://www.tvguide.co.il"

LANDING_HTML = """
<html><body>
  <div class="channels">
    <a class="channel-logo" href="/channel/11"><img src="/images/kan11.png"> כאן 11</a>
    <a class="channel-logo" href="/channel/12"><img src="https://cdn.example/keshet.png">קשת 12</a>
    <a class="channel-logo" href="/channel/13">רשת 13</a>
    <a class="channel-logo" href="/channel/99"><img src="/images/empty.png"></a>
    <a class="channel-logo" href="/about">About</a>
    <a class="nav" href="/channel/14">Not a logo link</a>
  </div>
</body></html>
"""


def show_li(payload, style="display: flex;", extra=""):
    """One show entry as the site renders it."""
    data = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"<li style=\"{style}\" data-json='{data}'{extra}><span>show</span></li>"


def day_li(day, *entries):
    body = "".join(entries)
    return f'<li class="channel-line active" data-day="{day}"><ul>{body}</ul></li>'


def schedule_page(*days):
    return f"<html><body><ul class=\"days\">{''.join(days)}</ul></body></html>"


NEWS = {"name": "News", "description": "Evening news", "start_time": "20:00",
        "end_time": "20:30", "duration": 30}
MOVIE = {"name": "Movie", "description": "", "start_time": "21:00",
         "end_time": "23:00", "duration": 120}


class FakeFetcher:
    """Serves canned pages by URL; URLs in `fail` raise FetchError."""

    def __init__(self, pages, fail=()):
        self.pages = dict(pages)
        self.fail = set(fail)
        self.requested = []

    def get_soup(self, url):
        self.requested.append(url)
        if url in self.fail or url not in self.pages:
            raise FetchError(url, "404 Client Error")
        return BeautifulSoup(self.pages[url], "lxml")


@pytest.fixture
def landing_soup():
    return BeautifulSoup(LANDING_HTML, "lxml")


@pytest.fixture
def site_pages():
    return {
        BASE + "/": LANDING_HTML,
        BASE + "/channel/11": schedule_page(
            day_li(0, show_li(NEWS), show_li(MOVIE)),
            day_li(1, show_li(dict(NEWS, name="Late News", start_time="23:30", duration=15))),
        ),
        BASE + "/channel/12": schedule_page(
            day_li(0, show_li({"name": "", "start_time": "06:00", "end_time": "07:00", "duration": 60})),
        ),
        BASE + "/channel/13": schedule_page(
            day_li(2, show_li(dict(NEWS, name="Day Two"))),
        ),
    }
