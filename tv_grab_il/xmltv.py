"""
XMLTV listings document: assembly from scraped data and serialization.
"""
from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterable, List, Mapping, Optional

from . import __version__
from .parsers.base import Channel, Programme
from .parsers.tvguide import BASE_URL, SOURCE_SUFFIX

log = logging.getLogger(__name__)

LANG = "he"
GENERATOR_NAME = f"tv_grab_il {__version__}"
DOCTYPE = '<!DOCTYPE tv SYSTEM "xmltv.dtd">'


def default_credits() -> Dict[str, str]:
    return {
        "generator-info-name": GENERATOR_NAME,
        "generator-info-url": "https://wiki.xmltv.org/",
        "source-info-name": SOURCE_SUFFIX,
        "source-info-url": BASE_URL + "/",
    }


@dataclass
class Listings:
    channels: Dict[str, Channel] = field(default_factory=dict)
    programmes: List[Programme] = field(default_factory=list)
    credits: Dict[str, str] = field(default_factory=default_credits)
    encoding: str = "UTF-8"


def assemble_listings(directory: Mapping[str, Channel],
                      selected: Iterable[str],
                      programmes: List[Programme],
                      credits: Optional[Dict[str, str]] = None) -> Listings:
    """Keep only channels that got at least one programme, in selection order."""
    selected = list(selected)
    with_shows = {p.channel for p in programmes}
    channels: Dict[str, Channel] = {}
    for cid in selected:
        if cid in with_shows and cid in directory:
            channels[cid] = directory[cid]
    log.debug("Assembled %d channels (%d selected without programmes)",
              len(channels), len(set(selected) - set(channels)))
    return Listings(
        channels=channels,
        programmes=list(programmes),
        credits=credits or default_credits(),
    )


def channel_listings(directory: Mapping[str, Channel]) -> Listings:
    """Channel-only document, as written by --list-channels."""
    return Listings(channels=dict(directory), programmes=[])


# ----------------------- Writer -----------------------

def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    el = ET.SubElement(parent, tag, {"lang": LANG})
    el.text = text
    return el


def build_tree(listings: Listings) -> ET.Element:
    root = ET.Element("tv", dict(listings.credits))

    for ch in listings.channels.values():
        ch_el = ET.SubElement(root, "channel", {"id": ch.id})
        _text(ch_el, "display-name", ch.name)
        if ch.icon:
            ET.SubElement(ch_el, "icon", {"src": ch.icon})
        if ch.url:
            ET.SubElement(ch_el, "url").text = ch.url

    for p in listings.programmes:
        attrs = {"start": p.start}
        if p.stop:
            attrs["stop"] = p.stop
        attrs["channel"] = p.channel
        prog = ET.SubElement(root, "programme", attrs)
        _text(prog, "title", p.title)
        if p.description:
            _text(prog, "desc", p.description)

    return root


def write_listings(listings: Listings, out: BinaryIO) -> None:
    root = build_tree(listings)
    ET.indent(root, space="  ")
    enc = listings.encoding
    out.write(f'<?xml version="1.0" encoding="{enc}"?>\n'.encode(enc))
    out.write((DOCTYPE + "\n").encode(enc))
    out.write(ET.tostring(root, encoding=enc, xml_declaration=False))
    out.write(b"\n")


def listings_to_bytes(listings: Listings) -> bytes:
    buf = io.BytesIO()
    write_listings(listings, buf)
    return buf.getvalue()
