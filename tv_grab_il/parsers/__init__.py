# tv_grab_il/parsers/__init__.py
from __future__ import annotations

from .base import Channel, Parser, Programme, ShowPayloadError, ShowRecord
from .tvguide import TvGuideParser

__all__ = [
    "Channel",
    "Parser",
    "Programme",
    "ShowPayloadError",
    "ShowRecord",
    "TvGuideParser",
]
