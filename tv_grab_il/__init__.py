"""Grab TV listings from tvguide.co.il in XMLTV format."""

__version__ = "0.3.0"
