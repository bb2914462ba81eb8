#!/usr/bin/env python3
"""
Grab TV listings for Israel from tvguide.co.il in XMLTV format.

Example:
  tv_grab_il --configure
  tv_grab_il --days 2 --offset 1 --output listings.xml
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import DEFAULT_CONFIG_FILE, ConfigError, configure, load_selected_channels, save_config
from .fetch import FetchError, PageFetcher
from .grab import fetch_directory, grab_listings
from .util.timeparse import MAX_DAYS, site_today
from .xmltv import channel_listings, write_listings

log = logging.getLogger("tv_grab_il")

DESCRIPTION = "Israel (tvguide.co.il)"
CAPABILITIES = ("baseline", "manualconfig")
MODES = ("version", "description", "capabilities", "configure", "list_channels")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tv_grab_il", description="Grab TV listings from tvguide.co.il")
    p.add_argument("--version", action="store_true", help="Show the version of the grabber")
    p.add_argument("--description", action="store_true", help="Show a description of the grabber")
    p.add_argument("--capabilities", action="store_true", help="Show XMLTV capabilities")
    p.add_argument("--configure", action="store_true", help="Choose channels and write the config file")
    p.add_argument("--list-channels", action="store_true", help="Write all available channels as XMLTV")
    p.add_argument("--config-file", type=Path, default=DEFAULT_CONFIG_FILE,
                   help=f"Config file (default {DEFAULT_CONFIG_FILE})")
    p.add_argument("--output", default="-", help="Output file; '-' is stdout")
    p.add_argument("--days", type=int, default=None, help=f"Days to grab (1-{MAX_DAYS}, default all)")
    p.add_argument("--offset", type=int, default=0, help="Start at today + N days")
    p.add_argument("--quiet", action="store_true", help="Suppress progress messages")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    args = p.parse_args(argv)

    modes = [m for m in MODES if getattr(args, m)]
    if len(modes) > 1:
        p.error("At most one of --" + ", --".join(m.replace("_", "-") for m in modes) + " may be given")
    if args.days is not None and not 1 <= args.days <= MAX_DAYS:
        p.error(f"--days must be between 1 and {MAX_DAYS}")
    if not 0 <= args.offset < MAX_DAYS:
        p.error(f"--offset must be between 0 and {MAX_DAYS - 1}")
    return args


def setup_logging(*, quiet: bool = False, debug: bool = False) -> None:
    level = logging.DEBUG if debug else (logging.WARNING if quiet else logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s", stream=sys.stderr)


def _write(listings, output: str) -> None:
    if output == "-":
        write_listings(listings, sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return
    with open(output, "wb") as f:
        write_listings(listings, f)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    if args.version:
        print(f"tv_grab_il {__version__}")
        return 0
    if args.description:
        print(DESCRIPTION)
        return 0
    if args.capabilities:
        print("\n".join(CAPABILITIES))
        return 0

    setup_logging(quiet=args.quiet, debug=args.debug)
    fetcher = PageFetcher()
    try:
        if args.configure or args.list_channels:
            directory = fetch_directory(fetcher)
            if args.list_channels:
                _write(channel_listings(directory), args.output)
                return 0
            try:
                previous = load_selected_channels(args.config_file)
            except ConfigError:
                previous = []
            selected = configure(directory, default_selected=previous)
            save_config(args.config_file, directory, selected)
            return 0

        selected = load_selected_channels(args.config_file)
        if not selected:
            log.warning("No channels selected in %s", args.config_file)
        result = grab_listings(fetcher, selected, today=site_today(),
                               offset=args.offset, days=args.days)
        _write(result.listings, args.output)
        return 0 if result.complete else 1
    except ConfigError as e:
        log.error("%s", e)
        return 1
    except FetchError as e:
        log.error("Failed to fetch channel list: %s", e)
        return 1
    finally:
        fetcher.close()


if __name__ == "__main__":
    sys.exit(main())
