"""
Grabber configuration file.

One ``channel=<id>`` line per selected channel and ``channel!<id>`` for
channels that were offered but declined, in the layout XMLTV grabbers use.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .parsers.base import Channel

log = logging.getLogger(__name__)

GRABBER_NAME = "tv_grab_il"
DEFAULT_CONFIG_FILE = Path(os.path.expanduser("~/.xmltv")) / f"{GRABBER_NAME}.conf"


class ConfigError(RuntimeError):
    pass


def parse_config(text: str) -> List[str]:
    """Ordered, de-duplicated list of selected channel ids."""
    seen, out = set(), []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("channel!"):
            continue
        if line.startswith("channel="):
            cid = line[len("channel="):].strip()
            if cid and cid not in seen:
                seen.add(cid)
                out.append(cid)
            continue
        log.warning("Ignoring unknown config line %d: %r", lineno, line)
    return out


def load_selected_channels(path: Path) -> List[str]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file {path} not found. Run with --configure first.") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    return parse_config(text)


def render_config(directory: Mapping[str, Channel], selected: Iterable[str]) -> str:
    chosen = set(selected)
    lines = [f"# {GRABBER_NAME} configuration"]
    for cid, chan in directory.items():
        mark = "=" if cid in chosen else "!"
        lines.append(f"channel{mark}{cid}  # {chan.name}")
    return "\n".join(lines) + "\n"


def save_config(path: Path, directory: Mapping[str, Channel], selected: Iterable[str]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(render_config(directory, selected), encoding="utf-8")
    tmp.replace(path)
    log.info("Wrote configuration to %s", path)


# ---------- Interactive selection ----------
_ANSWERS: Dict[str, str] = {
    "": "yes", "y": "yes", "yes": "yes",
    "n": "no", "no": "no",
    "a": "all", "all": "all",
    "none": "none",
}


def configure(directory: Mapping[str, Channel],
              ask: Optional[Callable[[str], str]] = None,
              default_selected: Iterable[str] = ()) -> List[str]:
    """Ask about each channel; 'all'/'none' answer for the rest of the list."""
    ask = ask or input
    previous = set(default_selected)
    selected: List[str] = []
    rest = None
    for cid, chan in directory.items():
        if rest is None:
            default = "yes" if (not previous or cid in previous) else "no"
            while True:
                reply = ask(f"Add channel {chan.name} ({cid})? [yes,no,all,none (default={default})] ")
                answer = _ANSWERS.get(reply.strip().lower())
                if answer is not None:
                    break
                log.warning("Please answer yes, no, all or none")
            if reply.strip() == "":
                answer = default
            if answer in ("all", "none"):
                rest = answer
                answer = "yes" if answer == "all" else "no"
        else:
            answer = "yes" if rest == "all" else "no"
        if answer == "yes":
            selected.append(cid)
    return selected
