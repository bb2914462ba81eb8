import xml.etree.ElementTree as ET
from datetime import date

import pytest

from conftest import BASE, NEWS, FakeFetcher, day_li, schedule_page, show_li
from tv_grab_il import cli
from tv_grab_il.config import save_config
from tv_grab_il.parsers.base import Channel


@pytest.fixture
def run(monkeypatch, site_pages):
    """Run the CLI against canned pages; returns (exit code, fetcher)."""
    def _run(argv, fail=()):
        fetcher = FakeFetcher(site_pages, fail=fail)
        fetcher.close = lambda: None
        monkeypatch.setattr(cli, "PageFetcher", lambda: fetcher)
        monkeypatch.setattr(cli, "site_today", lambda: date(2024, 1, 15))
        return cli.main(argv), fetcher
    return _run


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "tv_grab_il.conf"
    directory = {cid: Channel(cid, cid, BASE) for cid in ("11.tvguide.co.il", "13.tvguide.co.il")}
    save_config(path, directory, list(directory))
    return path


def test_grab_to_file(run, config_file, tmp_path) -> None:
    out = tmp_path / "out.xml"
    code, _ = run(["--config-file", str(config_file), "--output", str(out), "--quiet"])
    assert code == 0
    root = ET.parse(out).getroot()
    assert [c.get("id") for c in root.findall("channel")] == ["11.tvguide.co.il", "13.tvguide.co.il"]
    assert len(root.findall("programme")) == 4


def test_partial_failure_exit_status(run, config_file, tmp_path) -> None:
    out = tmp_path / "out.xml"
    code, _ = run(["--config-file", str(config_file), "--output", str(out)], fail=[BASE + "/channel/11"])
    assert code == 1
    root = ET.parse(out).getroot()
    assert [c.get("id") for c in root.findall("channel")] == ["13.tvguide.co.il"]


def test_malformed_entry_exit_status(run, site_pages, config_file, tmp_path) -> None:
    site_pages[BASE + "/channel/11"] = schedule_page(day_li(0, show_li("{bad"), show_li(NEWS)))
    out = tmp_path / "out.xml"
    code, _ = run(["--config-file", str(config_file), "--output", str(out), "--quiet"])
    assert code == 0
    root = ET.parse(out).getroot()
    assert [p.findtext("title") for p in root.findall("programme")] == ["News", "Day Two"]


def test_directory_failure(run, config_file, tmp_path) -> None:
    out = tmp_path / "out.xml"
    code, _ = run(["--config-file", str(config_file), "--output", str(out)], fail=[BASE + "/"])
    assert code == 1
    assert not out.exists()


def test_missing_config_file(run, tmp_path) -> None:
    code, fetcher = run(["--config-file", str(tmp_path / "missing.conf")])
    assert code == 1
    assert fetcher.requested == []


def test_list_channels(run, tmp_path) -> None:
    out = tmp_path / "channels.xml"
    code, _ = run(["--list-channels", "--output", str(out)])
    assert code == 0
    root = ET.parse(out).getroot()
    assert len(root.findall("channel")) == 3
    assert root.findall("programme") == []


def test_configure_writes_config(run, monkeypatch, tmp_path) -> None:
    replies = iter(["yes", "none"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(replies))
    path = tmp_path / "conf" / "tv_grab_il.conf"
    code, _ = run(["--configure", "--config-file", str(path)])
    assert code == 0
    assert "channel=11.tvguide.co.il" in path.read_text(encoding="utf-8")
    assert "channel!12.tvguide.co.il" in path.read_text(encoding="utf-8")


def test_capabilities(capsys) -> None:
    assert cli.main(["--capabilities"]) == 0
    assert "baseline" in capsys.readouterr().out.split()


@pytest.mark.parametrize("argv", [
    ["--days", "0"],
    ["--days", "6"],
    ["--offset", "5"],
    ["--configure", "--list-channels"],
])
def test_bad_arguments(argv) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 2
