import zipfile
from pathlib import Path

import pytest

from shpdat.common.errors import InputFileError
from shpdat.ingest.fetch import run_fetch


class FakeClient:
    def __init__(self, build_archive):
        self.build_archive = build_archive
        self.urls = []

    def download(self, url: str, target_path: Path) -> int:
        self.urls.append(url)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        self.build_archive(target_path)
        return target_path.stat().st_size


def _triad_archive(path: Path) -> None:
    with zipfile.ZipFile(path, "w") as archive:
        for suffix in (".shp", ".shx", ".dbf"):
            archive.writestr(f"kohanimi{suffix}", b"data")


def test_run_fetch_downloads_and_extracts(tmp_path: Path):
    cfg = {"sources": [{"name": "kohanimi", "url": "https://example.com/files/kohanimi_shp.zip"}]}
    client = FakeClient(_triad_archive)

    results = run_fetch(cfg, tmp_path, client)

    assert client.urls == ["https://example.com/files/kohanimi_shp.zip"]
    assert results[0]["extracted"] == ["kohanimi.dbf", "kohanimi.shp", "kohanimi.shx"]
    assert (tmp_path / "downloads" / "kohanimi_shp.zip").exists()
    assert (tmp_path / "kohanimi.shp").read_bytes() == b"data"


def test_run_fetch_names_archive_after_source_when_url_has_no_file(tmp_path: Path):
    cfg = {"sources": [{"name": "asustusyksus", "url": "https://example.com/"}]}

    results = run_fetch(cfg, tmp_path, FakeClient(_triad_archive))

    assert results[0]["path"].endswith("asustusyksus.zip")


def test_run_fetch_rejects_escaping_members(tmp_path: Path):
    def evil(path: Path) -> None:
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("../outside.shp", b"x")

    cfg = {"sources": [{"name": "evil", "url": "https://example.com/evil.zip"}]}
    with pytest.raises(InputFileError):
        run_fetch(cfg, tmp_path / "data", FakeClient(evil))


def test_run_fetch_rejects_corrupt_archive(tmp_path: Path):
    cfg = {"sources": [{"name": "bad", "url": "https://example.com/bad.zip"}]}
    with pytest.raises(InputFileError):
        run_fetch(cfg, tmp_path, FakeClient(lambda path: path.write_bytes(b"not a zip")))
