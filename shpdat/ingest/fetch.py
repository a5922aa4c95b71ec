"""Download and unpack configured source archives."""

from __future__ import annotations

import zipfile
from pathlib import Path
from urllib.parse import urlparse

from shpdat.common.errors import InputFileError
from shpdat.common.fs import ensure_dir
from shpdat.common.http import HttpClient


def _download_filename(url: str, source_name: str) -> str:
    basename = Path(urlparse(url).path).name
    if basename:
        return basename
    return f"{source_name}.zip"


def _extract_archive(archive_path: Path, data_dir: Path) -> list[str]:
    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = [name for name in archive.namelist() if not name.endswith("/")]
            for member in members:
                target = (data_dir / member).resolve()
                if data_dir.resolve() not in target.parents:
                    raise InputFileError(f"Archive member escapes data dir: {member}")
            archive.extractall(data_dir, members=members)
    except zipfile.BadZipFile as exc:
        raise InputFileError(f"Not a zip archive: {archive_path}") from exc
    return sorted(members)


def run_fetch(cfg: dict, data_dir: Path, client: HttpClient) -> list[dict]:
    ensure_dir(data_dir)
    results = []
    for source in cfg["sources"]:
        target = data_dir / "downloads" / _download_filename(source["url"], source["name"])
        size = client.download(source["url"], target)
        extracted = _extract_archive(target, data_dir) if target.suffix.lower() == ".zip" else []
        results.append(
            {
                "name": source["name"],
                "url": source["url"],
                "path": str(target),
                "bytes": size,
                "extracted": extracted,
            }
        )
    return results
