from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from swa_builder.package.zip import collect_entries, entry_name_for, package_archive


def _write(p: Path, data: bytes = b"x") -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


def _names(zip_path: Path) -> list[str]:
    with zipfile.ZipFile(zip_path) as z:
        return z.namelist()


def test_archive_contains_every_file_of_both_roots(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    files = {
        dist / "index.html": b"<html></html>",
        dist / "css" / "app.css": b"body{}",
        dist / "_framework" / "deep" / "blazor.boot.json": b"{}",
        www / "favicon.ico": b"\x00\x01\x02",
        www / "img" / "logo.png": b"\x89PNG",
    }
    for p, data in files.items():
        _write(p, data)
    (dist / "empty-dir").mkdir()

    out = tmp_path / "out" / "App.zip"
    entries = package_archive(dist, www, out)

    expected = {
        "index.html": b"<html></html>",
        "css/app.css": b"body{}",
        "_framework/deep/blazor.boot.json": b"{}",
        "favicon.ico": b"\x00\x01\x02",
        "img/logo.png": b"\x89PNG",
    }
    assert len(entries) == len(expected)
    with zipfile.ZipFile(out) as z:
        names = z.namelist()
        assert sorted(names) == sorted(expected)
        assert all(not n.startswith("/") and "\\" not in n for n in names)
        assert not any(info.is_dir() for info in z.infolist())
        for name, data in expected.items():
            assert z.read(name) == data


def test_root_b_entries_come_first_and_each_root_is_sorted(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    _write(dist / "b.js")
    _write(dist / "a.js")
    _write(www / "z.txt")
    _write(www / "m.txt")

    out = tmp_path / "App.zip"
    package_archive(dist, www, out)

    assert _names(out) == ["m.txt", "z.txt", "a.js", "b.js"]


def test_existing_archive_is_replaced(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    _write(dist / "index.html")
    www.mkdir()
    out = _write(tmp_path / "App.zip", b"not a zip")

    package_archive(dist, www, out)

    assert _names(out) == ["index.html"]


def test_nested_root_files_are_not_emitted_twice(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = dist / "wwwroot"
    _write(dist / "index.html")
    _write(www / "favicon.ico")

    entries = collect_entries(dist, www)

    assert [e.entry_name for e in entries] == ["favicon.ico", "index.html"]


def test_duplicate_entry_name_keeps_dist_file(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    _write(dist / "index.html", b"published")
    _write(www / "index.html", b"source")
    _write(www / "favicon.ico", b"ico")

    out = tmp_path / "App.zip"
    package_archive(dist, www, out)

    with zipfile.ZipFile(out) as z:
        assert z.namelist() == ["favicon.ico", "index.html"]
        assert z.read("index.html") == b"published"


def test_unreadable_source_file_aborts_packaging(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    _write(dist / "index.html")
    www.mkdir()
    (dist / "broken.js").symlink_to(tmp_path / "gone.js")

    with pytest.raises(OSError):
        package_archive(dist, www, tmp_path / "App.zip")


def test_symlinked_folders_are_packaged(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    _write(tmp_path / "shared" / "lib.js", b"lib")
    _write(dist / "index.html")
    www.mkdir()
    (dist / "lib").symlink_to(tmp_path / "shared", target_is_directory=True)

    out = tmp_path / "App.zip"
    package_archive(dist, www, out)

    with zipfile.ZipFile(out) as z:
        assert sorted(z.namelist()) == ["index.html", "lib/lib.js"]
        assert z.read("lib/lib.js") == b"lib"


def test_backslash_in_file_name_is_kept(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    assert entry_name_for(dist / "sub" / "a\\b.js", [dist]) == "sub/a\\b.js"


def test_entry_name_uses_component_prefix_not_string_prefix(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    sibling = tmp_path / "dist2" / "a.js"

    assert entry_name_for(sibling, [dist]) is None
    assert entry_name_for(dist / "sub" / "a.js", [dist]) == "sub/a.js"


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    _write(dist / "index.html")
    with pytest.raises(FileNotFoundError):
        package_archive(dist, tmp_path / "wwwroot", tmp_path / "App.zip")


def test_large_files_get_zip64_entries(tmp_path: Path, monkeypatch) -> None:
    # Shrink the ZIP64 threshold so a small file crosses it
    monkeypatch.setattr(zipfile, "ZIP64_LIMIT", 1024)
    dist = tmp_path / "dist"
    www = tmp_path / "wwwroot"
    payload = bytes(range(256)) * 16
    _write(dist / "_framework" / "app.wasm", payload)
    www.mkdir()

    out = tmp_path / "App.zip"
    package_archive(dist, www, out)

    with zipfile.ZipFile(out) as z:
        assert z.read("_framework/app.wasm") == payload
