"""Tests for deciding the wire shape of each torrent source."""

import base64

from transmission_loader.core.classifier import (
    classify,
    detect_source_kind,
    is_absolute_url,
    read_local_file,
)
from transmission_loader.models.job import EmbeddedContent, Reference, SourceKind


def test_url_is_passed_by_reference():
    source = "https://example.org/a.torrent"
    result = classify(source, "/downloads")
    assert isinstance(result, Reference)
    assert result.filename == source
    assert result.download_dir == "/downloads"
    assert detect_source_kind(source) == (SourceKind.URL, None)


def test_local_file_is_embedded(tmp_path):
    payload = b"d8:announce35:udp://tracker.example:1337/announcee"
    torrent = tmp_path / "local.torrent"
    torrent.write_bytes(payload)

    result = classify(str(torrent), "/downloads/books")
    assert isinstance(result, EmbeddedContent)
    assert base64.b64decode(result.metainfo) == payload
    assert result.download_dir == "/downloads/books"


def test_relative_local_file_is_embedded(tmp_path, monkeypatch):
    (tmp_path / "rel.torrent").write_bytes(b"\x00\x01binary")
    monkeypatch.chdir(tmp_path)

    kind, content = detect_source_kind("rel.torrent")
    assert kind is SourceKind.LOCAL_FILE
    assert content == b"\x00\x01binary"


def test_magnet_link_passes_through_unmodified():
    source = "magnet:?xt=urn:btih:XYZ"
    result = classify(source, "/downloads")
    assert isinstance(result, Reference)
    assert result.filename == source
    assert detect_source_kind(source) == (SourceKind.OPAQUE, None)


def test_missing_file_passes_through(tmp_path):
    source = str(tmp_path / "does-not-exist.torrent")
    result = classify(source, "/downloads")
    assert isinstance(result, Reference)
    assert result.filename == source


def test_directory_is_not_read_as_file(tmp_path):
    kind, content = detect_source_kind(str(tmp_path))
    assert kind is SourceKind.OPAQUE
    assert content is None


def test_url_check_requires_scheme_and_host():
    assert is_absolute_url("http://localhost:8080/x.torrent")
    assert not is_absolute_url("magnet:?xt=urn:btih:XYZ")
    assert not is_absolute_url("C:\\torrents\\x.torrent")
    assert not is_absolute_url("/var/torrents/x.torrent")
    assert not is_absolute_url("0123456789abcdef0123456789abcdef01234567")


def test_read_local_file_handles_invalid_paths():
    assert read_local_file("bad\x00path") is None


def test_wire_arguments_use_download_dir_key(tmp_path):
    torrent = tmp_path / "x.torrent"
    torrent.write_bytes(b"abc")

    assert classify("https://e.org/x", "/d").to_arguments() == {
        "filename": "https://e.org/x",
        "download-dir": "/d",
    }
    assert classify(str(torrent), "/d").to_arguments() == {
        "metainfo": base64.b64encode(b"abc").decode(),
        "download-dir": "/d",
    }
