from pathlib import Path

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from httpsendfile.api import create_app
from httpsendfile.api.rest import resolve_under_root
from httpsendfile.config import Config


@pytest.fixture
def config(tmp_path, sample_file):
    return Config(
        root_dir=sample_file.parent,
        chunk_bytes=256,
        delay_seconds=0,
        content_type="application/x-test",
    )


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["chunk_bytes"] == 256


def test_full_download(client, file_data):
    response = client.get("/files/sample.bin")

    assert response.status_code == 200
    assert response.content == file_data
    assert response.headers["content-length"] == "1000"
    assert response.headers["content-type"] == "application/x-test"
    assert response.headers["content-disposition"] == 'attachment; filename="sample.bin"'
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "private"
    assert response.headers["pragma"] == "private"
    assert response.headers["expires"] == "Mon, 26 Jul 1997 05:00:00 GMT"
    assert response.headers["x-accel-buffering"] == "no"


def test_range_download(client, file_data):
    response = client.get("/files/sample.bin", headers={"Range": "bytes=100-199"})

    assert response.status_code == 206
    assert response.headers["content-range"] == "bytes 100-199/1000"
    assert response.headers["content-length"] == "100"
    assert response.content == file_data[100:200]


def test_resume_from_offset(client, file_data):
    response = client.get("/files/sample.bin", headers={"Range": "bytes=600-"})

    assert response.status_code == 206
    assert response.headers["content-range"] == "bytes 600-999/1000"
    assert response.content == file_data[600:]


def test_unsatisfiable_range(client):
    response = client.get("/files/sample.bin", headers={"Range": "bytes=4000-"})

    assert response.status_code == 416
    assert response.headers["content-range"] == "bytes */1000"


def test_missing_file(client):
    assert client.get("/files/missing.bin").status_code == 404


def test_inline_and_named_downloads(client):
    inline = client.get("/files/sample.bin", params={"download": "false"})
    assert "content-disposition" not in inline.headers

    named = client.get("/files/sample.bin", params={"name": "report.dat"})
    assert named.headers["content-disposition"] == 'attachment; filename="report.dat"'


def test_nested_file(client, config):
    nested = config.root_dir / "sub" / "inner.txt"
    nested.parent.mkdir()
    nested.write_bytes(b"hello")

    response = client.get("/files/sub/inner.txt")

    assert response.status_code == 200
    assert response.content == b"hello"


def test_completed_downloads_are_counted(client):
    client.get("/files/sample.bin")
    client.get("/files/sample.bin", headers={"Range": "bytes=0-9"})

    stats = client.get("/stats").json()
    assert stats["downloads_started"] == 2
    # Only the download that reached the end of the file completes
    assert stats["downloads_completed"] == 1


def test_file_info(client):
    response = client.get("/info/sample.bin")

    assert response.status_code == 200
    assert response.json() == {
        "name": "sample.bin",
        "size": 1000,
        "mime_type": "application/x-test",
        "accept_ranges": "bytes",
    }


def test_file_info_missing(client):
    assert client.get("/info/missing.bin").status_code == 404


def test_paths_outside_root_are_rejected(tmp_path):
    root = tmp_path / "root"
    root.mkdir()

    assert resolve_under_root(root, "a/b.txt") == (root / "a" / "b.txt").resolve()
    with pytest.raises(HTTPException) as exc_info:
        resolve_under_root(root, "../secret.txt")
    assert exc_info.value.status_code == 404


def test_cors_exposes_range_headers(config):
    config.cors_origins = ["http://player.test"]
    client = TestClient(create_app(config))

    response = client.get("/files/sample.bin", headers={"Origin": "http://player.test", "Range": "bytes=0-9"})

    assert response.status_code == 206
    assert response.headers["access-control-allow-origin"] == "http://player.test"
    assert "Content-Range" in response.headers["access-control-expose-headers"]


def test_download_name_with_quote_is_rejected(client):
    response = client.get("/files/sample.bin", params={"name": 'a"; filename="evil.exe'})
    assert response.status_code == 400
    assert "content-disposition" not in response.headers


def test_download_name_with_control_character_is_rejected(client):
    assert client.get("/files/sample.bin", params={"name": "a\r\nSet-Cookie: x=1"}).status_code == 400
    assert client.get("/files/sample.bin", params={"name": "back\\slash"}).status_code == 400


def test_invalid_throttle_fails_at_startup(tmp_path):
    with pytest.raises(ValueError):
        create_app(Config(root_dir=tmp_path, chunk_bytes=0))
