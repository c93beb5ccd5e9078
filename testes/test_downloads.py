import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
import requests

from wp2md.utils import downloads
from wp2md.utils.downloads import RateLimiter, download_image, with_retries


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


def test_rate_limiter_waits_for_interval():
    clock = [100.0]
    slept = []

    def sleep(seconds):
        slept.append(seconds)
        clock[0] += seconds

    limiter = RateLimiter(rpm=60)
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=sleep)
    clock[0] += 0.25
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=sleep)
    assert slept == [pytest.approx(0.75)]


def test_with_retries_retries_server_errors_then_succeeds():
    responses = [FakeResponse(503), FakeResponse(429, headers={"Retry-After": "2"}), FakeResponse(200, b"ok")]
    slept = []
    resp = with_retries(lambda: responses.pop(0), sleep_fn=slept.append, base_delay=0.5)
    assert resp.content == b"ok"
    assert slept == [0.5, 2.0]


def test_with_retries_does_not_retry_client_errors():
    calls = []

    def fn():
        calls.append(1)
        return FakeResponse(404)

    with pytest.raises(requests.HTTPError):
        with_retries(fn, sleep_fn=lambda s: None)
    assert len(calls) == 1


def test_with_retries_gives_up_on_transport_errors():
    calls = []

    def fn():
        calls.append(1)
        raise requests.ConnectionError("down")

    with pytest.raises(requests.ConnectionError):
        with_retries(fn, max_attempts=3, sleep_fn=lambda s: None)
    assert len(calls) == 3


def test_download_image_writes_decoded_filename(tmp_path, monkeypatch):
    requested = []

    def fake_get(url, headers=None, timeout=None):
        requested.append(url)
        return FakeResponse(200, b"\x89PNG")

    monkeypatch.setattr(downloads.requests, "get", fake_get)
    target = download_image("https://ex.com/u/photo%20one.png", str(tmp_path / "images"))

    assert target == str(tmp_path / "images" / "photo one.png")
    assert (tmp_path / "images" / "photo one.png").read_bytes() == b"\x89PNG"
    assert requested == ["https://ex.com/u/photo%20one.png"]


def test_download_image_skips_existing_file(tmp_path, monkeypatch):
    images = tmp_path / "images"
    images.mkdir()
    (images / "a.jpg").write_bytes(b"old")

    def fail_get(*args, **kwargs):
        raise AssertionError("should not download")

    monkeypatch.setattr(downloads.requests, "get", fail_get)
    assert download_image("https://ex.com/a.jpg", str(images)) is None
    assert (images / "a.jpg").read_bytes() == b"old"
