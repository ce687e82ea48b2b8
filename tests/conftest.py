"""Shared fixtures and fakes for the monitor tests."""

import threading
import time

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from radio_metadata_monitor.core.cancellation import CancellationToken
from radio_metadata_monitor.core.config import MonitorConfig


def icy_frame(metaint, metadata=None, audio_byte=b'\xff'):
    """Build one ICY frame: audio block, length byte, NUL padded metadata"""
    audio = audio_byte * metaint
    if not metadata:
        return audio + b'\x00'
    data = metadata.encode('utf-8')
    units = (len(data) + 15) // 16
    return audio + bytes([units]) + data.ljust(units * 16, b'\x00')


class TrickleStream:
    """File-like stream that returns at most `step` bytes per read"""

    def __init__(self, data, step=3):
        self.data = data
        self.pos = 0
        self.step = step
        self.closed = False

    def read(self, n):
        if self.closed:
            return b''
        chunk = self.data[self.pos:self.pos + min(n, self.step)]
        self.pos += len(chunk)
        return chunk

    def close(self):
        self.closed = True


class EndlessStream:
    """Endless silent audio without metadata until closed"""

    def __init__(self):
        self.closed = threading.Event()

    def read(self, n):
        if self.closed.is_set():
            return b''
        time.sleep(0.001)
        return b'\x00' * n

    def close(self):
        self.closed.set()


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, headers=None, text='', raw=None, url=''):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.text = text
        self.raw = raw
        self.url = url
        self.close_count = 0

    @property
    def ok(self):
        return self.status_code < 400

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)

    def close(self):
        self.close_count += 1
        if self.raw is not None and hasattr(self.raw, 'close'):
            self.raw.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class HangingBodyResponse(FakeResponse):
    """Response whose body read blocks until the response is closed"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.reading = threading.Event()
        self.closed = threading.Event()

    @property
    def text(self):
        self.reading.set()
        self.closed.wait(5)
        raise requests.ConnectionError("Connection closed while reading body")

    @text.setter
    def text(self, value):
        pass

    def close(self):
        super().close()
        self.closed.set()


class FakeSession:
    """requests.Session double routing GETs by URL

    Each route is a list of items served in order (the last one repeats).
    An item is a FakeResponse, an exception to raise, or a callable taking
    the URL and returning either.
    """

    def __init__(self, routes=None):
        self.routes = {url: list(items) for url, items in (routes or {}).items()}
        self.calls = []
        self.headers = {}
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, **kwargs):
        with self._lock:
            self.calls.append((url, kwargs))
            items = self.routes.get(url)
            if not items:
                raise requests.ConnectionError(f"No route for {url}")
            item = items.pop(0) if len(items) > 1 else items[0]
        if callable(item) and not isinstance(item, FakeResponse):
            item = item(url)
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item

    @property
    def urls(self):
        return [url for url, _ in self.calls]

    def close(self):
        self.closed = True


def wait_for(predicate, timeout=2.0):
    """Poll predicate until it is true or the timeout expires"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def token():
    return CancellationToken()


@pytest.fixture
def fast_config():
    """Config without real delays"""
    return MonitorConfig(
        request_timeout=1.0,
        frame_delay=0,
        empty_frame_delay=0.001,
        poll_interval=0,
        stop_grace_period=1.0,
    )
