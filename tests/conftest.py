import io
import sys
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
import requests
from PIL import Image

# Add src to sys.path so we can import deck_printer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


class FakeResponse:
    """Just enough of requests.Response for the retry loop and fetcher."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        json_data=None,
        fail_after_chunks: Optional[int] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.json_data = json_data
        self.fail_after_chunks = fail_after_chunks
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        chunks = [self.body[i:i + chunk_size] for i in range(0, len(self.body), chunk_size)]
        for index, chunk in enumerate(chunks):
            if self.fail_after_chunks is not None and index >= self.fail_after_chunks:
                raise requests.exceptions.ChunkedEncodingError("connection broken")
            yield chunk

    def json(self):
        if isinstance(self.json_data, Exception):
            raise self.json_data
        return self.json_data

    def close(self):
        self.closed = True


class FakeSession:
    """
    Stand-in for requests.Session.

    handler(url, params) returns a FakeResponse or raises. Every call is
    recorded; the class is safe to use from worker threads.
    """

    def __init__(self, handler: Callable):
        self.handler = handler
        self.calls: List[dict] = []
        self.headers: Dict[str, str] = {}
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, headers=None, params=None, stream=False, timeout=None):
        with self._lock:
            self.calls.append({
                "url": url,
                "headers": dict(headers or {}),
                "params": params,
                "stream": stream,
                "timeout": timeout,
            })
        return self.handler(url, params)

    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def make_jpeg(color: str = "red", size=(63, 88)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Small valid JPEG payload."""
    return make_jpeg()


@pytest.fixture
def sequence_handler():
    """Factory for handlers that replay responses/exceptions in order."""
    def _create(*items):
        queue = list(items)
        lock = threading.Lock()

        def _handler(url, params):
            with lock:
                item = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(item, BaseException):
                raise item
            return item
        return _handler
    return _create


@pytest.fixture
def image_session(jpeg_bytes):
    """Session answering every request with a JPEG."""
    return FakeSession(lambda url, params: FakeResponse(200, body=jpeg_bytes))


@pytest.fixture
def sleeps() -> List[float]:
    """Recorded backoff sleeps; pass `sleeps.append` as the sleep function."""
    return []


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    path = tmp_path / "cards"
    path.mkdir()
    return path


@pytest.fixture
def make_response():
    """FakeResponse constructor."""
    return FakeResponse


@pytest.fixture
def make_session():
    """FakeSession constructor."""
    return FakeSession


@pytest.fixture
def make_image():
    """JPEG bytes factory."""
    return make_jpeg
