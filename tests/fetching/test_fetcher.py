"""
Unit tests for AssetFetcher.
"""

from pathlib import Path

import pytest

from deck_printer.core.models import Card, FetchStatus
from deck_printer.fetching import AssetFetcher, FetchConfig
from deck_printer.fetching.errors import AssetWriteError, PermanentHTTPError, RetriesExhaustedError


CARD = Card("Whiptongue Hydra", "5f8d1e8b")


def _leftovers(directory: Path) -> list:
    return sorted(p.name for p in directory.iterdir())


class TestCache:
    """Tests for the on-disk cache check."""

    def test_when_cached_then_no_network(self, make_session, cache_dir, sleeps):
        (cache_dir / "5f8d1e8b.jpg").write_bytes(b"old")
        session = make_session(lambda url, params: pytest.fail("network used"))

        result = AssetFetcher(session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.CACHED
        assert result.path == cache_dir / "5f8d1e8b.jpg"
        assert result.attempts == 0
        assert session.calls == []

    def test_second_fetch_of_same_asset_is_free(self, image_session, cache_dir, sleeps):
        fetcher = AssetFetcher(image_session, sleep=sleeps.append)

        first = fetcher.fetch(CARD, cache_dir)
        calls_after_first = len(image_session.calls)
        second = fetcher.fetch(CARD, cache_dir)

        assert first.status is FetchStatus.DOWNLOADED
        assert second.status is FetchStatus.CACHED
        assert len(image_session.calls) == calls_after_first == 1

    def test_cached_file_is_never_rewritten(self, image_session, cache_dir, sleeps):
        target = cache_dir / "5f8d1e8b.jpg"
        target.write_bytes(b"keep me")

        AssetFetcher(image_session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert target.read_bytes() == b"keep me"


class TestDownload:
    """Tests for the download path."""

    def test_download_writes_body_to_cache(self, image_session, cache_dir, jpeg_bytes, sleeps):
        result = AssetFetcher(image_session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.DOWNLOADED
        assert result.attempts == 1
        assert result.path.read_bytes() == jpeg_bytes
        assert _leftovers(cache_dir) == ["5f8d1e8b.jpg"]

    def test_request_shape(self, image_session, cache_dir, sleeps):
        config = FetchConfig(base_url="https://api.scryfall.com/cards")

        AssetFetcher(image_session, config, sleep=sleeps.append).fetch(CARD, cache_dir)

        call = image_session.calls[0]
        assert call["url"] == "https://api.scryfall.com/cards/5f8d1e8b/?format=image"
        assert call["headers"]["Accept"] == "image/jpeg"
        assert call["stream"] is True
        assert call["timeout"] == config.timeout

    def test_rate_limit_then_success(self, make_session, make_response, sequence_handler, cache_dir, jpeg_bytes, sleeps):
        session = make_session(sequence_handler(
            make_response(429, headers={"Retry-After": "1"}),
            make_response(429),
            make_response(200, body=jpeg_bytes),
        ))

        result = AssetFetcher(session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.DOWNLOADED
        assert result.attempts == 3
        assert sleeps == [1, 4]

    def test_non_ascii_retry_after_falls_back_to_backoff(self, make_session, make_response, sequence_handler, cache_dir, jpeg_bytes, sleeps):
        session = make_session(sequence_handler(
            make_response(429, headers={"Retry-After": "\u00b2"}),
            make_response(200, body=jpeg_bytes),
        ))

        result = AssetFetcher(session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.DOWNLOADED
        assert result.attempts == 2
        assert sleeps == [2]


class TestFailures:
    """Tests for terminal failures."""

    def test_always_429_fails_after_five_attempts(self, make_session, make_response, cache_dir, sleeps):
        session = make_session(lambda url, params: make_response(429))

        result = AssetFetcher(session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.FAILED
        assert result.attempts == 5
        assert result.last_status == 429
        assert isinstance(result.error, RetriesExhaustedError)
        assert len(session.calls) == 5
        assert _leftovers(cache_dir) == []

    def test_not_found_fails_immediately(self, make_session, make_response, cache_dir, sleeps):
        session = make_session(lambda url, params: make_response(404))

        result = AssetFetcher(session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.FAILED
        assert result.attempts == 1
        assert result.last_status == 404
        assert isinstance(result.error, PermanentHTTPError)
        assert sleeps == []

    def test_write_error_fails_without_file(self, image_session, tmp_path, sleeps):
        missing_dir = tmp_path / "does-not-exist"

        result = AssetFetcher(image_session, sleep=sleeps.append).fetch(CARD, missing_dir)

        assert result.status is FetchStatus.FAILED
        assert isinstance(result.error, AssetWriteError)
        assert result.attempts == 1
        assert not missing_dir.exists()

    def test_broken_stream_leaves_no_partial_file(self, make_session, make_response, cache_dir, jpeg_bytes, sleeps):
        config = FetchConfig(max_attempts=2, chunk_size=16)
        session = make_session(
            lambda url, params: make_response(200, body=jpeg_bytes, fail_after_chunks=2)
        )

        result = AssetFetcher(session, config, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.FAILED
        assert result.attempts == 2
        assert _leftovers(cache_dir) == []

    def test_stale_partials_from_killed_run_are_swept(self, image_session, cache_dir, sleeps):
        (cache_dir / f".{CARD.asset_id}.k2j9x1.part").write_bytes(b"half")
        (cache_dir / ".other.q8w7e6.part").write_bytes(b"half")

        result = AssetFetcher(image_session, sleep=sleeps.append).fetch(CARD, cache_dir)

        assert result.status is FetchStatus.DOWNLOADED
        assert _leftovers(cache_dir) == [".other.q8w7e6.part", CARD.cache_filename]
