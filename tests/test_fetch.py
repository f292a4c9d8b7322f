"""Tests for the model catalog and downloader (HTTP is mocked with httpx)."""

from pathlib import Path

import httpx
import pytest

from framescribe.fetch import (
    CHUNK_SIZE,
    MODELS,
    DownloadError,
    UnknownModelError,
    download_model,
    format_catalog,
    progress_line,
    resolve_model,
)

MB = 1024 * 1024


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class _BrokenStream(httpx.SyncByteStream):
    """Yields *chunks* full-size blocks, then fails like a dropped connection."""

    def __init__(self, chunks: int):
        self.chunks = chunks

    def __iter__(self):
        for _ in range(self.chunks):
            yield b"w" * CHUNK_SIZE
        raise httpx.ReadError("connection reset by peer")


def _broken_client(chunks: int = 2) -> httpx.Client:
    return _client(lambda request: httpx.Response(200, stream=_BrokenStream(chunks)))


class TestCatalog:
    def test_names(self):
        assert list(MODELS) == ["tiny.en", "tiny", "base.en", "base", "small.en", "small"]

    def test_filenames_match_names(self):
        for name, model in MODELS.items():
            assert model.filename == f"{name}.pt"
            assert model.url.endswith(model.filename)

    def test_format_catalog(self):
        lines = format_catalog()
        assert len(lines) == len(MODELS)
        assert lines[2] == "  base.en    - Base English-only model (recommended for most use cases) (142 MB)"

    def test_resolve_unknown(self):
        with pytest.raises(UnknownModelError, match="Unknown model: huge"):
            resolve_model("huge")

    def test_descriptors_are_immutable(self):
        with pytest.raises(AttributeError):
            resolve_model("tiny").url = "http://example.com"


class TestProgressLine:
    def test_known_length(self):
        assert progress_line(50 * MB, 100 * MB) == "Progress: 50% (50MB / 100MB)"

    def test_unknown_length(self):
        assert progress_line(3 * MB, 0) == "Downloaded: 3MB"


class TestDownloadModel:
    def test_streams_to_disk_with_progress(self, tmp_path: Path):
        body = b"x" * (2 * MB + 10)
        client = _client(lambda request: httpx.Response(200, content=body))
        seen = []

        dest = download_model(
            MODELS["tiny"], tmp_path / "tiny.pt", client=client,
            on_progress=lambda done, total: seen.append((done, total)),
        )

        assert dest.read_bytes() == body
        assert seen[-1] == (len(body), len(body))

    def test_unknown_content_length(self, tmp_path: Path):
        def handler(request):
            return httpx.Response(200, stream=httpx.ByteStream(b"abc"))

        seen = []
        download_model(
            MODELS["tiny"], tmp_path / "tiny.pt", client=_client(handler),
            on_progress=lambda done, total: seen.append(total),
        )
        assert seen and set(seen) == {0}

    def test_http_error_removes_partial(self, tmp_path: Path):
        dest = tmp_path / "base.pt"
        client = _client(lambda request: httpx.Response(404, content=b"not found"))

        with pytest.raises(DownloadError, match="404"):
            download_model(MODELS["base"], dest, client=client)
        assert not dest.exists()

    def test_transport_error_removes_partial(self, tmp_path: Path):
        dest = tmp_path / "base.pt"

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DownloadError, match="connection refused"):
            download_model(MODELS["base"], dest, client=_client(handler))
        assert not dest.exists()

    def test_dropped_connection_removes_partial(self, tmp_path: Path):
        dest = tmp_path / "base.en.pt"
        seen = []

        with pytest.raises(DownloadError, match="connection reset"):
            download_model(
                MODELS["base.en"], dest, client=_broken_client(2),
                on_progress=lambda done, total: seen.append(done),
            )

        assert seen == [CHUNK_SIZE, 2 * CHUNK_SIZE]
        assert not dest.exists()

    def test_dropped_connection_while_overwriting(self, tmp_path: Path):
        dest = tmp_path / "base.en.pt"
        dest.write_bytes(b"previous weights")

        with pytest.raises(DownloadError):
            download_model(MODELS["base.en"], dest, client=_broken_client(1))

        assert not dest.exists()

    def test_interrupt_removes_partial(self, tmp_path: Path):
        dest = tmp_path / "base.en.pt"

        def interrupt(done, total):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            download_model(
                MODELS["base.en"], dest, client=_broken_client(2), on_progress=interrupt
            )

        assert not dest.exists()
