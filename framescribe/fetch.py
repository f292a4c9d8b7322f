"""Whisper checkpoint catalog and downloader."""

import logging
from pathlib import Path
from typing import Callable

import httpx

from framescribe.models import ModelDescriptor

logger = logging.getLogger(__name__)

_BASE_URL = "https://openaipublic.azureedge.net/main/whisper/models"

MODELS: dict[str, ModelDescriptor] = {
    m.name: m
    for m in (
        ModelDescriptor(
            name="tiny.en",
            url=f"{_BASE_URL}/d3dd57d32accea0b295c96e26691aa14d8822fac7d9d27d5dc00b4ca2826dd03/tiny.en.pt",
            filename="tiny.en.pt",
            size="75 MB",
            description="Tiny English-only model (fastest, lowest accuracy)",
        ),
        ModelDescriptor(
            name="tiny",
            url=f"{_BASE_URL}/65147644a518d12f04e32d6f3b26facc3f8dd46e5390956a9424a650c0ce22b9/tiny.pt",
            filename="tiny.pt",
            size="75 MB",
            description="Tiny multilingual model",
        ),
        ModelDescriptor(
            name="base.en",
            url=f"{_BASE_URL}/25a8566e1d0c1e2231d1c762132cd20e0f96a85d16145c3a00adf5d1ac670ead/base.en.pt",
            filename="base.en.pt",
            size="142 MB",
            description="Base English-only model (recommended for most use cases)",
        ),
        ModelDescriptor(
            name="base",
            url=f"{_BASE_URL}/ed3a0b6b1c0edf879ad9b11b1af5a0e6ab5db9205f891f668f8b0e6c6326e34e/base.pt",
            filename="base.pt",
            size="142 MB",
            description="Base multilingual model",
        ),
        ModelDescriptor(
            name="small.en",
            url=f"{_BASE_URL}/f953ad0fd29cacd07d5a9eda5624af0f6bcf2258be67c92b79389873d91e0872/small.en.pt",
            filename="small.en.pt",
            size="466 MB",
            description="Small English-only model (better accuracy, slower)",
        ),
        ModelDescriptor(
            name="small",
            url=f"{_BASE_URL}/9ecf779972d90ba49c06d968637d720dd632c55bbf19d441fb42bf17a411e794/small.pt",
            filename="small.pt",
            size="466 MB",
            description="Small multilingual model",
        ),
    )
}

CHUNK_SIZE = 1024 * 1024


class UnknownModelError(ValueError):
    pass


class DownloadError(RuntimeError):
    pass


def format_catalog() -> list[str]:
    return [
        f"  {name:<10} - {info.description} ({info.size})"
        for name, info in MODELS.items()
    ]


def resolve_model(name: str) -> ModelDescriptor:
    try:
        return MODELS[name]
    except KeyError:
        raise UnknownModelError(f"Unknown model: {name}") from None


def progress_line(downloaded: int, total: int) -> str:
    """Progress text for *downloaded* of *total* bytes (total 0 means unknown)."""
    mb = downloaded // (1024 * 1024)
    if total <= 0:
        return f"Downloaded: {mb}MB"
    percent = downloaded * 100 // total
    return f"Progress: {percent}% ({mb}MB / {total // (1024 * 1024)}MB)"


def download_model(
    model: ModelDescriptor,
    dest: Path,
    client: httpx.Client | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> Path:
    """Stream *model* to *dest*; on any failure the partial file is removed.

    ``on_progress(downloaded, total)`` is called after every chunk; *total* is
    0 when the server does not send a content length.
    """
    owns_client = client is None
    client = client or httpx.Client(follow_redirects=True, timeout=None)

    logger.info("GET %s -> %s", model.url, dest)
    try:
        with client.stream("GET", model.url) as response:
            response.raise_for_status()
            total = int(response.headers.get("content-length") or 0)
            downloaded = 0
            with open(dest, "wb") as fh:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    fh.write(chunk)
                    downloaded += len(chunk)
                    if on_progress:
                        on_progress(downloaded, total)
    except (httpx.HTTPError, OSError) as exc:
        dest.unlink(missing_ok=True)
        raise DownloadError(str(exc) or exc.__class__.__name__) from exc
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    finally:
        if owns_client:
            client.close()

    return dest
