"""
Tests for streaming URL download with size cutoff.
"""

import httpx
import pytest

from app.core import config
from app.core.errors import DownloadError, FileTooLarge
from app.services.downloader import download_file, file_name_from_url, validate_url


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestValidateUrl:
    """Only absolute http(s) URLs are fetched."""

    @pytest.mark.parametrize("url", ["ftp://example.com/file.txt", "file:///etc/passwd", "just-a-name"])
    def test_rejects_non_http(self, url):
        with pytest.raises(DownloadError, match="Invalid URL"):
            validate_url(url)

    def test_accepts_https(self):
        assert validate_url("https://example.com/a.pdf").host == "example.com"


class TestDownload:
    """Download outcomes."""

    @pytest.mark.asyncio
    async def test_success(self):
        async with _client(lambda request: httpx.Response(200, content=b"hello")) as client:
            data = await download_file("https://example.com/a.txt", max_bytes=100, client=client)
        assert data == b"hello"

    @pytest.mark.asyncio
    async def test_timeout_applied_per_request(self, monkeypatch):
        """The configured timeout is read on every call, not fixed at client creation."""
        seen = []

        def handler(request):
            seen.append(request.extensions["timeout"])
            return httpx.Response(200, content=b"ok")

        async with _client(handler) as client:
            monkeypatch.setattr(config, "DOWNLOAD_TIMEOUT_SEC", 7)
            await download_file("https://example.com/a.txt", client=client)
            monkeypatch.setattr(config, "DOWNLOAD_TIMEOUT_SEC", 12)
            await download_file("https://example.com/a.txt", client=client)

        assert [t["read"] for t in seen] == [7, 12]
        assert [t["connect"] for t in seen] == [7, 12]

    @pytest.mark.asyncio
    async def test_bad_status(self):
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(DownloadError, match="HTTP 404: Not Found"):
                await download_file("https://example.com/a.txt", client=client)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(DownloadError, match="Request timeout"):
                await download_file("https://example.com/a.txt", client=client)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(DownloadError, match="connection refused"):
                await download_file("https://example.com/a.txt", client=client)

    @pytest.mark.asyncio
    async def test_streaming_overflow_aborts_early(self):
        """Transfer stops at the first chunk that crosses the limit."""
        served = []

        async def body():
            for _ in range(1000):
                served.append(1)
                yield b"x" * 10

        async with _client(lambda request: httpx.Response(200, content=body())) as client:
            with pytest.raises(FileTooLarge) as exc_info:
                await download_file("https://example.com/huge.bin", max_bytes=25, client=client)

        assert exc_info.value.actual_bytes == 30
        assert exc_info.value.max_bytes == 25
        assert len(served) < 1000


def test_file_name_from_url():
    assert file_name_from_url("https://example.com/files/resume.pdf?token=abc") == "resume.pdf"
    assert file_name_from_url("https://example.com/") is None
    assert file_name_from_url("https://example.com") is None
