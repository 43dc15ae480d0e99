# downloader.py
"""
fileUrl 입력을 내려받는 httpx 래퍼입니다.
스트리밍으로 읽으면서 누적 크기가 한도를 넘는 순간 전송을 끊고,
타임아웃/비정상 상태코드/전송 오류는 모두 DownloadError 로 바꿉니다. 재시도는 없습니다.
"""

import asyncio
import logging
from typing import Optional

import httpx

from app.core import config
from app.core.errors import DownloadError, FileTooLarge

logger = logging.getLogger(__name__)

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    # 타임아웃은 요청마다 지정 (config 변경이 즉시 반영되도록)
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            follow_redirects=False,
        )
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def validate_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        raise DownloadError("Invalid URL")
    if parsed.scheme not in ("http", "https"):
        raise DownloadError("Invalid URL protocol")
    if not parsed.host:
        raise DownloadError("Invalid URL")
    return parsed


async def _stream_body(client: httpx.AsyncClient, url: httpx.URL, max_bytes: int, timeout_sec: float) -> bytes:
    async with client.stream("GET", url, timeout=httpx.Timeout(timeout_sec)) as response:
        if not response.is_success:
            raise DownloadError(f"HTTP {response.status_code}: {response.reason_phrase}")

        chunks: list[bytes] = []
        total = 0
        async for chunk in response.aiter_bytes():
            total += len(chunk)
            if total > max_bytes:
                # 남은 데이터는 읽지 않고 연결 종료 (async with 가 닫음)
                raise FileTooLarge(total, max_bytes)
            chunks.append(chunk)
        return b"".join(chunks)


async def download_file(
    url: str,
    max_bytes: Optional[int] = None,
    timeout_sec: Optional[int] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    max_bytes = config.MAX_FILE_SIZE if max_bytes is None else max_bytes
    timeout_sec = config.DOWNLOAD_TIMEOUT_SEC if timeout_sec is None else timeout_sec
    parsed = validate_url(url)
    client = client or get_client()

    try:
        return await asyncio.wait_for(_stream_body(client, parsed, max_bytes, timeout_sec), timeout=timeout_sec)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        raise DownloadError("Request timeout")
    except httpx.InvalidURL:
        raise DownloadError("Invalid URL")
    except httpx.HTTPError as e:
        logger.info("download transport error for %s: %r", parsed.host, e)
        raise DownloadError(str(e) or e.__class__.__name__)


def file_name_from_url(url: str) -> Optional[str]:
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL:
        return None
    name = path.rstrip("/").rsplit("/", 1)[-1]
    return name or None
