from typing import Optional

from app.core import config
from app.core.errors import FileTooLarge


def max_file_size() -> int:
    return config.MAX_FILE_SIZE


def exceeds_limit(size: int, max_bytes: Optional[int] = None) -> bool:
    limit = max_file_size() if max_bytes is None else max_bytes
    return size > limit


def enforce_max_size(buffer: bytes, max_bytes: Optional[int] = None) -> None:
    """완성된 버퍼 검사. 전송 방식과 무관하게 분류 전에 호출됩니다."""
    limit = max_file_size() if max_bytes is None else max_bytes
    if len(buffer) > limit:
        raise FileTooLarge(len(buffer), limit)


def too_large_message(size: int, max_bytes: Optional[int] = None) -> str:
    limit = max_file_size() if max_bytes is None else max_bytes
    return f"File too large: {size} bytes (max: {limit} bytes)"
