# classifier.py
"""
버퍼 내용으로 파일 종류를 판정합니다.
규칙은 CLASSIFICATION_RULES 순서대로 적용되고 처음으로 태그를 돌려준 규칙이 이깁니다.
(시그니처 > 텍스트 휴리스틱 > 확장자 > unknown)
"""

from pathlib import Path
from typing import Callable, Literal, Optional

from app.core import config

ClassificationTag = Literal["pdf", "text", "txt", "html", "htm", "image", "document", "doc", "docx", "unknown"]

# hex prefix -> tag
SIGNATURES: list[tuple[str, ClassificationTag]] = [
    ("25504446", "pdf"),       # %PDF
    ("89504e47", "image"),     # PNG
    ("ffd8", "image"),         # JPEG
    ("d0cf11e0", "document"),  # legacy Office (OLE2)
    ("504b0304", "document"),  # ZIP 기반 (DOCX 등)
]

PRINTABLE_RATIO = 0.8


def _is_printable(ch: str) -> bool:
    return "\x20" <= ch <= "\x7e" or ch in "\n\r\t"


def get_extension(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def match_signature(buffer: bytes, file_name: Optional[str]) -> Optional[ClassificationTag]:
    magic = buffer[:8].hex()
    for prefix, tag in SIGNATURES:
        if magic.startswith(prefix):
            return tag
    return None


def looks_like_text(buffer: bytes, file_name: Optional[str]) -> Optional[ClassificationTag]:
    if not buffer or b"\x00" in buffer:
        return None
    try:
        text = buffer.decode("utf-8")
    except UnicodeDecodeError:
        return None
    printable = sum(1 for ch in text if _is_printable(ch))
    if printable / len(text) > PRINTABLE_RATIO:
        return "text"
    return None


def allowed_extension(buffer: bytes, file_name: Optional[str]) -> Optional[ClassificationTag]:
    if not file_name:
        return None
    ext = get_extension(file_name)
    if ext in config.ALLOWED_FILE_TYPES:
        return ext  # type: ignore[return-value]
    return None


Rule = Callable[[bytes, Optional[str]], Optional[ClassificationTag]]

CLASSIFICATION_RULES: list[Rule] = [
    match_signature,
    looks_like_text,
    allowed_extension,
]


def classify(buffer: bytes, file_name: Optional[str] = None) -> ClassificationTag:
    for rule in CLASSIFICATION_RULES:
        tag = rule(buffer, file_name)
        if tag is not None:
            return tag
    return "unknown"
