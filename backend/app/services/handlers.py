# handlers.py
"""
분류 태그별 처리기입니다. 모든 처리기는 ExtractionResult 하나를 돌려주며 버퍼를 변경하지 않습니다.
이미지/문서/unknown 은 기술적 오류가 아니라 정책상 거절이므로 예외 대신 실패 결과로 반환합니다.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from app.core import config
from app.services.classifier import ClassificationTag
from app.services.intake import RawIntake
from app.services.size_guard import exceeds_limit, too_large_message

PREVIEW_BYTES = 1000
TRUNCATION_NOTICE = "\n\n[Content truncated due to size limits]"
PDF_NOTICE = (
    "PDF file detected. For enhanced text extraction with OCR and formatting preservation, "
    "use the dedicated resume parser service.\n\nPreview (first 1000 bytes):\n"
)


@dataclass(frozen=True)
class ExtractionResult:
    success: bool
    type: str
    file_name: Optional[str] = None
    text: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    truncated: bool = False
    error: Optional[str] = None
    hint: Optional[str] = None
    allowed_types: Optional[list[str]] = None
    preview: Optional[str] = None


def _preview_bytes(raw: bytes) -> str:
    # ASCII 출력 가능 문자 + \n \r 만 남김
    return bytes(b for b in raw[:PREVIEW_BYTES] if 32 <= b <= 126 or b in (10, 13)).decode("ascii")


def handle_pdf(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    # 실제 PDF 파싱은 하지 않음. pages 는 항상 1 (placeholder)
    preview = _preview_bytes(intake.buffer)
    return ExtractionResult(
        success=True,
        type="pdf",
        file_name=intake.file_name or "document.pdf",
        text=PDF_NOTICE + preview,
        metadata={
            "fileSize": len(intake.buffer),
            "pages": 1,
            "textPreviewLength": len(preview),
        },
        hint="Upgrade to full PDF parsing service for complete text extraction",
        preview=preview,
    )


def handle_text(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    raw = intake.buffer
    file_name = intake.file_name or "text.txt"
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return ExtractionResult(success=False, type=tag, file_name=file_name, error="Text decoding error")

    max_chars = config.MAX_TEXT_LENGTH
    if len(text) > max_chars:
        return ExtractionResult(
            success=True,
            type=tag,
            file_name=file_name,
            text=text[:max_chars] + TRUNCATION_NOTICE,
            metadata={
                "fileSize": len(raw),
                "originalLength": len(text),
                "extractedLength": max_chars,
            },
            truncated=True,
        )

    return ExtractionResult(
        success=True,
        type=tag,
        file_name=file_name,
        text=text,
        metadata={
            "fileSize": len(raw),
            "textLength": len(text),
            "lines": text.count("\n") + 1,
        },
    )


def handle_image(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    return ExtractionResult(
        success=False,
        type="image",
        file_name=intake.file_name,
        error="Image files not supported. OCR service required.",
        hint="Convert image to PDF or text first, or enable OCR capabilities",
    )


def handle_document(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    return ExtractionResult(
        success=False,
        type="document",
        file_name=intake.file_name,
        error="Document processing requires additional services",
        hint="Supported formats: PDF, TXT, HTML. Convert DOC/DOCX to PDF first.",
    )


def handle_unknown(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    allowed = list(config.ALLOWED_FILE_TYPES)
    return ExtractionResult(
        success=False,
        type="unknown",
        file_name=intake.file_name,
        error="Unsupported file type",
        hint=f"Allowed types: {', '.join(allowed)}",
        allowed_types=allowed,
    )


Handler = Callable[[RawIntake, ClassificationTag], ExtractionResult]

HANDLERS: dict[str, Handler] = {
    "pdf": handle_pdf,
    "text": handle_text,
    "txt": handle_text,
    "html": handle_text,
    "htm": handle_text,
    "image": handle_image,
    "document": handle_document,
    # 확장자 fallback 으로만 도달
    "doc": handle_document,
    "docx": handle_document,
}


def dispatch(intake: RawIntake, tag: ClassificationTag) -> ExtractionResult:
    size = len(intake.buffer)
    # size guard 를 통과했더라도 핸들러 진입 시 한 번 더 확인
    if exceeds_limit(size):
        return ExtractionResult(
            success=False,
            type=tag,
            file_name=intake.file_name,
            error=too_large_message(size),
            metadata={"fileSize": size},
        )

    handler = HANDLERS.get(tag, handle_unknown)
    return handler(intake, tag)
