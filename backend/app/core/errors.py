from typing import Any, Optional

from fastapi import HTTPException


class ExtractError(HTTPException):
    """
    extract-text 엔드포인트의 모든 실패 유형의 기반 클래스입니다.
    main.py 에 등록된 핸들러가 에러 envelope 으로 변환하고 요청 로그를 남깁니다.
    """

    default_status = 400
    error_type = "error"

    def __init__(
        self,
        message: str,
        *,
        hint: Optional[str] = None,
        allowed_types: Optional[list[str]] = None,
        extra: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(status_code=self.default_status, detail=message, headers=headers)
        self.message = message
        self.hint = hint
        self.allowed_types = allowed_types
        self.extra = extra or {}


# ── Intake ───────────────────────────────────────────────────────────────
class IntakeError(ExtractError):
    error_type = "intake_error"


class InvalidBody(IntakeError):
    error_type = "invalid_body"

    def __init__(self, message: str = "Invalid JSON body"):
        super().__init__(message)


class NoFileProvided(IntakeError):
    error_type = "no_file_provided"

    def __init__(self, fields: tuple[str, ...]):
        names = ", ".join(f"'{f}'" for f in fields)
        super().__init__(f"No file uploaded. Supported fields: {names}")


class MissingFileData(IntakeError):
    error_type = "missing_file_data"

    def __init__(self):
        super().__init__("Missing file data. Provide fileUrl, fileBase64, or binaryData")


# ── Download / size ─────────────────────────────────────────────────────
class DownloadError(ExtractError):
    error_type = "download_failed"

    def __init__(self, reason: str):
        super().__init__(f"URL download failed: {reason}")
        self.reason = reason


class SizeLimitError(ExtractError):
    error_type = "file_too_large"


class FileTooLarge(SizeLimitError):
    def __init__(self, actual_bytes: int, max_bytes: int):
        super().__init__(
            f"File too large: {actual_bytes} bytes (max: {max_bytes} bytes)",
            extra={"fileSize": actual_bytes},
        )
        self.actual_bytes = actual_bytes
        self.max_bytes = max_bytes


# ── Decoding ─────────────────────────────────────────────────────────────
class DecodingError(ExtractError):
    error_type = "decoding_error"


class InvalidEncoding(DecodingError):
    error_type = "invalid_encoding"

    def __init__(self, message: str = "Invalid base64 encoding"):
        super().__init__(message)


class InvalidBinaryData(DecodingError):
    error_type = "invalid_binary_data"

    def __init__(self, message: str = "Invalid binary data"):
        super().__init__(message, hint="binaryData.data must be an array of byte values (0-255)")


# ── Policy ───────────────────────────────────────────────────────────────
class AuthError(ExtractError):
    default_status = 401
    error_type = "auth_required"

    def __init__(self, message: str = "API key required"):
        super().__init__(message)


class MethodNotAllowedError(ExtractError):
    default_status = 405
    error_type = "method_not_allowed"

    def __init__(self):
        super().__init__(
            "Method not allowed. Only POST requests accepted.",
            headers={"Allow": "POST, OPTIONS"},
        )


class RateLimitError(ExtractError):
    default_status = 429
    error_type = "rate_limited"

    def __init__(self, retry_after: int):
        super().__init__(
            "Rate limit exceeded",
            extra={"retryAfter": retry_after},
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class InternalError(ExtractError):
    default_status = 500
    error_type = "internal_error"

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "Internal server error",
            extra={"details": details} if details else None,
        )
