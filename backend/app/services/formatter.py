import time
from typing import Any, Optional

from app.core.errors import ExtractError
from app.services.handlers import ExtractionResult


def elapsed_ms(started: Optional[float]) -> int:
    if started is None:
        return 0
    return int((time.perf_counter() - started) * 1000)


def execution_time(started: Optional[float]) -> str:
    return f"{elapsed_ms(started)}ms"


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def success_envelope(result: ExtractionResult, started: Optional[float]) -> dict[str, Any]:
    data = {
        "extractedText": result.text,
        "fileName": result.file_name,
        "fileType": result.type,
        "metadata": result.metadata or {},
        "truncated": result.truncated,
    }
    data.update(_drop_none({"hint": result.hint, "preview": result.preview}))
    return {"success": True, "data": data, "executionTime": execution_time(started)}


def error_envelope(
    message: str,
    error_type: str,
    started: Optional[float],
    hint: Optional[str] = None,
    allowed_types: Optional[list[str]] = None,
    **extra: Any,
) -> dict[str, Any]:
    error = _drop_none({
        "message": message,
        "type": error_type,
        "hint": hint,
        "allowedTypes": allowed_types,
        **extra,
    })
    return {"success": False, "error": error, "executionTime": execution_time(started)}


def result_envelope(result: ExtractionResult, started: Optional[float]) -> tuple[int, dict[str, Any]]:
    """ExtractionResult -> (status, body). 실패 결과는 항상 400."""
    if result.success:
        return 200, success_envelope(result, started)
    return 400, error_envelope(
        result.error or "Extraction failed",
        result.type,
        started,
        hint=result.hint,
        allowed_types=result.allowed_types,
    )


def exception_envelope(exc: ExtractError, started: Optional[float]) -> dict[str, Any]:
    return error_envelope(
        exc.message,
        exc.error_type,
        started,
        hint=exc.hint,
        allowed_types=exc.allowed_types,
        **exc.extra,
    )
