import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from app.services.formatter import elapsed_ms
from app.services.rate_limiter import client_identity

logger = logging.getLogger("app.request_log")

USER_AGENT_MAX = 100


def build_record(
    request: Request,
    started: Optional[float],
    success: bool,
    file_type: Optional[str] = None,
    file_size: int = 0,
    error: Optional[str] = None,
) -> dict:
    user_agent = request.headers.get("user-agent") or "unknown"
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "ip": client_identity(request),
        "method": request.method,
        "endpoint": request.url.path,
        "userAgent": user_agent[:USER_AGENT_MAX],
        "duration": f"{elapsed_ms(started)}ms",
        "success": success,
        "fileType": file_type,
        "fileSize": file_size,
        "error": error,
    }


def log_request(request: Request, started: Optional[float], success: bool, **fields) -> None:
    # 로깅 실패가 응답을 막으면 안 됨
    try:
        logger.info(json.dumps(build_record(request, started, success, **fields), ensure_ascii=False))
    except Exception as e:
        logger.warning("request log failed: %r", e)
