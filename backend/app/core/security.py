import re
from typing import Optional

from fastapi import Request

from app.core import config
from app.core.errors import AuthError

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}

_SUBDOMAIN = r"[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*"


def exact_origins(patterns: list[str]) -> list[str]:
    return [p for p in patterns if "*" not in p]


def origin_regex(patterns: list[str]) -> Optional[str]:
    """
    "https://*.n8n.io" 같은 와일드카드 패턴을 CORSMiddleware 의
    allow_origin_regex 로 변환합니다. 와일드카드가 없으면 None.
    """
    parts = [
        re.escape(p).replace(r"\*", _SUBDOMAIN)
        for p in patterns
        if "*" in p
    ]
    if not parts:
        return None
    return "^(?:" + "|".join(parts) + ")$"


def extract_api_key(request: Request) -> Optional[str]:
    key = request.headers.get("x-api-key")
    if key:
        return key
    auth = request.headers.get("authorization") or ""
    if auth.startswith("Bearer "):
        return auth[len("Bearer "):].strip() or None
    return None


async def require_api_key(request: Request) -> None:
    # 키 값 검증은 외부 key store 의 몫, 여기서는 존재 여부만
    if config.REQUIRE_API_KEY and not extract_api_key(request):
        raise AuthError()
