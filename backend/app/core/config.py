import os


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


# 파일 최대 크기: URL 스트리밍, 업로드, 핸들러 진입 시 모두 이 값으로 검사
MAX_FILE_SIZE = _env_int("MAX_FILE_SIZE", 50 * 1024 * 1024)

# 텍스트 응답 최대 길이 (문자 수)
MAX_TEXT_LENGTH = _env_int("MAX_TEXT_LENGTH", 50_000)

# 확장자 fallback 허용 목록 (점 없이)
ALLOWED_FILE_TYPES = _env_list("ALLOWED_FILE_TYPES", ["pdf", "txt", "html", "htm", "doc", "docx"])

# multipart 업로드 필드 (우선순위 순)
UPLOAD_FIELDS = ("file", "resume", "document")

# URL 다운로드 타임아웃 (초)
DOWNLOAD_TIMEOUT_SEC = _env_int("DOWNLOAD_TIMEOUT_SEC", 30)

# CORS: "*" 은 서브도메인 와일드카드
ALLOWED_ORIGINS = _env_list(
    "ALLOWED_ORIGINS",
    [
        "https://*.n8n.io",
        "https://n8n.io",
        "http://localhost:3000",
        "http://localhost:5678",  # n8n 로컬 개발
    ],
)

# Rate limit (클라이언트별 슬라이딩 윈도우, 프로세스 메모리)
RATE_LIMIT_WINDOW_SEC = _env_int("RATE_LIMIT_WINDOW_SEC", 60)
RATE_LIMIT_MAX_REQUESTS = _env_int("RATE_LIMIT_MAX_REQUESTS", 100)

# API key 헤더 존재 여부만 검사
REQUIRE_API_KEY = os.getenv("REQUIRE_API_KEY", "false").lower() == "true"

# development 에서만 500 응답에 내부 에러 메세지 포함
APP_ENV = os.getenv("APP_ENV", "production")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
