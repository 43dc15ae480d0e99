import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import config
from app.core.errors import ExtractError, InternalError, MethodNotAllowedError
from app.core.security import SECURITY_HEADERS, exact_origins, origin_regex
from app.routers.extract_text import request_started, router as extract_text_router
from app.services.downloader import close_client
from app.services.formatter import exception_envelope
from app.services.request_log import log_request

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_client()


app = FastAPI(title="Extract Text API", version="0.1.0", lifespan=lifespan)

# n8n 도메인 + 로컬 개발 (와일드카드는 regex 로)
app.add_middleware(
    CORSMiddleware,
    allow_origins=exact_origins(config.ALLOWED_ORIGINS),
    allow_origin_regex=origin_regex(config.ALLOWED_ORIGINS),
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    max_age=86400,
)


# 나중에 등록된 미들웨어가 바깥쪽 -> CORS preflight 응답에도 보안 헤더가 붙음
@app.middleware("http")
async def security_headers(request: Request, call_next):
    request.state.started = time.perf_counter()
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


@app.exception_handler(ExtractError)
async def extract_error_handler(request: Request, exc: ExtractError):
    started = request_started(request)
    log_request(
        request,
        started,
        False,
        file_size=exc.extra.get("fileSize", 0),
        error=exc.message,
    )
    return JSONResponse(
        exception_envelope(exc, started),
        status_code=exc.status_code,
        headers=exc.headers,
    )


# 라우터가 처리하지 않는 메서드 (TRACE, CONNECT, 커스텀 등) 도 같은 405 envelope 으로
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return await extract_error_handler(request, MethodNotAllowedError())
    return await http_exception_handler(request, exc)


# 라우트 밖 (dependency, middleware) 에서 난 예외. ServerErrorMiddleware 가 호출하므로 보안 헤더를 직접 붙임
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("API Error", exc_info=exc)
    details = str(exc) if config.APP_ENV == "development" else None
    response = await extract_error_handler(request, InternalError(details))
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "extract-text-api"}


app.include_router(extract_text_router)  # 텍스트 추출
