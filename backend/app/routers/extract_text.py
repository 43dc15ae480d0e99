import logging
import time

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.core import config
from app.core.errors import ExtractError, InternalError
from app.core.security import require_api_key
from app.services.classifier import classify
from app.services.formatter import result_envelope
from app.services.handlers import dispatch
from app.services.intake import resolve_intake
from app.services.rate_limiter import enforce_rate_limit
from app.services.request_log import log_request
from app.services.size_guard import enforce_max_size

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extract"])

EXTRACT_PATH = "/extract-text"


def request_started(request: Request) -> float:
    started = getattr(request.state, "started", None)
    if started is None:
        started = time.perf_counter()
        request.state.started = started
    return started


@router.post(EXTRACT_PATH, dependencies=[Depends(enforce_rate_limit), Depends(require_api_key)])
async def extract_text(request: Request):
    started = request_started(request)

    try:
        intake = await resolve_intake(request)
        enforce_max_size(intake.buffer)
        tag = classify(intake.buffer, intake.file_name)
        result = dispatch(intake, tag)
    except ExtractError:
        raise
    except Exception as e:
        logger.exception("API Error")
        raise InternalError(str(e) if config.APP_ENV == "development" else None)

    log_request(
        request,
        started,
        result.success,
        file_type=result.type,
        file_size=len(intake.buffer),
        error=result.error,
    )
    status, body = result_envelope(result, started)
    return JSONResponse(body, status_code=status)


# CORS preflight 는 CORSMiddleware 가 응답, Origin 없는 OPTIONS 만 여기로 옴
@router.options(EXTRACT_PATH)
async def extract_text_options():
    return Response(status_code=200)

