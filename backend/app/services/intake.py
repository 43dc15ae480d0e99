# intake.py
"""
요청 하나에서 RawIntake 하나를 만듭니다.
multipart 업로드 / fileUrl / fileBase64 / binaryData 중 정확히 하나만 사용하며,
실패는 모두 발생 지점에서 ExtractError 하위 타입으로 변환됩니다.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Literal, Optional

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import config
from app.core.errors import (
    FileTooLarge,
    InvalidBinaryData,
    InvalidBody,
    InvalidEncoding,
    MissingFileData,
    NoFileProvided,
)
from app.services.downloader import download_file, file_name_from_url

Transport = Literal["url", "base64", "binary", "multipart"]

DEFAULT_BASE64_NAME = "uploaded_file"
DEFAULT_BINARY_NAME = "n8n_upload"


@dataclass(frozen=True)
class RawIntake:
    buffer: bytes
    file_name: Optional[str]
    source: Transport


class ExtractRequest(BaseModel):
    fileUrl: Optional[str] = None
    fileBase64: Optional[str] = None
    fileName: Optional[str] = None
    # shape 검증은 decode_binary_data 에서 (잘못된 값은 InvalidBody 가 아니라 InvalidBinaryData)
    binaryData: Optional[Any] = None


def is_multipart(content_type: str) -> bool:
    return "multipart/form-data" in content_type.lower()


def parse_body(raw: bytes) -> ExtractRequest:
    try:
        return ExtractRequest.model_validate_json(raw)
    except ValidationError:
        raise InvalidBody()


def decode_base64(payload: str) -> bytes:
    try:
        data = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise InvalidEncoding()
    if not data:
        raise InvalidEncoding()
    return data


def decode_binary_data(binary_data: Any) -> bytes:
    values = binary_data.get("data") if isinstance(binary_data, dict) else None
    if not isinstance(values, list):
        raise InvalidBinaryData()
    for v in values:
        # bool 은 int 의 하위 타입이라 별도로 제외
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255:
            raise InvalidBinaryData()
    return bytes(values)


async def resolve_json(raw: bytes) -> RawIntake:
    body = parse_body(raw)

    if body.fileUrl:
        buffer = await download_file(body.fileUrl)
        return RawIntake(buffer, file_name_from_url(body.fileUrl), "url")

    if body.fileBase64:
        return RawIntake(decode_base64(body.fileBase64), body.fileName or DEFAULT_BASE64_NAME, "base64")

    if body.binaryData is not None:
        return RawIntake(decode_binary_data(body.binaryData), body.fileName or DEFAULT_BINARY_NAME, "binary")

    raise MissingFileData()


async def resolve_multipart(request: Request) -> RawIntake:
    try:
        form = await request.form()
    except StarletteHTTPException:
        raise InvalidBody("Invalid multipart body")

    try:
        upload = None
        for field in config.UPLOAD_FIELDS:
            candidate = form.get(field)
            # 문자열 필드는 파일이 아님
            if isinstance(candidate, UploadFile):
                upload = candidate
                break
        if upload is None:
            raise NoFileProvided(config.UPLOAD_FIELDS)

        # 파싱 시 기록된 실제 크기로 먼저 거절
        if upload.size is not None and upload.size > config.MAX_FILE_SIZE:
            raise FileTooLarge(upload.size, config.MAX_FILE_SIZE)

        # size 를 모르면 한도 + 1 바이트까지만 읽고 size guard 에 맡김
        buffer = await upload.read(config.MAX_FILE_SIZE + 1)
        return RawIntake(buffer, upload.filename, "multipart")
    finally:
        await form.close()


async def resolve_intake(request: Request) -> RawIntake:
    content_type = request.headers.get("content-type", "")
    if is_multipart(content_type):
        return await resolve_multipart(request)
    return await resolve_json(await request.body())
