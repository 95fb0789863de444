"""HTTP handlers for the text and image proxy routes."""

from __future__ import annotations

import logging
import os
from typing import Annotated

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PayloadError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from app.config import Settings, get_settings
from app.dependencies import get_caption_service, get_chat_service
from app.exceptions import ServiceError, UnknownUpstreamError, ValidationError
from app.models import CaptionResponse, CompletionResponse, ErrorResponse, MessageIn
from app.services.caption_service import CaptionService
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "Image too large. Please upload an image under 1MB."


async def assistant_endpoint(
    request: Request,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> JSONResponse:
    """Text workflow: message → chat completion → ``{"response": ...}``."""

    try:
        chat_service.require_credentials()
        message = await _read_message(request)
        logger.info("Received message", extra={"chars": len(message)})
        reply = await chat_service.complete(message)
    except ServiceError as exc:
        return _error_response(exc, "Failed to process request")

    logger.info("Assistant response delivered", extra={"chars": len(reply)})
    return JSONResponse(CompletionResponse(response=reply).model_dump())


async def image_endpoint(
    request: Request,
    caption_service: Annotated[CaptionService, Depends(get_caption_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """Image workflow: upload → caption prediction → ``{"description": ...}``."""

    try:
        caption_service.require_credentials()
        image = await _read_upload(request)
        size = _upload_size(image)
        logger.info(
            "Received image",
            extra={"upload_name": image.filename, "size": size, "content_type": image.content_type},
        )
        if size > settings.max_image_bytes:
            logger.warning("Image size exceeds limit", extra={"size": size})
            raise ValidationError(TOO_LARGE_MESSAGE)

        data = await image.read()
        description = await caption_service.describe(data, image.content_type)
    except ServiceError as exc:
        return _error_response(exc, "Failed to process image")

    return JSONResponse(CaptionResponse(description=description).model_dump())


async def _read_message(request: Request) -> str:
    """Parse and validate the JSON body of a text request."""

    body = await request.body()
    try:
        payload = MessageIn.model_validate_json(body)
    except PayloadError as exc:
        logger.warning("Rejected text payload", extra={"errors": exc.error_count()})
        raise ValidationError("Message is required") from exc
    return payload.message


async def _read_upload(request: Request) -> UploadFile:
    """Return the ``image`` file field from a multipart form."""

    try:
        form = await request.form()
    except (HTTPException, MultiPartException) as exc:
        logger.warning("Unreadable form data", exc_info=exc)
        raise ValidationError("Image is required") from exc

    image = form.get("image")
    if not isinstance(image, UploadFile):
        logger.warning("No image provided in form data")
        raise ValidationError("Image is required")
    return image


def _upload_size(upload: UploadFile) -> int:
    """Byte size of an upload without reading it into memory."""

    if upload.size is not None:
        return upload.size

    file = upload.file
    position = file.tell()
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(position)
    return size


def _error_response(exc: ServiceError, failure_prefix: str) -> JSONResponse:
    """Render a ServiceError as the JSON error envelope."""

    message = exc.message
    if isinstance(exc, UnknownUpstreamError):
        message = f"{failure_prefix}: {exc.message}"

    logger.info(
        "Request failed",
        extra={"error_code": exc.code, "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
    )
