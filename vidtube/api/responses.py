from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from vidtube.domain.exceptions import DomainError


logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    data: DataT | None = None
    message: str = "Success"
    success: bool = True


class ApiErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    data: None = None
    message: str
    success: bool = False
    errors: list[str] = Field(default_factory=list)


def api_response(status_code: int, data: Any, message: str = "Success") -> ApiResponse:
    return ApiResponse(
        status_code=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    )


def error_response(status_code: int, message: str, errors: list[str] | None = None) -> JSONResponse:
    payload = ApiErrorResponse(status_code=status_code, message=message, errors=errors or [])
    return JSONResponse(status_code=status_code, content=payload.model_dump(by_alias=True))


def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = str(error.get("msg") or "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "api: internal_error path=%s message=%s",
                request.url.path,
                exc.message,
                exc_info=exc.__cause__ or exc,
            )
        return error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [_format_validation_error(error) for error in jsonable_encoder(exc.errors())]
        return error_response(400, "Invalid request", errors)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("api: unhandled_error path=%s", request.url.path, exc_info=exc)
        return error_response(500, "Internal server error")
