import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from app.services.errors import MarketplaceError

log = logging.getLogger(__name__)


async def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
        headers=exc.headers,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid request",
            "code": "validation_error",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def _store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("store unavailable on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=503, content={"error": "Store unavailable", "code": "transient_io"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, _marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(OperationalError, _store_unavailable_handler)
    app.add_exception_handler(InterfaceError, _store_unavailable_handler)
