from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    ConfigurationError,
    OrderNotFoundError,
    PagarmeBridgeError,
    ProcessorError,
    TransportError,
)
from .utilities.logging_config import logger


def add_error_handlers(app):
    """
    Registra handlers de erro na aplicação FastAPI.
    """
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.error(f"HTTPException: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "HTTPException", "message": exc.detail, "status_code": exc.status_code},
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error(f"StarletteHTTPException: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "StarletteHTTPException", "message": exc.detail, "status_code": exc.status_code},
        )

    @app.exception_handler(OrderNotFoundError)
    async def order_not_found_handler(request: Request, exc: OrderNotFoundError):
        logger.warning(f"OrderNotFoundError: {exc}")
        return JSONResponse(
            status_code=404,
            content={"error": "OrderNotFound", "message": str(exc), "status_code": 404},
        )

    @app.exception_handler(PagarmeBridgeError)
    async def pagarme_bridge_error_handler(request: Request, exc: PagarmeBridgeError):
        if isinstance(exc, ConfigurationError):
            status_code = 503
        elif isinstance(exc, TransportError):
            status_code = 502
        elif isinstance(exc, ProcessorError):
            status_code = 422
        else:
            status_code = 400
        logger.error(f"{type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "message": str(exc), "status_code": status_code},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled Exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "InternalServerError", "message": "Ocorreu um erro interno no servidor."},
        )
