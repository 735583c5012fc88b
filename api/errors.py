"""Exception handlers for the FastAPI app"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.errors import (
    AdapterError,
    BackendError,
    FileExistsAdapterError,
    FileMissingAdapterError,
    RecordDecodeError,
    RecordNotFoundError,
)


def _error(status_code: int, kind: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": kind})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecordNotFoundError)
    async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return _error(404, "not_found", exc)

    @app.exception_handler(RecordDecodeError)
    async def record_decode_handler(request: Request, exc: RecordDecodeError) -> JSONResponse:
        return _error(422, "decode_failure", exc)

    @app.exception_handler(AdapterError)
    async def adapter_error_handler(request: Request, exc: AdapterError) -> JSONResponse:
        if isinstance(exc, FileMissingAdapterError):
            return _error(404, "not_found", exc)
        if isinstance(exc, FileExistsAdapterError):
            return _error(409, "conflict", exc)
        return _error(500, "adapter_failure", exc)

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
        return _error(502, "backend_failure", exc)
