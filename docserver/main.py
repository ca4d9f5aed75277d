"""Entry point for the document server."""

import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from docserver.blob_storage import BlobStore
from docserver.config import (
    DATABASE_PATH,
    MAX_UPLOAD_BYTES,
    SEED_DEFAULTS,
    SERVER_HOST,
    SERVER_PORT,
    UPLOADS_DIR,
)
from docserver.database import Database
from docserver.exceptions import (
    AskDocException,
    BackendError,
    FileRecordNotFoundError,
    FolderNotFoundError,
    NotFoundError,
    PayloadTooLargeError,
    StorageIOError,
    ValidationError,
)
from docserver.routes.file_routes import router as file_router
from docserver.routes.folder_routes import router as folder_router
from docserver.services.folder_service import FolderService

logger = setup_logging('docserver')


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


def _error_response(request: Request, exc: Exception, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
        )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code}
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")


async def folder_not_found_handler(request: Request, exc: FolderNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FOLDER_NOT_FOUND")


async def file_not_found_handler(request: Request, exc: FileRecordNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND")


async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "NOT_FOUND")


async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    return _error_response(request, exc, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "PAYLOAD_TOO_LARGE")


async def storage_io_error_handler(request: Request, exc: StorageIOError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_IO_ERROR")


async def backend_error_handler(request: Request, exc: BackendError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "BACKEND_ERROR")


async def askdoc_exception_handler(request: Request, exc: AskDocException):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


EXCEPTION_HANDLERS = (
    (ValidationError, validation_error_handler),
    (FolderNotFoundError, folder_not_found_handler),
    (FileRecordNotFoundError, file_not_found_handler),
    (NotFoundError, not_found_handler),
    (PayloadTooLargeError, payload_too_large_handler),
    (StorageIOError, storage_io_error_handler),
    (BackendError, backend_error_handler),
    (AskDocException, askdoc_exception_handler),
)


def create_app(
    database_path: str = DATABASE_PATH,
    uploads_dir: str = UPLOADS_DIR,
    max_upload_bytes: int = MAX_UPLOAD_BYTES,
    seed_defaults: Optional[bool] = None,
) -> FastAPI:
    """
    Build the FastAPI application around one database file and one uploads directory.

    Args:
        database_path: SQLite file holding folder and file records
        uploads_dir: Directory holding uploaded blobs
        max_upload_bytes: Largest accepted upload
        seed_defaults: Create default folders on an empty database; defaults to DOCS_SEED_DEFAULTS
    """
    app = FastAPI(
        title="AskDoc Document Server",
        description="Folder hierarchy and document storage backend",
        version="1.0.0"
    )

    app.state.db = Database(database_path)
    app.state.blob_store = BlobStore(uploads_dir)
    app.state.max_upload_bytes = max_upload_bytes
    app.state.seed_defaults = SEED_DEFAULTS if seed_defaults is None else seed_defaults

    app.middleware("http")(log_requests)

    for exc_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, handler)

    @app.on_event("startup")
    async def startup_event():
        """
        Initialize database and uploads directory on application startup.
        """
        logger.info("Document server starting up...")

        app.state.db.init_schema()
        app.state.blob_store.ensure_directory()
        logger.info(f"Uploads directory: {app.state.blob_store.root}")

        if app.state.seed_defaults:
            FolderService(app.state.db, app.state.blob_store).seed_defaults()

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Document server shutting down")

    app.include_router(folder_router)
    app.include_router(file_router)

    @app.get("/")
    async def root():
        """
        Root endpoint for health check.
        """
        return {"message": "AskDoc Document Server API", "status": "running"}

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint for container healthchecks.
        Returns 200 if service is alive.
        """
        return {"status": "healthy", "service": "docserver"}

    @app.get("/ready")
    async def ready_check():
        """
        Readiness check endpoint.
        Verifies database connectivity and the uploads directory.
        """
        try:
            app.state.db.ping()
            db_status = "ok"
        except Exception as e:
            db_status = f"error: {str(e)}"

        uploads_root = app.state.blob_store.root
        storage_status = "ok" if uploads_root.is_dir() else f"error: {uploads_root} is not a directory"

        ready = db_status == "ok" and storage_status == "ok"
        status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

        return JSONResponse(
            status_code=status_code,
            content={
                "ready": ready,
                "database": db_status,
                "storage": storage_status
            }
        )

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "docserver.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT
    )


if __name__ == "__main__":
    main()
