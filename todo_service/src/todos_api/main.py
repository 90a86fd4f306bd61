import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import uvicorn

from .errors import NotFoundError, StoreError, ValidationError
from .routers import healthz as healthz_router
from .routers import todos as todos_router
from .settings import get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Liveness probe for orchestrators."},
    {
        "name": "todos",
        "description": "Create, list (keyset pagination), update and bulk-delete TODOs.",
    },
]


# PUBLIC_INTERFACE
def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_settings = get_settings()
configure_logging(_settings.log_level)

app = FastAPI(
    title="TODO Service",
    description="CRUD REST service for TODOs backed by SQLite.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _empty(status_code: int) -> Response:
    return Response(status_code=status_code, media_type="application/json")


# Error classification: every error kind maps to one status with an empty body.
@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Undecodable bodies are client errors: 400 with an empty body."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _empty(status.HTTP_400_BAD_REQUEST)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> Response:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return _empty(status.HTTP_400_BAD_REQUEST)


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> Response:
    logger.info("%s %s: %s", request.method, request.url.path, exc)
    return _empty(status.HTTP_404_NOT_FOUND)


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError) -> Response:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return _empty(status.HTTP_500_INTERNAL_SERVER_ERROR)


app.include_router(healthz_router.router)
app.include_router(todos_router.router)


# PUBLIC_INTERFACE
def serve() -> None:
    """Run the service with uvicorn on HOST:PORT."""
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_level=_settings.log_level.lower())


if __name__ == "__main__":
    serve()
