import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from careers.api.routes.economic_regions import router as economic_regions_router
from careers.api.routes.health import router as health_router
from careers.api.routes.ingest import router as ingest_router
from careers.api.routes.outlooks import router as outlooks_router
from careers.api.routes.programs import router as programs_router
from careers.api.routes.unit_groups import router as unit_groups_router
from careers.core import errors
from careers.core.config import settings
from careers.core.logging import configure_logging
from careers.db.base import create_all
from careers.db.session import engine
from careers.scheduler import init_scheduler

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    errors.ValidationError: 400,
    errors.NotFoundError: 404,
    errors.ConflictError: 409,
    errors.ReferenceError: 422,
    errors.TransientError: 503,
}

configure_logging()

app = FastAPI(title=settings.PROJECT_NAME, version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
)


@app.exception_handler(errors.StoreError)
async def _store_error(request: Request, exc: errors.StoreError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), 500)
    headers = {"Retry-After": "1"} if exc.retryable else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind},
        headers=headers,
    )


app.include_router(health_router, tags=["health"])
app.include_router(unit_groups_router, prefix="/api")
app.include_router(economic_regions_router, prefix="/api")
app.include_router(programs_router, prefix="/api")
app.include_router(outlooks_router, prefix="/api")
app.include_router(ingest_router, prefix="/api")

init_scheduler(app)


@app.on_event("startup")
def _startup_db() -> None:
    create_all(engine)
    logger.info("[db] using %s", engine.url.render_as_string(hide_password=True))
    logger.info("[cors] allow_origins = %s", settings.cors_origins_list)
