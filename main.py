# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Selection Service
=================
Computes fair turn orders for stable routine selection processes
(quota-based draft, points balance, fair rotation, manual) and keeps the
rotation history those algorithms learn from.

Port: 8010
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from selection_service.controllers import history_controller, selection_controller, system_controller
from selection_service.core.config import settings
from selection_service.core.database import engine
from selection_service.core.dependencies import get_directory_repo, get_work_item_repo
from selection_service.core.logging import get_logger
from selection_service.middleware import MetricsMiddleware, RequestIDMiddleware
from selection_service.repositories.schema import create_schema
from selection_service.services.demo_seed import seed_demo_data

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    if engine is not None:
        create_schema(engine)
    directory = get_directory_repo()
    if settings.SEED_DEMO_DATA and directory.count() == 0:
        seed_demo_data(directory, get_work_item_repo())
    logger.info(
        "Selection service starting: storage=%s, collation=%s",
        "sql" if engine is not None else "memory", settings.COLLATION_LOCALE,
    )
    yield
    if engine is not None:
        engine.dispose()
    logger.info("Shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Selection Service",
    description="Fair turn-order computation and rotation history for stable routine selection.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Global exception handler ─────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(selection_controller.router)
app.include_router(history_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
