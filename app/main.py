from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import ConflictError, EntityNotFound
from app.core.logging_config import setup_json_logger
from app.core.request_logger import ContextLoggingMiddleware, RequestLoggingMiddleware
from app.core.tracing import configure_tracing
from app.database import Base, engine, get_db
from app.models import event, meeting, task, user  # noqa: F401  registers tables
from app.routes import auth, event_controller, meeting_controller, report_controller, task_controller, user_controller


logger = setup_json_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    logger.info("🚀 Productivity tracker starting up")
    configure_tracing()
    Base.metadata.create_all(bind=engine)
    logger.info("✅ Database initialized")

    yield

    # --- Shutdown ---
    logger.info("🛑 Productivity tracker shutting down")
    engine.dispose()
    logger.info("🛑 Database engine disposed")


app = FastAPI(
    title="Productivity Tracker API",
    description="Users, tasks, meetings, focus sessions and productivity reports.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    redoc_url=None,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ContextLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EntityNotFound)
async def entity_not_found_handler(request: Request, exc: EntityNotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": f"{exc.resource} not found", "id": str(exc.entity_id)},
    )


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": str(exc), "id": str(exc.entity_id)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"method": request.method, "path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get("/api/health", name="Health")
def health(db: Session = Depends(get_db)):
    """Liveness plus a database round trip."""
    db_status = "Healthy"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check failed", extra={"check": "database", "error": str(e)})
        db_status = "Unhealthy"

    body = {
        "status": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": [{"name": "database", "status": db_status}],
    }
    code = status.HTTP_200_OK if db_status == "Healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=body)


# Include routers
app.include_router(auth.router, prefix="/api/v1", tags=["Auth"])
app.include_router(user_controller.router, prefix="/api/v1", tags=["Users"])
app.include_router(task_controller.router, prefix="/api/v1", tags=["Tasks"])
app.include_router(meeting_controller.router, prefix="/api/v1", tags=["Meetings"])
app.include_router(event_controller.router, prefix="/api/v1", tags=["Events"])
app.include_router(report_controller.router, prefix="/api/v1", tags=["Report"])
