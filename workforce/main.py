import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from workforce.config import settings
from workforce.cron_jobs import scheduler
from workforce.db import ensure_indexes, ping_database
from workforce.routers import (auth, users, employees, leaves, admin_leaves, manager_leaves,
                               attendance, invoices, machines, epf, work_queries, supervisors)

UTC = timezone.utc

VERSION = "1.0.0"

PROD_MODE = settings.PRODUCTION_MODE

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_indexes()
    if settings.ENABLE_SCHEDULER:
        scheduler.start()
        logger.info("Scheduler started")
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)


app = FastAPI(title=settings.PROJECT_TITLE, version=VERSION, lifespan=lifespan)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(employees.router, prefix="/api/employees", tags=["employees"])
app.include_router(leaves.router, prefix="/api/leaves", tags=["leaves"])
app.include_router(admin_leaves.router, prefix="/api/admin-leaves", tags=["admin_leaves"])
app.include_router(manager_leaves.router, prefix="/api/manager-leaves", tags=["manager_leaves"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["invoices"])
app.include_router(machines.router, prefix="/api/machines", tags=["machines"])
app.include_router(epf.router, prefix="/api/epf", tags=["epf"])
app.include_router(work_queries.router, prefix="/api/work-queries", tags=["work_queries"])
app.include_router(supervisors.router, prefix="/api/supervisors", tags=["supervisors"])

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def disable_api_cache(request: Request, call_next):
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
    return response


def format_validation_errors(errors) -> list:
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": format_validation_errors(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": format_validation_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "error": str(exc)},
    )


@app.get("/")
async def index():
    database_connected = await ping_database()
    return {
        "message": f"{settings.PROJECT_TITLE} API is running",
        "version": VERSION,
        "database": "connected" if database_connected else "disconnected",
        "services": {
            "cloudinary": bool(settings.CLOUDINARY_CLOUD_NAME),
            "scheduler": settings.ENABLE_SCHEDULER,
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/api/health")
async def health_check():
    database_connected = await ping_database()
    return {
        "success": True,
        "status": "OK",
        "timestamp": datetime.now(UTC).isoformat(),
        "database": "connected" if database_connected else "disconnected",
    }


@app.get("/api/test")
async def api_test():
    return {"success": True, "message": "API is working", "timestamp": datetime.now(UTC).isoformat()}


if __name__ == "__main__":
    if PROD_MODE:
        # Run Uvicorn without reload in production
        uvicorn.run("workforce.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
    else:
        # Run Uvicorn with reload=True in development mode
        uvicorn.run("workforce.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
