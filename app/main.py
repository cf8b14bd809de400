# /app/main.py

# --- Core FastAPI Imports ---
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

# --- Application-specific Imports ---
from .core import config
from .core.exceptions import GradingError
from .db.base import Base
from .db.database import engine
from .routers import (
    assignments_router,
    submissions_router,
    evaluations_router,
    assessments_router,
    signatures_router,
    functions_router,
)

# The blob store directory must exist before StaticFiles is mounted on it.
STORAGE_ROOT = config.get_storage_root()
os.makedirs(STORAGE_ROOT, exist_ok=True)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs ONCE at startup. Alembic owns schema changes in production; this
    # only creates tables that do not exist yet.
    Base.metadata.create_all(bind=engine)
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Grading Assistant API",
    description="Assignment submission, AI evaluation and publishing backend.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Rendering ---
@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    print(f"ERROR handling {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# --- API Router Inclusion ---
app.include_router(assignments_router.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(submissions_router.router, prefix="/api/submissions", tags=["Submissions"])
app.include_router(evaluations_router.router, prefix="/api/evaluations", tags=["Evaluations"])
app.include_router(assessments_router.router, prefix="/api/assessments", tags=["Assessments"])
app.include_router(signatures_router.router, prefix="/api/signatures", tags=["Signatures"])
app.include_router(functions_router.router, prefix="/api/functions", tags=["AI Functions"])

# --- Read-only object storage ---
app.mount("/files", StaticFiles(directory=STORAGE_ROOT), name="files")


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Grading Assistant API is running!", "version": app.version}
