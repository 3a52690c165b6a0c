"""
FastAPI application entry point
"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_analyzer.app.api.v1 import resume
from resume_analyzer.app.core.config import settings
from resume_analyzer.app.core.exceptions import AnalysisError
from resume_analyzer.app.core.logging_config import get_logger, setup_logging
from resume_analyzer.app.db.base import Base
from resume_analyzer.app.db.session import engine

# Import models so they register with Base.metadata
import resume_analyzer.app.models  # noqa: F401

setup_logging()
logger = get_logger("main")

# Create database tables (alembic owns migrations; this covers fresh local DBs)
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error("Database error: %s", e)

# Initialize FastAPI app
app = FastAPI(
    title="Resume Analyzer API",
    description="Upload resumes and get structured AI feedback",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    """Render pipeline/record errors as {success: false, message, error}."""
    if exc.status_code >= 500:
        logger.error("%s %s failed status=%d error=%s detail=%s", request.method, request.url.path, exc.status_code, type(exc).__name__, exc.detail)
    else:
        logger.info("%s %s rejected status=%d error=%s", request.method, request.url.path, exc.status_code, type(exc).__name__)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "error": exc.detail},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed path, query or form parameters get the same envelope as pipeline errors."""
    logger.info("%s %s rejected status=422 error=RequestValidationError", request.method, request.url.path)
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request", "error": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "error": None},
        headers=getattr(exc, "headers", None),
    )


# Include routers
app.include_router(resume.router, prefix="/api/resume", tags=["resume"])


@app.get("/")
def read_root():
    """Root endpoint"""
    return {"message": "Resume Analyzer API", "version": settings.app_version}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
