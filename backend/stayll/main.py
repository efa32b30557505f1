"""
Main application entry point
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import router as api_router
from .core.config import settings
from .core.exceptions import StayllException, error_body
from .core.logging import setup_logging, get_logger
from .db.init_db import init_db

# Set up logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="AI listing generation and listing engagement analytics for rental properties",
    version=settings.VERSION
)

# Get CORS origins from settings
cors_origins = settings.get_cors_origins()
logger.info("Configuring CORS", allowed_origins=cors_origins)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.exception_handler(StayllException)
async def stayll_exception_handler(request: Request, exc: StayllException):
    if exc.status_code >= 500:
        logger.error("Request failed",
                    path=request.url.path,
                    error_code=exc.error_code,
                    error=exc.message,
                    cause=repr(exc.__cause__) if exc.__cause__ else None)
    else:
        logger.info("Request rejected",
                   path=request.url.path,
                   status_code=exc.status_code,
                   error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    logger.info("Request validation failed", path=request.url.path, error=message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting application")
    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error("Startup failed", error=str(e))
        # Continue startup even if database initialization fails


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
