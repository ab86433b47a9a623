"""FastAPI application entry point."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from app.core.database import engine, Base, SessionLocal
from app.core.exceptions import PolicyServiceError
from app.core.logging_config import logger
from app.api.v1.router import api_router
from app.services.cache import POLICY_CACHE

SERVICE_NAME = "Auto Policy Service"
SERVICE_VERSION = "1.0.0"

logger.info(f"Starting {SERVICE_NAME}")

# Create database tables
try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize database tables: {e}")
    raise

app = FastAPI(
    title=SERVICE_NAME,
    description="Auto insurance policy records behind read-through cache regions and dynamic filters",
    version=SERVICE_VERSION
)

# CORS for the local front-ends
origins = [
    "http://localhost:4200",
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
logger.info("API routes registered successfully")


@app.exception_handler(PolicyServiceError)
async def policy_service_error_handler(request: Request, exc: PolicyServiceError):
    """Render every service error as a structured body with its own status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.get("/", tags=["Health"])
def read_root():
    """Basic health check endpoint."""
    return {"status": f"{SERVICE_NAME} is Operational", "docs": "/docs"}


@app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
def health_check():
    """Detailed health check endpoint with database and cache status."""
    health_status = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "checks": {}
    }

    # Database connectivity check
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }
        logger.error(f"Database health check failed: {e}")
    finally:
        db.close()

    # Cache regions are in-process; report their sizes
    health_status["checks"]["cache"] = {
        "status": "healthy",
        "message": "Cache operational",
        "regions": {name: stats["size"] for name, stats in POLICY_CACHE.stats().items()}
    }

    status_code = status.HTTP_200_OK
    if health_status["status"] == "degraded":
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(content=health_status, status_code=status_code)
