from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayll.core.config import settings
from stayll.core.logging import get_logger
from stayll.db.base import get_db
from stayll.api.generation import ProviderOrchestrator, get_orchestrator

logger = get_logger(__name__)
router = APIRouter()

@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    logger.info("Health check requested")
    return {"status": "healthy", "service": settings.PROJECT_NAME}

@router.get("/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    orchestrator: ProviderOrchestrator = Depends(get_orchestrator),
):
    """Database connectivity and which generation providers have credentials."""
    logger.info("Detailed health check requested")

    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        database = "unavailable"

    configured = orchestrator.configured_providers()
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "components": {
            "database": database,
            "providers": {
                provider.name: "configured" if provider.is_configured else "not_configured"
                for provider in orchestrator.providers
            },
            "generation": "provider" if configured else "template_only",
        }
    }
