from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.orm import Session
from storefront.db.database import get_db
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

SERVICE_NAME = "storefront-service"
SERVICE_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status", example="healthy")
    service: str = Field(..., description="Service name", example=SERVICE_NAME)
    version: str = Field(..., description="Service version", example=SERVICE_VERSION)
    database: str = Field(..., description="Database reachability", example="ok")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="""
    Health check endpoint for monitoring and load balancer health checks.

    Reports `degraded` when the database cannot be reached.
    """
)
async def health(db: Session = Depends(get_db)):
    """Health check endpoint"""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"Health check database query failed: {e}")
        database = "unreachable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        database=database
    )
