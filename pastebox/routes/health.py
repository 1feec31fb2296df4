"""
Health check route.
"""
from fastapi import APIRouter, Depends

from pastebox.database import PasteDatabase
from pastebox.models import HealthCheck
from pastebox.routes.shared import get_db

router = APIRouter()


@router.get("/api/health", response_model=HealthCheck)
def health_check(db: PasteDatabase = Depends(get_db)) -> HealthCheck:
    """
    Health check endpoint.
    Returns ok=true if the storage backend answers.
    """
    return HealthCheck(ok=db.is_healthy())
