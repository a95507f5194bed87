"""
Router d'administration (comptes administrateurs uniquement).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.admin import AdminStats
from app.services import admin_service

router = APIRouter(prefix="/api/v1/admin", tags=["Administration"])


@router.get("/stats", response_model=AdminStats, summary="Statistiques globales")
def get_stats(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Nombre d'élèves total, par enseignant et par statut."""
    return admin_service.get_stats(db)
