"""
Router pour l'annuaire des enseignants.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import TeacherSummary
from app.services import auth_service

router = APIRouter(prefix="/api/v1/teachers", tags=["Enseignants"])


@router.get("", response_model=List[TeacherSummary], summary="Lister les enseignants")
def list_teachers(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Retourne les enseignants triés par prénom, filtrés par nom ou email si `search` est fourni."""
    return auth_service.list_teachers(db, search)
