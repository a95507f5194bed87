"""
Router pour les élèves de l'enseignant connecté.
CRUD complet, bascule de présence et fiche élève.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.student import (
    StudentCreate,
    StudentPatch,
    StudentProfile,
    StudentReplace,
    StudentResponse,
)
from app.services import student_service

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])

NOT_FOUND = "Élève introuvable ou vous n'avez pas accès à cet élève."


@router.get("", response_model=List[StudentResponse], summary="Lister mes élèves")
def list_students(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Retourne les élèves de l'enseignant connecté, triés par prénom."""
    return student_service.list_students(db, current_user.id)


@router.post("", response_model=StudentResponse, status_code=201, summary="Créer un élève")
def create_student(
    data: StudentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Crée un élève rattaché à l'enseignant connecté, présent par défaut."""
    return student_service.create_student(db, current_user.id, data)


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(
    student_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    student = student_service.get_student(db, current_user.id, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return student


@router.put("/{student_id}", response_model=StudentResponse, summary="Remplacer un élève")
def replace_student(
    student_id: uuid.UUID,
    data: StudentReplace,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Met à jour le prénom et l'initiale du nom (tous deux obligatoires)."""
    student = student_service.replace_student(db, current_user.id, student_id, data)
    if student is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return student


@router.patch("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
def patch_student(
    student_id: uuid.UUID,
    data: StudentPatch,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Met à jour les champs fournis (prénom, initiale, statut). Les champs absents ne sont pas modifiés."""
    student = student_service.patch_student(db, current_user.id, student_id, data)
    if student is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return student


@router.post("/{student_id}/toggle-status", response_model=StudentResponse, summary="Basculer la présence")
def toggle_status(
    student_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Bascule le statut de l'élève entre present et absent."""
    student = student_service.toggle_status(db, current_user.id, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return student


@router.delete("/{student_id}", status_code=204, summary="Supprimer un élève")
def delete_student(
    student_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Supprime définitivement un élève. Ses appartenances aux groupes sont supprimées en cascade."""
    if not student_service.delete_student(db, current_user.id, student_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)


@router.get("/{student_id}/profile", response_model=StudentProfile, summary="Fiche élève")
def get_student_profile(
    student_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Retourne l'élève, ses groupes, les projets de ces groupes, ses tâches et ses statistiques."""
    profile = student_service.get_student_profile(db, current_user.id, student_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return profile
