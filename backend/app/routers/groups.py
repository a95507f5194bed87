"""
Router pour les groupes et la gestion de leurs membres.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.group import (
    GroupCreate,
    GroupMemberCreate,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
)
from app.services import group_service

router = APIRouter(prefix="/api/v1/groups", tags=["Groupes"])


@router.get("", response_model=List[GroupResponse], summary="Lister mes groupes")
def list_groups(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Retourne les groupes où l'enseignant connecté enseigne, du plus récent au plus ancien."""
    return group_service.list_groups(db, current_user.id)


@router.post("", response_model=GroupResponse, status_code=201, summary="Créer un groupe")
def create_group(
    data: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Crée un groupe ; le créateur en devient automatiquement enseignant."""
    return group_service.create_group(db, current_user.id, data)


@router.get("/{group_id}", response_model=GroupResponse, summary="Détail d'un groupe")
def get_group(
    group_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = group_service.get_group(db, current_user.id, group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Groupe introuvable.")
    return group


@router.put("/{group_id}", response_model=GroupResponse, summary="Modifier un groupe")
def update_group(
    group_id: uuid.UUID,
    data: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = group_service.update_group(db, current_user.id, group_id, data)
    if group is None:
        raise HTTPException(status_code=404, detail="Groupe introuvable.")
    return group


@router.delete("/{group_id}", status_code=204, summary="Supprimer un groupe")
def delete_group(
    group_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Supprime un groupe définitivement. Les membres et projets sont supprimés en cascade."""
    if not group_service.delete_group(db, current_user.id, group_id):
        raise HTTPException(status_code=404, detail="Groupe introuvable.")


# --- Gestion des membres ---

@router.get("/{group_id}/members", response_model=List[GroupMemberResponse], summary="Lister les membres")
def list_members(
    group_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.list_members(db, current_user.id, group_id)


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=201,
             summary="Ajouter un membre")
def add_member(
    group_id: uuid.UUID,
    data: GroupMemberCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Ajoute un enseignant (role=teacher, user_id) ou un élève (role=student, student_id).
    Un membre déjà présent → 409.
    """
    return group_service.add_member(db, current_user.id, group_id, data)


@router.delete("/{group_id}/members/{member_id}", status_code=204, summary="Retirer un membre")
def remove_member(
    group_id: uuid.UUID,
    member_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not group_service.remove_member(db, current_user.id, group_id, member_id):
        raise HTTPException(status_code=404, detail="Membre introuvable dans ce groupe.")
