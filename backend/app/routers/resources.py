"""
Router pour les ressources (liens et images).
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.resource import ResourceCreate, ResourceResponse, ResourceUpdate
from app.services import resource_service

router = APIRouter(prefix="/api/v1/resources", tags=["Ressources"])


@router.get("", response_model=List[ResourceResponse], summary="Lister les ressources")
def list_resources(
    group_id: Optional[str] = None,
    type: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retourne les ressources visibles, de la plus récente à la plus ancienne.

    Filtres :
    - `group_id` : `all`, `global` (ni groupe ni élève) ou l'UUID d'un groupe
    - `type` : `link` ou `image`
    - `search` : titre, description ou URL
    """
    return resource_service.list_resources(db, current_user.id, group_id, type, search)


@router.post("", response_model=ResourceResponse, status_code=201, summary="Créer une ressource")
def create_resource(
    data: ResourceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Crée une ressource. Réservé aux enseignants ; un lien doit être une URL http(s) absolue."""
    return resource_service.create_resource(db, current_user.id, data)


@router.get("/{resource_id}", response_model=ResourceResponse, summary="Détail d'une ressource")
def get_resource(
    resource_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resource = resource_service.get_resource(db, current_user.id, resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Ressource introuvable.")
    return resource


@router.put("/{resource_id}", response_model=ResourceResponse, summary="Modifier une ressource")
def update_resource(
    resource_id: uuid.UUID,
    data: ResourceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    resource = resource_service.update_resource(db, current_user.id, resource_id, data)
    if resource is None:
        raise HTTPException(status_code=404, detail="Ressource introuvable.")
    return resource


@router.delete("/{resource_id}", status_code=204, summary="Supprimer une ressource")
def delete_resource(
    resource_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Supprime une ressource et ses liaisons aux projets."""
    if not resource_service.delete_resource(db, current_user.id, resource_id):
        raise HTTPException(status_code=404, detail="Ressource introuvable.")
