"""
Router pour les projets, leurs tâches et les ressources qui leur sont liées.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from app.schemas.resource import (
    LinkedResourceResponse,
    ProjectResourceLink,
    ProjectResourceLinkResponse,
)
from app.services import project_service, resource_service, task_service

router = APIRouter(prefix="/api/v1/projects", tags=["Projets"])


@router.get("", response_model=List[ProjectResponse], summary="Lister les projets")
def list_projects(
    group_id: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Retourne les projets des groupes de l'enseignant, filtrables par groupe."""
    return project_service.list_projects(db, current_user.id, group_id)


@router.post("", response_model=ProjectResponse, status_code=201, summary="Créer un projet")
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Crée un projet. Seuls les enseignants du groupe peuvent le faire (403 sinon)."""
    return project_service.create_project(db, current_user.id, data)


@router.get("/{project_id}", response_model=ProjectResponse, summary="Détail d'un projet")
def get_project(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = project_service.get_project(db, current_user.id, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Projet introuvable.")
    return project


@router.put("/{project_id}", response_model=ProjectResponse, summary="Modifier un projet")
def update_project(
    project_id: uuid.UUID,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = project_service.update_project(db, current_user.id, project_id, data)
    if project is None:
        raise HTTPException(status_code=404, detail="Projet introuvable.")
    return project


@router.post("/{project_id}/toggle-status", response_model=ProjectResponse, summary="Basculer le statut")
def toggle_project_status(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Bascule le projet entre active et completed."""
    project = project_service.toggle_project_status(db, current_user.id, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Projet introuvable.")
    return project


@router.delete("/{project_id}", status_code=204, summary="Supprimer un projet")
def delete_project(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not project_service.delete_project(db, current_user.id, project_id):
        raise HTTPException(status_code=404, detail="Projet introuvable.")


# --- Tâches ---

@router.get("/{project_id}/tasks", response_model=List[TaskResponse], summary="Lister les tâches")
def list_tasks(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return task_service.list_tasks(db, current_user.id, project_id)


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=201, summary="Créer une tâche")
def create_task(
    project_id: uuid.UUID,
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Crée une tâche, éventuellement assignée.

    Contraintes :
    - Un enseignant (assignee_id) OU un élève (student_assignee_id), jamais les deux
    - La personne assignée doit être membre du groupe du projet avec ce rôle
    """
    return task_service.create_task(db, current_user.id, project_id, data)


@router.get("/{project_id}/tasks/{task_id}", response_model=TaskResponse, summary="Détail d'une tâche")
def get_task(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.get_task(db, current_user.id, project_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Tâche introuvable.")
    return task


@router.put("/{project_id}/tasks/{task_id}", response_model=TaskResponse, summary="Modifier une tâche")
def update_task(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Met à jour les champs fournis.
    Un champ d'assignation présent (même null) recalcule toute l'assignation.
    """
    task = task_service.update_task(db, current_user.id, project_id, task_id, data)
    if task is None:
        raise HTTPException(status_code=404, detail="Tâche introuvable.")
    return task


@router.delete("/{project_id}/tasks/{task_id}", status_code=204, summary="Supprimer une tâche")
def delete_task(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not task_service.delete_task(db, current_user.id, project_id, task_id):
        raise HTTPException(status_code=404, detail="Tâche introuvable.")


# --- Ressources liées ---

@router.get("/{project_id}/resources", response_model=List[LinkedResourceResponse],
            summary="Ressources liées au projet")
def list_project_resources(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return resource_service.list_project_resources(db, current_user.id, project_id)


@router.post("/{project_id}/resources", response_model=ProjectResourceLinkResponse, status_code=201,
             summary="Lier une ressource")
def link_resource(
    project_id: uuid.UUID,
    data: ProjectResourceLink,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Lie une ressource existante au projet. Déjà liée → 409."""
    return resource_service.link_resource(db, current_user.id, project_id, data.resource_id)


@router.delete("/{project_id}/resources/{resource_id}", status_code=204, summary="Délier une ressource")
def unlink_resource(
    project_id: uuid.UUID,
    resource_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not resource_service.unlink_resource(db, current_user.id, project_id, resource_id):
        raise HTTPException(status_code=404, detail="Cette ressource n'est pas liée à ce projet.")
