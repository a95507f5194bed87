"""
Service métier pour les projets.
Seuls les enseignants du groupe d'un projet peuvent le consulter ou le modifier.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import InvalidDataError, NotFoundError
from app.models.group import Group
from app.models.project import Project
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.permissions import (
    load_project_for_teacher,
    require_group_teacher,
    teacher_group_ids,
)

logger = logging.getLogger(__name__)

# completed/archived → active, active → completed
STATUS_TOGGLE = {"active": "completed", "completed": "active", "archived": "active"}


def list_projects(db: Session, user_id: uuid.UUID, group_id: Optional[uuid.UUID] = None) -> list[Project]:
    """Projets des groupes de l'enseignant, du plus récent au plus ancien."""
    group_ids = teacher_group_ids(db, user_id)
    if group_id is not None:
        group_ids = [gid for gid in group_ids if gid == group_id]
    if not group_ids:
        return []

    return list(db.execute(
        select(Project)
        .where(Project.group_id.in_(group_ids))
        .order_by(Project.created_at.desc())
    ).scalars().all())


def create_project(db: Session, user_id: uuid.UUID, data: ProjectCreate) -> Project:
    """Crée un projet dans un groupe. Réservé aux enseignants du groupe."""
    if db.get(Group, data.group_id) is None:
        raise NotFoundError("Groupe introuvable.")
    require_group_teacher(
        db, data.group_id, user_id, "Seuls les enseignants du groupe peuvent créer un projet."
    )

    project = Project(
        group_id=data.group_id,
        title=data.title,
        description=data.description,
        status=data.status,
        created_by=user_id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Projet créé : %s (%s) dans le groupe %s", project.title, project.id, project.group_id)
    return project


def get_project(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> Optional[Project]:
    """Retourne un projet, ou None s'il n'existe pas."""
    try:
        return load_project_for_teacher(db, project_id, user_id)
    except NotFoundError:
        return None


def update_project(
    db: Session, user_id: uuid.UUID, project_id: uuid.UUID, data: ProjectUpdate
) -> Optional[Project]:
    """Met à jour les champs fournis d'un projet."""
    project = get_project(db, user_id, project_id)
    if project is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field in ("title", "status"):
        if field in update_data and update_data[field] is None:
            raise InvalidDataError(f"Le champ '{field}' ne peut pas être nul.")
    for field, value in update_data.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)
    return project


def toggle_project_status(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> Optional[Project]:
    """Bascule le statut active ↔ completed (un projet archivé redevient actif)."""
    project = get_project(db, user_id, project_id)
    if project is None:
        return None
    project.status = STATUS_TOGGLE.get(project.status, "active")
    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    """Supprime un projet et, en cascade, ses tâches et liaisons de ressources."""
    project = get_project(db, user_id, project_id)
    if project is None:
        return False
    db.delete(project)
    db.commit()
    logger.info("Projet supprimé : %s", project_id)
    return True
