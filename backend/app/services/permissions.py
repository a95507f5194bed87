"""
Contrôles d'accès partagés par les services.

Les règles appliquées ici correspondent aux politiques de sécurité par ligne :
un enseignant n'agit que sur les groupes dont il est membre avec le rôle
'teacher', et sur les élèves qu'il a créés.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import ForbiddenError, NotFoundError
from app.models.group import Group, GroupMember
from app.models.project import Project

logger = logging.getLogger(__name__)


def get_membership(db: Session, group_id: uuid.UUID, user_id: uuid.UUID) -> Optional[GroupMember]:
    """Retourne l'appartenance de l'enseignant au groupe, ou None."""
    return db.execute(
        select(GroupMember)
        .where(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id,
        )
    ).scalar()


def require_group_teacher(
    db: Session,
    group_id: uuid.UUID,
    user_id: uuid.UUID,
    message: str = "Vous n'êtes pas enseignant de ce groupe.",
) -> None:
    """Lève une ForbiddenError si l'utilisateur n'est pas enseignant du groupe."""
    membership = get_membership(db, group_id, user_id)
    if membership is None or membership.role != "teacher":
        logger.warning("Accès refusé : utilisateur %s sur le groupe %s", user_id, group_id)
        raise ForbiddenError(message)


def teacher_group_ids(db: Session, user_id: uuid.UUID) -> list[uuid.UUID]:
    """IDs des groupes dont l'utilisateur est enseignant."""
    return list(db.execute(
        select(GroupMember.group_id)
        .where(
            GroupMember.user_id == user_id,
            GroupMember.role == "teacher",
        )
    ).scalars().all())


def is_teacher_anywhere(db: Session, user_id: uuid.UUID) -> bool:
    """Vrai si l'utilisateur enseigne dans au moins un groupe."""
    return db.execute(
        select(GroupMember.id)
        .where(
            GroupMember.user_id == user_id,
            GroupMember.role == "teacher",
        )
        .limit(1)
    ).scalar() is not None


def load_group_for_teacher(db: Session, group_id: uuid.UUID, user_id: uuid.UUID) -> Group:
    """Charge un groupe et vérifie l'accès. NotFoundError / ForbiddenError sinon."""
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Groupe introuvable.")
    require_group_teacher(db, group_id, user_id)
    return group


def load_project_for_teacher(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> Project:
    """Charge un projet et vérifie que l'utilisateur enseigne dans son groupe."""
    project = db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Projet introuvable.")
    require_group_teacher(
        db, project.group_id, user_id, "Vous n'avez pas accès à ce projet."
    )
    return project
