"""
Service métier pour les groupes et leurs membres.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, InvalidDataError, NotFoundError
from app.models.group import Group, GroupMember
from app.models.student import Student
from app.models.user import User
from app.schemas.group import (
    GroupCreate,
    GroupMemberCreate,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
)
from app.services.permissions import load_group_for_teacher, teacher_group_ids

logger = logging.getLogger(__name__)


def list_groups(db: Session, user_id: uuid.UUID) -> list[GroupResponse]:
    """
    Groupes dont l'utilisateur est enseignant, du plus récent au plus ancien.
    Un créateur retiré des enseignants de son groupe ne le voit plus.
    """
    group_ids = teacher_group_ids(db, user_id)
    if not group_ids:
        return []
    groups = db.execute(
        select(Group)
        .where(Group.id.in_(group_ids))
        .order_by(Group.created_at.desc())
    ).scalars().all()
    return [_to_response(db, g) for g in groups]


def create_group(db: Session, user_id: uuid.UUID, data: GroupCreate) -> GroupResponse:
    """
    Crée un groupe et y inscrit automatiquement son créateur comme enseignant.
    """
    group = Group(name=data.name, description=data.description, created_by=user_id)
    db.add(group)
    db.flush()  # Obtenir l'ID avant d'insérer le membre

    db.add(GroupMember(group_id=group.id, user_id=user_id, role="teacher"))
    db.commit()
    db.refresh(group)

    logger.info("Groupe créé : %s (%s) par %s", group.name, group.id, user_id)
    return _to_response(db, group)


def get_group(db: Session, user_id: uuid.UUID, group_id: uuid.UUID) -> Optional[GroupResponse]:
    """Retourne un groupe, ou None s'il n'existe pas. ForbiddenError si non membre."""
    group = db.get(Group, group_id)
    if group is None:
        return None
    load_group_for_teacher(db, group_id, user_id)
    return _to_response(db, group)


def update_group(
    db: Session, user_id: uuid.UUID, group_id: uuid.UUID, data: GroupUpdate
) -> Optional[GroupResponse]:
    """Met à jour les champs fournis d'un groupe."""
    group = db.get(Group, group_id)
    if group is None:
        return None
    load_group_for_teacher(db, group_id, user_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        raise InvalidDataError("Le nom du groupe est obligatoire.")
    for field, value in update_data.items():
        setattr(group, field, value)

    db.commit()
    db.refresh(group)
    return _to_response(db, group)


def delete_group(db: Session, user_id: uuid.UUID, group_id: uuid.UUID) -> bool:
    """
    Supprime un groupe. Ses membres, projets et tâches sont supprimés en cascade.
    Retourne True si supprimé, False si introuvable.
    """
    group = db.get(Group, group_id)
    if group is None:
        return False
    load_group_for_teacher(db, group_id, user_id)

    db.delete(group)
    db.commit()
    logger.info("Groupe supprimé : %s par %s", group_id, user_id)
    return True


# --- Membres ---

def list_members(db: Session, user_id: uuid.UUID, group_id: uuid.UUID) -> list[GroupMemberResponse]:
    """Membres du groupe avec leur nom d'affichage, par ordre d'arrivée."""
    load_group_for_teacher(db, group_id, user_id)

    rows = db.execute(
        select(GroupMember, User, Student)
        .outerjoin(User, User.id == GroupMember.user_id)
        .outerjoin(Student, Student.id == GroupMember.student_id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.created_at)
    ).all()
    return [_member_response(m, u, s) for m, u, s in rows]


def add_member(
    db: Session, user_id: uuid.UUID, group_id: uuid.UUID, data: GroupMemberCreate
) -> GroupMemberResponse:
    """
    Ajoute un enseignant ou un élève au groupe.

    Validations :
    1. Le groupe existe et l'utilisateur courant y enseigne
    2. L'enseignant ou l'élève ciblé existe
    3. Il n'est pas déjà membre du groupe
    """
    load_group_for_teacher(db, group_id, user_id)

    teacher = student = None
    if data.role == "teacher":
        teacher = db.get(User, data.user_id)
        if teacher is None:
            raise NotFoundError("Enseignant introuvable.")
        target = GroupMember.user_id == data.user_id
    else:
        student = db.get(Student, data.student_id)
        if student is None or student.teacher_id != user_id:
            raise NotFoundError("Élève introuvable.")
        target = GroupMember.student_id == data.student_id

    existing = db.execute(
        select(GroupMember.id)
        .where(GroupMember.group_id == group_id, target)
    ).scalar()
    if existing is not None:
        raise ConflictError("Ce membre fait déjà partie du groupe.")

    member = GroupMember(
        group_id=group_id,
        role=data.role,
        user_id=data.user_id if data.role == "teacher" else None,
        student_id=data.student_id if data.role == "student" else None,
    )
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Ce membre fait déjà partie du groupe.")
    db.refresh(member)

    logger.info("Membre %s (%s) ajouté au groupe %s", member.id, data.role, group_id)
    return _member_response(member, teacher, student)


def remove_member(db: Session, user_id: uuid.UUID, group_id: uuid.UUID, member_id: uuid.UUID) -> bool:
    """Retire un membre du groupe. Retourne False si le lien n'existe pas."""
    load_group_for_teacher(db, group_id, user_id)

    member = db.get(GroupMember, member_id)
    if member is None or member.group_id != group_id:
        return False
    db.delete(member)
    db.commit()
    logger.info("Membre %s retiré du groupe %s", member_id, group_id)
    return True


def _member_response(
    member: GroupMember, teacher: Optional[User], student: Optional[Student]
) -> GroupMemberResponse:
    """Construit la réponse membre avec le nom de l'enseignant ou de l'élève."""
    response = GroupMemberResponse(
        id=member.id,
        group_id=member.group_id,
        role=member.role,
        user_id=member.user_id,
        student_id=member.student_id,
        created_at=member.created_at,
    )
    if member.role == "teacher" and teacher is not None:
        response.first_name = teacher.first_name or "Inconnu"
        response.last_name = teacher.last_name or ""
    elif member.role == "student" and student is not None:
        response.first_name = student.first_name or "Inconnu"
        response.last_initial = student.last_initial or ""
    return response


def _to_response(db: Session, group: Group) -> GroupResponse:
    """Construit le schéma de réponse avec les compteurs enseignants et élèves."""
    counts = dict(db.execute(
        select(GroupMember.role, func.count())
        .where(GroupMember.group_id == group.id)
        .group_by(GroupMember.role)
    ).all())

    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        created_by=group.created_by,
        nb_teachers=counts.get("teacher", 0),
        nb_students=counts.get("student", 0),
        created_at=group.created_at,
        updated_at=group.updated_at,
    )
