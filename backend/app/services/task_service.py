"""
Service métier pour les tâches d'un projet.

Une tâche est assignée au plus à une personne : un enseignant (assignee_id)
ou un élève (student_assignee_id), jamais les deux. La personne assignée doit
être membre, avec le rôle correspondant, du groupe auquel appartient le projet.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import InvalidDataError
from app.models.group import GroupMember
from app.models.project import Project, Task
from app.models.student import Student
from app.models.user import User
from app.schemas.project import TaskAssignee, TaskCreate, TaskResponse, TaskUpdate
from app.services.permissions import load_project_for_teacher

logger = logging.getLogger(__name__)


def list_tasks(db: Session, user_id: uuid.UUID, project_id: uuid.UUID) -> list[TaskResponse]:
    """Tâches du projet, de la plus ancienne à la plus récente, avec la personne assignée."""
    load_project_for_teacher(db, project_id, user_id)

    rows = db.execute(
        select(Task, User, Student)
        .outerjoin(User, User.id == Task.assignee_id)
        .outerjoin(Student, Student.id == Task.student_assignee_id)
        .where(Task.project_id == project_id)
        .order_by(Task.created_at)
    ).all()
    return [_to_response(t, u, s) for t, u, s in rows]


def create_task(db: Session, user_id: uuid.UUID, project_id: uuid.UUID, data: TaskCreate) -> TaskResponse:
    """Crée une tâche. Réservé aux enseignants du groupe du projet."""
    project = load_project_for_teacher(db, project_id, user_id)

    task = Task(
        id=uuid.uuid4(),
        project_id=project.id,
        title=data.title,
        description=data.description,
        status=data.status,
    )
    teacher, student = _reconcile_assignee(db, task, project, data)

    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Tâche créée : %s dans le projet %s", task.id, project.id)
    return _to_response(task, teacher, student)


def get_task(
    db: Session, user_id: uuid.UUID, project_id: uuid.UUID, task_id: uuid.UUID
) -> Optional[TaskResponse]:
    load_project_for_teacher(db, project_id, user_id)
    task = _get_project_task(db, project_id, task_id)
    if task is None:
        return None
    return _to_response(task, *_load_assignee(db, task))


def update_task(
    db: Session, user_id: uuid.UUID, project_id: uuid.UUID, task_id: uuid.UUID, data: TaskUpdate
) -> Optional[TaskResponse]:
    """
    Met à jour les champs fournis d'une tâche.
    Si un champ d'assignation est présent, l'assignation complète est recalculée.
    """
    project = load_project_for_teacher(db, project_id, user_id)
    task = _get_project_task(db, project_id, task_id)
    if task is None:
        return None

    update_data = data.model_dump(
        exclude_unset=True,
        exclude={"assignee_type", "assignee_id", "student_assignee_id"},
    )
    for field in ("title", "status"):
        if field in update_data and update_data[field] is None:
            raise InvalidDataError(f"Le champ '{field}' ne peut pas être nul.")
    for field, value in update_data.items():
        setattr(task, field, value)

    if data.touches_assignee:
        teacher, student = _reconcile_assignee(db, task, project, data)
    else:
        teacher, student = _load_assignee(db, task)

    db.commit()
    db.refresh(task)
    return _to_response(task, teacher, student)


def delete_task(db: Session, user_id: uuid.UUID, project_id: uuid.UUID, task_id: uuid.UUID) -> bool:
    load_project_for_teacher(db, project_id, user_id)
    task = _get_project_task(db, project_id, task_id)
    if task is None:
        return False
    db.delete(task)
    db.commit()
    logger.info("Tâche supprimée : %s", task_id)
    return True


def _get_project_task(db: Session, project_id: uuid.UUID, task_id: uuid.UUID) -> Optional[Task]:
    task = db.get(Task, task_id)
    if task is None or task.project_id != project_id:
        return None
    return task


def _reconcile_assignee(db: Session, task: Task, project: Project, data):
    """
    Applique l'assignation demandée à la tâche.

    - assignee_id fourni : vérifie que c'est un enseignant du groupe, vide student_assignee_id
    - student_assignee_id fourni : vérifie que c'est un élève du groupe, vide assignee_id
    - aucun identifiant : la tâche devient non assignée

    Retourne le couple (enseignant, élève) assigné, l'un des deux au moins étant None.
    """
    if data.assignee_id is not None:
        _require_member(db, project.group_id, "teacher", data.assignee_id)
        task.assignee_type = "teacher"
        task.assignee_id = data.assignee_id
        task.student_assignee_id = None
        logger.info("Tâche %s assignée à l'enseignant %s", task.id, data.assignee_id)
        return db.get(User, data.assignee_id), None

    if data.student_assignee_id is not None:
        _require_member(db, project.group_id, "student", data.student_assignee_id)
        task.assignee_type = "student"
        task.assignee_id = None
        task.student_assignee_id = data.student_assignee_id
        logger.info("Tâche %s assignée à l'élève %s", task.id, data.student_assignee_id)
        return None, db.get(Student, data.student_assignee_id)

    if data.assignee_type is not None:
        raise InvalidDataError(
            f"Un identifiant est requis pour une assignation de type '{data.assignee_type}'."
        )

    task.assignee_type = None
    task.assignee_id = None
    task.student_assignee_id = None
    return None, None


def _require_member(db: Session, group_id: uuid.UUID, role: str, member_id: uuid.UUID) -> None:
    """Lève une InvalidDataError si la personne n'est pas membre du groupe avec ce rôle."""
    column = GroupMember.user_id if role == "teacher" else GroupMember.student_id
    membership = db.execute(
        select(GroupMember.id)
        .where(
            GroupMember.group_id == group_id,
            GroupMember.role == role,
            column == member_id,
        )
    ).scalar()
    if membership is None:
        label = "L'enseignant assigné" if role == "teacher" else "L'élève assigné"
        raise InvalidDataError(f"{label} n'est pas membre de ce groupe.")


def _load_assignee(db: Session, task: Task):
    teacher = db.get(User, task.assignee_id) if task.assignee_id else None
    student = db.get(Student, task.student_assignee_id) if task.student_assignee_id else None
    return teacher, student


def _to_response(task: Task, teacher: Optional[User], student: Optional[Student]) -> TaskResponse:
    """Construit le schéma de réponse avec le résumé de la personne assignée."""
    assignee = None
    if task.assignee_type == "teacher" and teacher is not None:
        assignee = TaskAssignee(
            id=teacher.id,
            role="teacher",
            first_name=teacher.first_name or "Inconnu",
            last_name=teacher.last_name or "",
        )
    elif task.assignee_type == "student" and student is not None:
        assignee = TaskAssignee(
            id=student.id,
            role="student",
            first_name=student.first_name or "Inconnu",
            last_initial=student.last_initial or "",
        )

    return TaskResponse(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        status=task.status,
        assignee_type=task.assignee_type,
        assignee_id=task.assignee_id,
        student_assignee_id=task.student_assignee_id,
        assignee=assignee,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
